# ftl_backend/services/notification_service.py
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from flask import current_app


def send_email_alert(subject, body, recipient_email=None):
    """
    Sends a plain-text alert over SMTP. Returns False (and logs) when mail is not
    configured or sending fails; callers never fail a request because of it.
    """
    if not current_app.config.get('MAIL_SERVER'):
        current_app.logger.debug(f"Mail server not configured. Skipping email alert: {subject}")
        return False
    mail_recipient = recipient_email or current_app.config.get('ADMIN_EMAIL')
    sender_email = current_app.config.get('MAIL_DEFAULT_SENDER') or current_app.config.get('MAIL_USERNAME')
    if not sender_email or not mail_recipient:
        current_app.logger.error("Mail sender or recipient not fully configured. Cannot send email alert.")
        return False

    msg_obj = MIMEMultipart()
    msg_obj['From'] = sender_email
    msg_obj['To'] = mail_recipient
    msg_obj['Subject'] = subject
    msg_obj.attach(MIMEText(body, 'plain'))
    try:
        mail_port = current_app.config.get('MAIL_PORT', 587)
        use_tls = current_app.config.get('MAIL_USE_TLS', True)
        use_ssl = current_app.config.get('MAIL_USE_SSL', False)
        if use_ssl: server = smtplib.SMTP_SSL(current_app.config['MAIL_SERVER'], mail_port, timeout=10)
        else: server = smtplib.SMTP(current_app.config['MAIL_SERVER'], mail_port, timeout=10)
        try:
            if use_tls and not use_ssl: server.starttls()
            if current_app.config.get('MAIL_PASSWORD'):
                server.login(current_app.config.get('MAIL_USERNAME'), current_app.config.get('MAIL_PASSWORD'))
            server.sendmail(sender_email, mail_recipient, msg_obj.as_string())
        finally:
            server.quit()
        current_app.logger.info(f"Email alert '{subject}' sent to {mail_recipient}.")
        return True
    except (smtplib.SMTPException, OSError) as e:
        current_app.logger.error(f"Failed to send email alert '{subject}' to {mail_recipient}: {e}", exc_info=True)
        return False


def notify_new_contact(contact):
    body = (f"New contact message from {contact.name} <{contact.email}>\n"
            f"Phone: {contact.phone or '-'}\n"
            f"Subject: {contact.subject or '-'}\n\n"
            f"{contact.message}\n")
    return send_email_alert(f"[FTL] New contact message: {contact.subject or contact.name}", body)


def notify_new_service_request(service_request):
    contact = service_request.contact
    body = (f"New service request #{service_request.id}\n"
            f"From: {contact.name} <{contact.email}> ({service_request.organization or 'no organization'})\n"
            f"Service: {service_request.service.name if service_request.service else service_request.service_name or '-'}\n"
            f"Sample type: {service_request.sample_type or '-'} x {service_request.sample_count or '-'}\n\n"
            f"{service_request.description}\n")
    return send_email_alert(f"[FTL] New service request #{service_request.id}", body)


def notify_new_application(application):
    body = (f"New internship application from {application.full_name} <{application.email}>\n"
            f"College: {application.college}, course: {application.course}\n"
            f"Internship: {application.internship.title if application.internship else 'General application'}\n"
            f"Resume: {application.resume_url or 'not attached'}\n")
    return send_email_alert(f"[FTL] New internship application: {application.full_name}", body)
