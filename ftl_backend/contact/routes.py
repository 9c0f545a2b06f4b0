# ftl_backend/contact/routes.py
from flask import request, jsonify, current_app
from flask_jwt_extended import get_jwt_identity
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from . import contact_bp
from .. import limiter
from ..models.base import db
from ..models import Contact, ContactStatusEnum
from ..services.notification_service import notify_new_contact
from ..utils import (staff_or_admin_required, get_request_data, sanitize_input, is_valid_email,
                     paginate_query, parse_enum, parse_bool)


def validate_contact_payload(data):
    """Returns (cleaned fields, error message)."""
    fields = {
        "name": sanitize_input(data.get('name'), max_length=120),
        "email": sanitize_input(data.get('email'), max_length=120),
        "phone": sanitize_input(data.get('phone'), max_length=30) or None,
        "subject": sanitize_input(data.get('subject'), max_length=200) or None,
        "message": sanitize_input(data.get('message'), max_length=5000),
    }
    if not fields["name"] or not fields["email"] or not fields["message"]:
        return fields, "Please fill in all required fields (name, email, message)"
    if not is_valid_email(fields["email"]):
        return fields, "Please enter a valid email address"
    return fields, None


@contact_bp.route('', methods=['POST'])
@contact_bp.route('/', methods=['POST'])
@limiter.limit(lambda: current_app.config.get('CONTACT_RATELIMITS', "10 per minute"))
def submit_contact():
    fields, error = validate_contact_payload(get_request_data())
    if error:
        return jsonify(message=error, success=False), 400
    try:
        contact = Contact(ip_address=request.remote_addr, **fields)
        db.session.add(contact)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error saving contact message from {fields['email']}: {e}", exc_info=True)
        return jsonify(message="Failed to send message. Please try again.", success=False), 500

    current_app.logger.info(f"New contact message #{contact.id} from {contact.email}")
    notify_new_contact(contact)
    return jsonify(success=True, message="Message sent successfully! We will get back to you soon.", data=contact.to_dict()), 201


@contact_bp.route('', methods=['GET'])
@contact_bp.route('/', methods=['GET'])
@staff_or_admin_required
def list_contacts():
    query = Contact.query
    status = parse_enum(ContactStatusEnum, request.args.get('status'))
    if status:
        query = query.filter(Contact.status == status)
    elif not parse_bool(request.args.get('include_archived')):
        query = query.filter(Contact.status != ContactStatusEnum.ARCHIVED)
    search = request.args.get('search')
    if search:
        term_like = f"%{search.strip()}%"
        query = query.filter(or_(Contact.name.ilike(term_like), Contact.email.ilike(term_like), Contact.subject.ilike(term_like)))
    items, pagination = paginate_query(query.order_by(Contact.created_at.desc(), Contact.id.desc()))
    return jsonify(success=True, data=[c.to_dict() for c in items], pagination=pagination), 200


@contact_bp.route('/<int:contact_id>', methods=['GET'])
@staff_or_admin_required
def get_contact(contact_id):
    contact = db.session.get(Contact, contact_id)
    if not contact:
        return jsonify(message="Contact not found", success=False), 404
    if contact.status == ContactStatusEnum.NEW:
        contact.status = ContactStatusEnum.READ
        db.session.commit()
    return jsonify(success=True, data=contact.to_dict()), 200


@contact_bp.route('/<int:contact_id>/status', methods=['PATCH', 'PUT'])
@staff_or_admin_required
def update_contact_status(contact_id):
    contact = db.session.get(Contact, contact_id)
    if not contact:
        return jsonify(message="Contact not found", success=False), 404
    status = parse_enum(ContactStatusEnum, get_request_data().get('status'))
    if status is None:
        return jsonify(message="Status must be one of: " + ", ".join(s.value for s in ContactStatusEnum), success=False), 400
    contact.status = status
    db.session.commit()
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='update_contact_status', target_type='contact', target_id=contact.id, details=f"Status set to {status.value}.")
    return jsonify(success=True, message="Contact status updated", data=contact.to_dict()), 200


@contact_bp.route('/<int:contact_id>', methods=['DELETE'])
@staff_or_admin_required
def delete_contact(contact_id):
    """Archives the contact with ?soft=true, deletes it (and its service requests) otherwise."""
    contact = db.session.get(Contact, contact_id)
    if not contact:
        return jsonify(message="Contact not found", success=False), 404
    soft = parse_bool(request.args.get('soft'))
    try:
        if soft:
            contact.status = ContactStatusEnum.ARCHIVED
        else:
            for service_request in contact.service_requests:
                db.session.delete(service_request)
            db.session.delete(contact)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to delete contact ID {contact_id}: {e}", exc_info=True)
        return jsonify(message=f"Failed to delete contact: {str(e)}", success=False), 500
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='archive_contact' if soft else 'delete_contact', target_type='contact', target_id=contact_id)
    return jsonify(success=True, message="Contact archived" if soft else "Contact deleted successfully"), 200
