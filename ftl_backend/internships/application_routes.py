# ftl_backend/internships/application_routes.py
from flask import request, jsonify, current_app
from flask_jwt_extended import get_jwt_identity
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from . import applications_bp
from .. import limiter
from ..models.base import db
from ..models import InternshipApplication, Internship, ApplicationStatusEnum
from ..services.notification_service import notify_new_application
from ..services.upload_service import save_upload, delete_upload, UploadError
from ..utils import (staff_or_admin_required, get_request_data, sanitize_input, is_valid_email,
                     paginate_query, parse_enum, parse_int, parse_date)

REQUIRED_FIELDS = ('full_name', 'email', 'phone', 'college', 'course')


@applications_bp.route('', methods=['POST'])
@applications_bp.route('/', methods=['POST'])
@limiter.limit(lambda: current_app.config.get('CONTACT_RATELIMITS', "10 per minute"))
def submit_application():
    """Accepts multipart form data with an optional `resume` file, or plain JSON."""
    data = get_request_data()
    fields = {
        "full_name": sanitize_input(data.get('full_name'), max_length=120),
        "email": sanitize_input(data.get('email'), max_length=120),
        "phone": sanitize_input(data.get('phone'), max_length=30),
        "college": sanitize_input(data.get('college'), max_length=200),
        "course": sanitize_input(data.get('course'), max_length=120),
        "year_of_study": sanitize_input(data.get('year_of_study'), max_length=30) or None,
        "duration": sanitize_input(data.get('duration'), max_length=80) or None,
        "cover_letter": sanitize_input(data.get('cover_letter'), max_length=5000) or None,
        "preferred_start_date": parse_date(data.get('preferred_start_date')),
    }
    missing = [name for name in REQUIRED_FIELDS if not fields[name]]
    if missing:
        return jsonify(message=f"Missing required fields: {', '.join(missing)}", success=False), 400
    if not is_valid_email(fields["email"]):
        return jsonify(message="Please enter a valid email address", success=False), 400

    internship_id = parse_int(data.get('internship_id'))
    if internship_id is not None:
        internship = db.session.get(Internship, internship_id)
        if not internship or not internship.is_active:
            return jsonify(message="The selected internship is not open for applications", success=False), 400
        fields["internship_id"] = internship.id

    resume_url = None
    try:
        resume_url = save_upload(request.files.get('resume'), 'resumes', 'resume', 'ALLOWED_DOCUMENT_EXTENSIONS')
        application = InternshipApplication(resume_url=resume_url, **fields)
        db.session.add(application)
        db.session.commit()
    except UploadError as e:
        return jsonify(message=str(e), success=False), 400
    except SQLAlchemyError as e:
        db.session.rollback()
        delete_upload(resume_url)
        current_app.logger.error(f"Error saving internship application from {fields['email']}: {e}", exc_info=True)
        return jsonify(message="Failed to submit application. Please try again.", success=False), 500

    current_app.logger.info(f"New internship application #{application.id} from {application.email}")
    notify_new_application(application)
    return jsonify(success=True, message="Application submitted successfully!", data=application.to_dict()), 201


@applications_bp.route('', methods=['GET'])
@applications_bp.route('/', methods=['GET'])
@staff_or_admin_required
def list_applications():
    query = InternshipApplication.query
    status = parse_enum(ApplicationStatusEnum, request.args.get('status'))
    if status:
        query = query.filter(InternshipApplication.status == status)
    internship_id = request.args.get('internship_id', type=int)
    if internship_id:
        query = query.filter(InternshipApplication.internship_id == internship_id)
    search = request.args.get('search')
    if search:
        term_like = f"%{search.strip()}%"
        query = query.filter(or_(InternshipApplication.full_name.ilike(term_like),
                                 InternshipApplication.email.ilike(term_like),
                                 InternshipApplication.college.ilike(term_like)))
    items, pagination = paginate_query(query.order_by(InternshipApplication.created_at.desc(), InternshipApplication.id.desc()))
    return jsonify(success=True, data=[a.to_dict() for a in items], pagination=pagination), 200


@applications_bp.route('/<int:application_id>', methods=['GET'])
@staff_or_admin_required
def get_application(application_id):
    application = db.session.get(InternshipApplication, application_id)
    if not application:
        return jsonify(message="Application not found", success=False), 404
    return jsonify(success=True, data=application.to_dict()), 200


@applications_bp.route('/<int:application_id>/status', methods=['PATCH', 'PUT'])
@staff_or_admin_required
def update_application_status(application_id):
    application = db.session.get(InternshipApplication, application_id)
    if not application:
        return jsonify(message="Application not found", success=False), 404
    status = parse_enum(ApplicationStatusEnum, get_request_data().get('status'))
    if status is None:
        return jsonify(message="Status must be one of: " + ", ".join(s.value for s in ApplicationStatusEnum), success=False), 400
    application.status = status
    db.session.commit()
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='update_application_status', target_type='internship_application', target_id=application.id, details=f"Status set to {status.value}.")
    return jsonify(success=True, message="Application status updated", data=application.to_dict()), 200


@applications_bp.route('/<int:application_id>', methods=['DELETE'])
@staff_or_admin_required
def delete_application(application_id):
    application = db.session.get(InternshipApplication, application_id)
    if not application:
        return jsonify(message="Application not found", success=False), 404
    resume_url = application.resume_url
    db.session.delete(application)
    db.session.commit()
    delete_upload(resume_url)
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='delete_application', target_type='internship_application', target_id=application_id)
    return jsonify(success=True, message="Application deleted successfully"), 200
