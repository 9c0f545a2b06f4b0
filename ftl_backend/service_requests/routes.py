# ftl_backend/service_requests/routes.py
from flask import request, jsonify, current_app
from flask_jwt_extended import get_jwt_identity
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError

from . import service_requests_bp
from .. import limiter
from ..models.base import db
from ..models import Contact, Service, ServiceRequest, ServiceRequestStatusEnum
from ..services.notification_service import notify_new_service_request
from ..utils import (staff_or_admin_required, get_request_data, sanitize_input, is_valid_email,
                     paginate_query, parse_enum, parse_int, parse_date)


def find_or_create_contact(name, email, phone, organization):
    """Service requests hang off a contact; reuse the latest one with the same email."""
    contact = Contact.query.filter(func.lower(Contact.email) == email.lower()) \
                           .order_by(Contact.created_at.desc(), Contact.id.desc()).first()
    if contact:
        if phone and not contact.phone:
            contact.phone = phone
        return contact
    contact = Contact(
        name=name, email=email, phone=phone,
        subject=f"Service request{' from ' + organization if organization else ''}",
        message="Created from a service request.",
        ip_address=request.remote_addr
    )
    db.session.add(contact)
    return contact


@service_requests_bp.route('', methods=['POST'])
@service_requests_bp.route('/', methods=['POST'])
@limiter.limit(lambda: current_app.config.get('CONTACT_RATELIMITS', "10 per minute"))
def submit_service_request():
    data = get_request_data()
    name = sanitize_input(data.get('name'), max_length=120)
    email = sanitize_input(data.get('email'), max_length=120)
    phone = sanitize_input(data.get('phone'), max_length=30) or None
    organization = sanitize_input(data.get('organization'), max_length=200) or None
    description = sanitize_input(data.get('description'), max_length=5000)

    if not name or not email or not description:
        return jsonify(message="Please fill in all required fields (name, email, description)", success=False), 400
    if not is_valid_email(email):
        return jsonify(message="Please enter a valid email address", success=False), 400

    service = None
    service_id = parse_int(data.get('service_id'))
    if service_id is not None:
        service = db.session.get(Service, service_id)
        if not service or not service.is_active:
            return jsonify(message="The selected service is not available", success=False), 400
    sample_count = parse_int(data.get('sample_count'))
    if sample_count is not None and sample_count < 1:
        return jsonify(message="Sample count must be at least 1", success=False), 400

    try:
        contact = find_or_create_contact(name, email, phone, organization)
        service_request = ServiceRequest(
            contact=contact, service=service,
            service_name=service.name if service else sanitize_input(data.get('service_name'), max_length=150) or None,
            organization=organization,
            sample_type=sanitize_input(data.get('sample_type'), max_length=120) or None,
            sample_count=sample_count,
            description=description,
            preferred_date=parse_date(data.get('preferred_date'))
        )
        db.session.add(service_request)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error saving service request from {email}: {e}", exc_info=True)
        return jsonify(message="Failed to submit service request. Please try again.", success=False), 500

    current_app.logger.info(f"New service request #{service_request.id} from {email}")
    notify_new_service_request(service_request)
    return jsonify(success=True, message="Service request submitted successfully! Our team will contact you shortly.", data=service_request.to_dict()), 201


@service_requests_bp.route('', methods=['GET'])
@service_requests_bp.route('/', methods=['GET'])
@staff_or_admin_required
def list_service_requests():
    query = ServiceRequest.query.join(Contact, ServiceRequest.contact_id == Contact.id)
    status = parse_enum(ServiceRequestStatusEnum, request.args.get('status'))
    if status:
        query = query.filter(ServiceRequest.status == status)
    service_id = request.args.get('service_id', type=int)
    if service_id:
        query = query.filter(ServiceRequest.service_id == service_id)
    search = request.args.get('search')
    if search:
        term_like = f"%{search.strip()}%"
        query = query.filter(or_(Contact.name.ilike(term_like), Contact.email.ilike(term_like),
                                 ServiceRequest.organization.ilike(term_like)))
    items, pagination = paginate_query(query.order_by(ServiceRequest.created_at.desc(), ServiceRequest.id.desc()))
    return jsonify(success=True, data=[r.to_dict() for r in items], pagination=pagination), 200


@service_requests_bp.route('/<int:request_id>', methods=['GET'])
@staff_or_admin_required
def get_service_request(request_id):
    service_request = db.session.get(ServiceRequest, request_id)
    if not service_request:
        return jsonify(message="Service request not found", success=False), 404
    return jsonify(success=True, data=service_request.to_dict()), 200


@service_requests_bp.route('/<int:request_id>/status', methods=['PATCH', 'PUT'])
@staff_or_admin_required
def update_service_request_status(request_id):
    service_request = db.session.get(ServiceRequest, request_id)
    if not service_request:
        return jsonify(message="Service request not found", success=False), 404
    status = parse_enum(ServiceRequestStatusEnum, get_request_data().get('status'))
    if status is None:
        return jsonify(message="Status must be one of: " + ", ".join(s.value for s in ServiceRequestStatusEnum), success=False), 400
    service_request.status = status
    db.session.commit()
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='update_service_request_status', target_type='service_request', target_id=service_request.id, details=f"Status set to {status.value}.")
    return jsonify(success=True, message="Service request status updated", data=service_request.to_dict()), 200


@service_requests_bp.route('/<int:request_id>', methods=['DELETE'])
@staff_or_admin_required
def delete_service_request(request_id):
    service_request = db.session.get(ServiceRequest, request_id)
    if not service_request:
        return jsonify(message="Service request not found", success=False), 404
    db.session.delete(service_request)
    db.session.commit()
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='delete_service_request', target_type='service_request', target_id=request_id)
    return jsonify(success=True, message="Service request deleted successfully"), 200
