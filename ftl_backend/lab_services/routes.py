# ftl_backend/lab_services/routes.py
# Testing service catalogue
from flask import request, jsonify, current_app
from flask_jwt_extended import get_jwt_identity
from sqlalchemy.exc import SQLAlchemyError

from . import services_bp
from ..models.base import db
from ..models import Service
from ..utils import (staff_or_admin_required, get_request_data, sanitize_input, parse_bool,
                     parse_int, make_unique_slug, get_by_id_or_slug, is_admin_mount)

TEXT_FIELDS = {'name': 150, 'category': 80, 'short_description': 300, 'turnaround_time': 80, 'price_info': 120}


def apply_service_fields(service, data, partial=False):
    for field_name, max_length in TEXT_FIELDS.items():
        if field_name in data or not partial:
            setattr(service, field_name, sanitize_input(data.get(field_name), max_length=max_length) or None)
    for field_name in ('description', 'parameters'):
        if field_name in data or not partial:
            setattr(service, field_name, sanitize_input(data.get(field_name), allow_html=True) or None)
    if 'display_order' in data or not partial:
        service.display_order = parse_int(data.get('display_order'), 0)
    if 'is_active' in data or not partial:
        service.is_active = parse_bool(data.get('is_active'), default=True)
    if not service.name:
        return "Service name is required"
    return None


@services_bp.route('', methods=['GET'])
@services_bp.route('/', methods=['GET'])
def list_services():
    query = Service.query
    if not is_admin_mount():
        query = query.filter(Service.is_active == True)
    category = request.args.get('category')
    if category:
        query = query.filter(Service.category == category)
    services = query.order_by(Service.display_order, Service.name).all()
    return jsonify(success=True, data=[s.to_dict() for s in services]), 200


@services_bp.route('/<string:identifier>', methods=['GET'])
def get_service(identifier):
    service = get_by_id_or_slug(Service, identifier)
    if not service or (not service.is_active and not is_admin_mount()):
        return jsonify(message="Service not found", success=False), 404
    return jsonify(success=True, data=service.to_dict()), 200


@services_bp.route('', methods=['POST'])
@services_bp.route('/', methods=['POST'])
@staff_or_admin_required
def create_service():
    service = Service()
    error = apply_service_fields(service, get_request_data())
    if error:
        return jsonify(message=error, success=False), 400
    service.slug = make_unique_slug(Service, service.name)
    try:
        db.session.add(service)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to create service: {e}", exc_info=True)
        return jsonify(message=f"Failed to create service: {str(e)}", success=False), 500
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='create_service', target_type='service', target_id=service.id, details=f"Service '{service.name}' created.")
    return jsonify(success=True, message="Service created successfully", data=service.to_dict()), 201


@services_bp.route('/<int:service_id>', methods=['PUT'])
@staff_or_admin_required
def update_service(service_id):
    service = db.session.get(Service, service_id)
    if not service:
        return jsonify(message="Service not found", success=False), 404
    old_name = service.name
    error = apply_service_fields(service, get_request_data(), partial=True)
    if error:
        db.session.rollback()
        return jsonify(message=error, success=False), 400
    if service.name != old_name:
        service.slug = make_unique_slug(Service, service.name, exclude_id=service.id)
    db.session.commit()
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='update_service', target_type='service', target_id=service.id)
    return jsonify(success=True, message="Service updated successfully", data=service.to_dict()), 200


@services_bp.route('/<int:service_id>', methods=['DELETE'])
@staff_or_admin_required
def delete_service(service_id):
    service = db.session.get(Service, service_id)
    if not service:
        return jsonify(message="Service not found", success=False), 404
    # Requests keep the service name they were raised for
    for service_request in service.requests:
        service_request.service_name = service_request.service_name or service.name
        service_request.service_id = None
    db.session.delete(service)
    db.session.commit()
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='delete_service', target_type='service', target_id=service_id)
    return jsonify(success=True, message="Service deleted successfully"), 200
