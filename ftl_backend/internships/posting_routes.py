# ftl_backend/internships/posting_routes.py
from flask import request, jsonify, current_app
from flask_jwt_extended import get_jwt_identity
from sqlalchemy.exc import SQLAlchemyError

from . import internships_bp
from ..models.base import db
from ..models import Internship
from ..utils import (staff_or_admin_required, get_request_data, sanitize_input, parse_bool,
                     parse_int, parse_date, make_unique_slug, get_by_id_or_slug, is_admin_mount)


def apply_internship_fields(internship, data, partial=False):
    """Copies request fields onto the posting; returns an error message or None."""
    text_fields = {'title': 150, 'department': 120, 'duration': 80, 'stipend': 80, 'location': 120}
    for field_name, max_length in text_fields.items():
        if field_name in data or not partial:
            setattr(internship, field_name, sanitize_input(data.get(field_name), max_length=max_length) or None)
    for field_name in ('description', 'requirements'):
        if field_name in data or not partial:
            setattr(internship, field_name, sanitize_input(data.get(field_name), allow_html=True) or None)
    if 'positions' in data or not partial:
        internship.positions = max(parse_int(data.get('positions'), 1), 1)
    if 'application_deadline' in data or not partial:
        internship.application_deadline = parse_date(data.get('application_deadline'))
    if 'is_active' in data or not partial:
        internship.is_active = parse_bool(data.get('is_active'), default=True)

    if not internship.title or not internship.description:
        return "Title and description are required"
    return None


@internships_bp.route('', methods=['GET'])
@internships_bp.route('/', methods=['GET'])
def list_internships():
    query = Internship.query
    if not is_admin_mount() or not parse_bool(request.args.get('include_inactive'), default=True):
        query = query.filter(Internship.is_active == True)
    department = request.args.get('department')
    if department:
        query = query.filter(Internship.department == department)
    internships = query.order_by(Internship.created_at.desc(), Internship.id.desc()).all()
    return jsonify(success=True, data=[i.to_dict() for i in internships]), 200


@internships_bp.route('/<string:identifier>', methods=['GET'])
def get_internship(identifier):
    internship = get_by_id_or_slug(Internship, identifier)
    if not internship or (not internship.is_active and not is_admin_mount()):
        return jsonify(message="Internship not found", success=False), 404
    return jsonify(success=True, data=internship.to_dict()), 200


@internships_bp.route('', methods=['POST'])
@internships_bp.route('/', methods=['POST'])
@staff_or_admin_required
def create_internship():
    internship = Internship()
    error = apply_internship_fields(internship, get_request_data())
    if error:
        return jsonify(message=error, success=False), 400
    internship.slug = make_unique_slug(Internship, internship.title)
    try:
        db.session.add(internship)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to create internship: {e}", exc_info=True)
        return jsonify(message=f"Failed to create internship: {str(e)}", success=False), 500
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='create_internship', target_type='internship', target_id=internship.id, details=f"Internship '{internship.title}' created.")
    return jsonify(success=True, message="Internship created successfully", data=internship.to_dict()), 201


@internships_bp.route('/<int:internship_id>', methods=['PUT'])
@staff_or_admin_required
def update_internship(internship_id):
    internship = db.session.get(Internship, internship_id)
    if not internship:
        return jsonify(message="Internship not found", success=False), 404
    data = get_request_data()
    old_title = internship.title
    error = apply_internship_fields(internship, data, partial=True)
    if error:
        db.session.rollback()
        return jsonify(message=error, success=False), 400
    if internship.title != old_title:
        internship.slug = make_unique_slug(Internship, internship.title, exclude_id=internship.id)
    db.session.commit()
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='update_internship', target_type='internship', target_id=internship.id)
    return jsonify(success=True, message="Internship updated successfully", data=internship.to_dict()), 200


@internships_bp.route('/<int:internship_id>/toggle', methods=['PATCH'])
@staff_or_admin_required
def toggle_internship(internship_id):
    internship = db.session.get(Internship, internship_id)
    if not internship:
        return jsonify(message="Internship not found", success=False), 404
    internship.is_active = not internship.is_active
    db.session.commit()
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='toggle_internship', target_type='internship', target_id=internship.id, details=f"is_active={internship.is_active}")
    return jsonify(success=True, message="Internship opened" if internship.is_active else "Internship closed", data=internship.to_dict()), 200


@internships_bp.route('/<int:internship_id>', methods=['DELETE'])
@staff_or_admin_required
def delete_internship(internship_id):
    internship = db.session.get(Internship, internship_id)
    if not internship:
        return jsonify(message="Internship not found", success=False), 404
    for application in internship.applications:
        application.internship_id = None
    db.session.delete(internship)
    db.session.commit()
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='delete_internship', target_type='internship', target_id=internship_id)
    return jsonify(success=True, message="Internship deleted successfully"), 200
