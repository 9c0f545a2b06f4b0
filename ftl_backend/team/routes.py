# ftl_backend/team/routes.py
from flask import request, jsonify, current_app
from flask_jwt_extended import get_jwt_identity
from sqlalchemy.exc import SQLAlchemyError

from . import team_bp
from ..models.base import db
from ..models import TeamMember
from ..services.upload_service import save_upload, delete_upload, UploadError
from ..utils import (staff_or_admin_required, get_request_data, sanitize_input, parse_bool,
                     parse_int, is_admin_mount, is_valid_email)

TEXT_FIELDS = {'name': 120, 'position': 120, 'department': 120, 'email': 120, 'phone': 30, 'qualifications': 255}


def apply_member_fields(member, data, partial=False):
    for field_name, max_length in TEXT_FIELDS.items():
        if field_name in data or not partial:
            setattr(member, field_name, sanitize_input(data.get(field_name), max_length=max_length) or None)
    if 'bio' in data or not partial:
        member.bio = sanitize_input(data.get('bio')) or None
    if 'display_order' in data or not partial:
        member.display_order = parse_int(data.get('display_order'), 0)
    if 'is_active' in data or not partial:
        member.is_active = parse_bool(data.get('is_active'), default=True)
    if not member.name or not member.position:
        return "Name and position are required"
    if member.email and not is_valid_email(member.email):
        return "Please enter a valid email address"
    return None


@team_bp.route('', methods=['GET'])
@team_bp.route('/', methods=['GET'])
def list_team():
    query = TeamMember.query
    if not is_admin_mount():
        query = query.filter(TeamMember.is_active == True)
    department = request.args.get('department')
    if department:
        query = query.filter(TeamMember.department == department)
    members = query.order_by(TeamMember.display_order, TeamMember.name).all()
    return jsonify(success=True, data=[m.to_dict() for m in members]), 200


@team_bp.route('/<int:member_id>', methods=['GET'])
def get_team_member(member_id):
    member = db.session.get(TeamMember, member_id)
    if not member or (not member.is_active and not is_admin_mount()):
        return jsonify(message="Team member not found", success=False), 404
    return jsonify(success=True, data=member.to_dict()), 200


@team_bp.route('', methods=['POST'])
@team_bp.route('/', methods=['POST'])
@staff_or_admin_required
def create_team_member():
    member = TeamMember()
    error = apply_member_fields(member, get_request_data())
    if error:
        return jsonify(message=error, success=False), 400
    try:
        member.image_url = save_upload(request.files.get('image'), 'team-images', 'team')
        db.session.add(member)
        db.session.commit()
    except UploadError as e:
        return jsonify(message=str(e), success=False), 400
    except SQLAlchemyError as e:
        db.session.rollback()
        delete_upload(member.image_url)
        current_app.logger.error(f"Failed to create team member: {e}", exc_info=True)
        return jsonify(message=f"Failed to create team member: {str(e)}", success=False), 500
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='create_team_member', target_type='team_member', target_id=member.id, details=f"Team member '{member.name}' created.")
    return jsonify(success=True, message="Team member created successfully", data=member.to_dict()), 201


@team_bp.route('/<int:member_id>', methods=['PUT'])
@staff_or_admin_required
def update_team_member(member_id):
    member = db.session.get(TeamMember, member_id)
    if not member:
        return jsonify(message="Team member not found", success=False), 404
    old_image_url = member.image_url
    error = apply_member_fields(member, get_request_data(), partial=True)
    if error:
        db.session.rollback()
        return jsonify(message=error, success=False), 400
    try:
        new_image_url = save_upload(request.files.get('image'), 'team-images', 'team')
    except UploadError as e:
        db.session.rollback()
        return jsonify(message=str(e), success=False), 400
    if new_image_url:
        member.image_url = new_image_url
    db.session.commit()
    if member.image_url != old_image_url:
        delete_upload(old_image_url)
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='update_team_member', target_type='team_member', target_id=member.id)
    return jsonify(success=True, message="Team member updated successfully", data=member.to_dict()), 200


@team_bp.route('/<int:member_id>', methods=['DELETE'])
@staff_or_admin_required
def delete_team_member(member_id):
    member = db.session.get(TeamMember, member_id)
    if not member:
        return jsonify(message="Team member not found", success=False), 404
    image_url = member.image_url
    db.session.delete(member)
    db.session.commit()
    delete_upload(image_url)
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='delete_team_member', target_type='team_member', target_id=member_id)
    return jsonify(success=True, message="Team member deleted successfully"), 200
