# ftl_backend/equipment/routes.py
# Laboratory instruments, each with an optional photo and PDF manual.
from flask import request, jsonify, current_app
from flask_jwt_extended import get_jwt_identity
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from . import equipment_bp
from ..models.base import db
from ..models import Equipment
from ..services.upload_service import save_upload, delete_upload, UploadError
from ..utils import (staff_or_admin_required, get_request_data, sanitize_input, parse_bool,
                     parse_int, is_admin_mount)

TEXT_FIELDS = {'name': 150, 'category': 80, 'manufacturer': 120, 'model_number': 80}


def apply_equipment_fields(equipment, data, partial=False):
    for field_name, max_length in TEXT_FIELDS.items():
        if field_name in data or not partial:
            setattr(equipment, field_name, sanitize_input(data.get(field_name), max_length=max_length) or None)
    for field_name in ('description', 'specifications'):
        if field_name in data or not partial:
            setattr(equipment, field_name, sanitize_input(data.get(field_name)) or None)
    if 'display_order' in data or not partial:
        equipment.display_order = parse_int(data.get('display_order'), 0)
    if 'is_active' in data or not partial:
        equipment.is_active = parse_bool(data.get('is_active'), default=True)
    if not equipment.name:
        return "Equipment name is required"
    return None


def save_equipment_files():
    """Returns (image_url, manual_url); either may be None when not uploaded."""
    image_url = save_upload(request.files.get('image'), 'equipment-images', 'equipment')
    try:
        manual_url = save_upload(request.files.get('manual'), 'equipment-manuals', 'manual', 'ALLOWED_DOCUMENT_EXTENSIONS')
    except UploadError:
        delete_upload(image_url)
        raise
    return image_url, manual_url


@equipment_bp.route('', methods=['GET'])
@equipment_bp.route('/', methods=['GET'])
def list_equipment():
    query = Equipment.query
    if not is_admin_mount():
        query = query.filter(Equipment.is_active == True)
    category = request.args.get('category')
    if category:
        query = query.filter(Equipment.category == category)
    search = request.args.get('search')
    if search:
        term_like = f"%{search.strip()}%"
        query = query.filter(or_(Equipment.name.ilike(term_like), Equipment.manufacturer.ilike(term_like)))
    items = query.order_by(Equipment.display_order, Equipment.name).all()
    return jsonify(success=True, data=[e.to_dict() for e in items]), 200


@equipment_bp.route('/<int:equipment_id>', methods=['GET'])
def get_equipment(equipment_id):
    equipment = db.session.get(Equipment, equipment_id)
    if not equipment or (not equipment.is_active and not is_admin_mount()):
        return jsonify(message="Equipment not found", success=False), 404
    return jsonify(success=True, data=equipment.to_dict()), 200


@equipment_bp.route('', methods=['POST'])
@equipment_bp.route('/', methods=['POST'])
@staff_or_admin_required
def create_equipment():
    equipment = Equipment()
    error = apply_equipment_fields(equipment, get_request_data())
    if error:
        return jsonify(message=error, success=False), 400
    try:
        equipment.image_url, equipment.manual_url = save_equipment_files()
        db.session.add(equipment)
        db.session.commit()
    except UploadError as e:
        return jsonify(message=str(e), success=False), 400
    except SQLAlchemyError as e:
        db.session.rollback()
        delete_upload(equipment.image_url)
        delete_upload(equipment.manual_url)
        current_app.logger.error(f"Failed to create equipment: {e}", exc_info=True)
        return jsonify(message=f"Failed to create equipment: {str(e)}", success=False), 500
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='create_equipment', target_type='equipment', target_id=equipment.id, details=f"Equipment '{equipment.name}' created.")
    return jsonify(success=True, message="Equipment created successfully", data=equipment.to_dict()), 201


@equipment_bp.route('/<int:equipment_id>', methods=['PUT'])
@staff_or_admin_required
def update_equipment(equipment_id):
    equipment = db.session.get(Equipment, equipment_id)
    if not equipment:
        return jsonify(message="Equipment not found", success=False), 404
    old_files = (equipment.image_url, equipment.manual_url)
    error = apply_equipment_fields(equipment, get_request_data(), partial=True)
    if error:
        db.session.rollback()
        return jsonify(message=error, success=False), 400
    try:
        image_url, manual_url = save_equipment_files()
    except UploadError as e:
        db.session.rollback()
        return jsonify(message=str(e), success=False), 400
    if image_url:
        equipment.image_url = image_url
    if manual_url:
        equipment.manual_url = manual_url
    db.session.commit()
    for old_url, current_url in zip(old_files, (equipment.image_url, equipment.manual_url)):
        if old_url != current_url:
            delete_upload(old_url)
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='update_equipment', target_type='equipment', target_id=equipment.id)
    return jsonify(success=True, message="Equipment updated successfully", data=equipment.to_dict()), 200


@equipment_bp.route('/<int:equipment_id>', methods=['DELETE'])
@staff_or_admin_required
def delete_equipment(equipment_id):
    equipment = db.session.get(Equipment, equipment_id)
    if not equipment:
        return jsonify(message="Equipment not found", success=False), 404
    files = (equipment.image_url, equipment.manual_url)
    db.session.delete(equipment)
    db.session.commit()
    for file_url in files:
        delete_upload(file_url)
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='delete_equipment', target_type='equipment', target_id=equipment_id)
    return jsonify(success=True, message="Equipment deleted successfully"), 200
