# ftl_backend/pages/routes.py
# CMS pages and the hero slider settings
import json

from flask import jsonify, current_app
from flask_jwt_extended import get_jwt_identity
from sqlalchemy.exc import SQLAlchemyError

from . import pages_bp
from ..models.base import db
from ..models import Page
from ..slider.hero import build_hero_config
from ..utils import (staff_or_admin_required, get_request_data, sanitize_input, parse_bool,
                     generate_slug, is_admin_mount)


def serialize_content(content):
    """Pages store their content as a JSON document; plain strings become {"body": ...}."""
    if content is None or content == '':
        return None
    if isinstance(content, str):
        try:
            parsed = json.loads(content)
        except ValueError:
            parsed = {"body": content}
        content = parsed
    return json.dumps(content)


def apply_page_fields(page, data, partial=False):
    if 'title' in data or not partial:
        page.title = sanitize_input(data.get('title'), max_length=200)
    if 'content' in data or not partial:
        page.content = serialize_content(data.get('content'))
    if 'meta_title' in data or not partial:
        page.meta_title = sanitize_input(data.get('meta_title'), max_length=255) or None
    if 'meta_description' in data or not partial:
        page.meta_description = sanitize_input(data.get('meta_description')) or None
    if 'is_published' in data or not partial:
        page.is_published = parse_bool(data.get('is_published'), default=True)
    if 'slug' in data or not partial:
        page.slug = generate_slug(data.get('slug') or page.title)
    if not page.title:
        return "Page title is required"
    if not page.slug:
        return "Page slug is required"
    return None


def slug_taken(slug, exclude_id=None):
    query = Page.query.filter(Page.slug == slug)
    if exclude_id is not None:
        query = query.filter(Page.id != exclude_id)
    return query.first() is not None


@pages_bp.route('', methods=['GET'])
@pages_bp.route('/', methods=['GET'])
def list_pages():
    query = Page.query
    if not is_admin_mount():
        query = query.filter(Page.is_published == True)
    pages = query.order_by(Page.slug).all()
    return jsonify(success=True, data=[p.to_dict() for p in pages]), 200


@pages_bp.route('/hero', methods=['GET'])
def get_hero_slider():
    return jsonify(success=True, data=build_hero_config()), 200


@pages_bp.route('/<string:slug>', methods=['GET'])
def get_page(slug):
    page = Page.query.filter_by(slug=slug).first()
    if not page or (not page.is_published and not is_admin_mount()):
        return jsonify(message="Page not found", success=False), 404
    return jsonify(success=True, data=page.to_dict()), 200


@pages_bp.route('', methods=['POST'])
@pages_bp.route('/', methods=['POST'])
@staff_or_admin_required
def create_page():
    page = Page()
    error = apply_page_fields(page, get_request_data())
    if error:
        return jsonify(message=error, success=False), 400
    if slug_taken(page.slug):
        return jsonify(message=f"A page with slug '{page.slug}' already exists", success=False), 409
    try:
        db.session.add(page)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to create page: {e}", exc_info=True)
        return jsonify(message=f"Failed to create page: {str(e)}", success=False), 500
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='create_page', target_type='page', target_id=page.id, details=f"Page '{page.slug}' created.")
    return jsonify(success=True, message="Page created successfully", data=page.to_dict()), 201


@pages_bp.route('/<int:page_id>', methods=['PUT'])
@staff_or_admin_required
def update_page(page_id):
    page = db.session.get(Page, page_id)
    if not page:
        return jsonify(message="Page not found", success=False), 404
    error = apply_page_fields(page, get_request_data(), partial=True)
    if error:
        db.session.rollback()
        return jsonify(message=error, success=False), 400
    with db.session.no_autoflush:
        conflict = slug_taken(page.slug, exclude_id=page.id)
    if conflict:
        db.session.rollback()
        return jsonify(message=f"A page with slug '{page.slug}' already exists", success=False), 409
    db.session.commit()
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='update_page', target_type='page', target_id=page.id)
    return jsonify(success=True, message="Page updated successfully", data=page.to_dict()), 200


@pages_bp.route('/<int:page_id>', methods=['DELETE'])
@staff_or_admin_required
def delete_page(page_id):
    page = db.session.get(Page, page_id)
    if not page:
        return jsonify(message="Page not found", success=False), 404
    db.session.delete(page)
    db.session.commit()
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='delete_page', target_type='page', target_id=page_id)
    return jsonify(success=True, message="Page deleted successfully"), 200
