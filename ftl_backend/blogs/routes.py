# ftl_backend/blogs/routes.py
from flask import request, jsonify, current_app
from flask_jwt_extended import get_jwt_identity
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from . import blogs_bp
from ..models.base import db, utcnow
from ..models import BlogPost
from ..services.upload_service import save_upload, delete_upload, UploadError
from ..utils import (staff_or_admin_required, get_request_data, sanitize_input, parse_bool,
                     paginate_query, make_unique_slug, get_by_id_or_slug, is_admin_mount)


def set_published(post, is_published):
    post.is_published = is_published
    if is_published and not post.published_at:
        post.published_at = utcnow()


def apply_blog_fields(post, data, partial=False):
    for field_name, max_length in (('title', 200), ('excerpt', 500), ('author', 120), ('category', 80), ('tags', 255)):
        if field_name in data or not partial:
            setattr(post, field_name, sanitize_input(data.get(field_name), max_length=max_length) or None)
    if 'content' in data or not partial:
        post.content = sanitize_input(data.get('content'), allow_html=True) or None
    if 'is_published' in data or not partial:
        set_published(post, parse_bool(data.get('is_published')))
    if not post.title or not post.content:
        return "Title and content are required"
    return None


@blogs_bp.route('', methods=['GET'])
@blogs_bp.route('/', methods=['GET'])
def list_blogs():
    """Published posts on the public prefix; every post (filterable) on the admin prefix."""
    query = BlogPost.query
    if is_admin_mount():
        published_filter = request.args.get('is_published')
        if published_filter is not None:
            query = query.filter(BlogPost.is_published == parse_bool(published_filter))
    else:
        query = query.filter(BlogPost.is_published == True)
    category = request.args.get('category')
    if category:
        query = query.filter(BlogPost.category == category)
    search = request.args.get('search')
    if search:
        term_like = f"%{search.strip()}%"
        query = query.filter(or_(BlogPost.title.ilike(term_like), BlogPost.excerpt.ilike(term_like), BlogPost.tags.ilike(term_like)))
    query = query.order_by(BlogPost.published_at.desc(), BlogPost.created_at.desc(), BlogPost.id.desc())
    items, pagination = paginate_query(query)
    return jsonify(success=True, data=[p.to_dict(include_content=False) for p in items], pagination=pagination), 200


@blogs_bp.route('/<string:identifier>', methods=['GET'])
def get_blog(identifier):
    post = get_by_id_or_slug(BlogPost, identifier)
    if not post or (not post.is_published and not is_admin_mount()):
        return jsonify(message="Blog post not found", success=False), 404
    return jsonify(success=True, data=post.to_dict()), 200


@blogs_bp.route('', methods=['POST'])
@blogs_bp.route('/', methods=['POST'])
@staff_or_admin_required
def create_blog():
    post = BlogPost()
    error = apply_blog_fields(post, get_request_data())
    if error:
        return jsonify(message=error, success=False), 400
    post.slug = make_unique_slug(BlogPost, post.title)
    try:
        post.image_url = save_upload(request.files.get('image'), 'blog-images', f"blog_{post.slug}")
        db.session.add(post)
        db.session.commit()
    except UploadError as e:
        return jsonify(message=str(e), success=False), 400
    except SQLAlchemyError as e:
        db.session.rollback()
        delete_upload(post.image_url)
        current_app.logger.error(f"Failed to create blog post: {e}", exc_info=True)
        return jsonify(message=f"Failed to create blog post: {str(e)}", success=False), 500
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='create_blog', target_type='blog_post', target_id=post.id, details=f"Blog post '{post.title}' created.")
    return jsonify(success=True, message="Blog post created successfully", data=post.to_dict()), 201


@blogs_bp.route('/<int:post_id>', methods=['PUT'])
@staff_or_admin_required
def update_blog(post_id):
    post = db.session.get(BlogPost, post_id)
    if not post:
        return jsonify(message="Blog post not found", success=False), 404
    old_title = post.title
    old_image_url = post.image_url
    error = apply_blog_fields(post, get_request_data(), partial=True)
    if error:
        db.session.rollback()
        return jsonify(message=error, success=False), 400
    if post.title != old_title:
        post.slug = make_unique_slug(BlogPost, post.title, exclude_id=post.id)
    try:
        new_image_url = save_upload(request.files.get('image'), 'blog-images', f"blog_{post.slug}")
    except UploadError as e:
        db.session.rollback()
        return jsonify(message=str(e), success=False), 400
    if new_image_url:
        post.image_url = new_image_url
    elif parse_bool(get_request_data().get('remove_image')):
        post.image_url = None
    db.session.commit()
    if post.image_url != old_image_url:
        delete_upload(old_image_url)
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='update_blog', target_type='blog_post', target_id=post.id)
    return jsonify(success=True, message="Blog post updated successfully", data=post.to_dict()), 200


@blogs_bp.route('/<int:post_id>/publish', methods=['PATCH'])
@staff_or_admin_required
def toggle_blog_publish(post_id):
    post = db.session.get(BlogPost, post_id)
    if not post:
        return jsonify(message="Blog post not found", success=False), 404
    data = get_request_data()
    set_published(post, parse_bool(data.get('is_published')) if 'is_published' in data else not post.is_published)
    db.session.commit()
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='publish_blog' if post.is_published else 'unpublish_blog', target_type='blog_post', target_id=post.id)
    return jsonify(success=True, message="Blog post published" if post.is_published else "Blog post unpublished", data=post.to_dict()), 200


@blogs_bp.route('/<int:post_id>', methods=['DELETE'])
@staff_or_admin_required
def delete_blog(post_id):
    post = db.session.get(BlogPost, post_id)
    if not post:
        return jsonify(message="Blog post not found", success=False), 404
    image_url = post.image_url
    db.session.delete(post)
    db.session.commit()
    delete_upload(image_url)
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='delete_blog', target_type='blog_post', target_id=post_id)
    return jsonify(success=True, message="Blog post deleted successfully"), 200
