# ftl_backend/auth/routes.py
# Back-office authentication
from datetime import datetime, timezone, timedelta

from flask import request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity, get_jwt
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from . import auth_bp
from .tokens import create_admin_token
from .. import limiter
from ..models.base import db, utcnow
from ..models import AdminUser, TokenBlocklist, AdminRoleEnum
from ..utils import admin_required, get_request_data, is_valid_email, sanitize_input, parse_enum

MIN_PASSWORD_LENGTH = 8


@auth_bp.route('/login', methods=['POST'])
@limiter.limit(lambda: current_app.config.get('LOGIN_RATELIMITS', "10 per 5 minutes"))
def login():
    data = get_request_data()
    email = sanitize_input(data.get('email'), max_length=120)
    password = data.get('password')
    audit_logger = current_app.audit_log_service

    if not email or not password:
        return jsonify(message="Email and password are required", success=False), 400

    admin_user = AdminUser.query.filter(func.lower(AdminUser.email) == email.lower()).first()
    if not admin_user or not admin_user.check_password(password):
        audit_logger.log_action(action='login_fail_credentials', details=f"Invalid credentials for {email}.", status='failure')
        return jsonify(message="Invalid email or password", success=False), 401
    if not admin_user.is_active:
        audit_logger.log_action(user_id=admin_user.id, action='login_fail_inactive', status='failure')
        return jsonify(message="Account is inactive. Please contact the administrator.", success=False), 403

    admin_user.last_login_at = utcnow()
    db.session.commit()
    audit_logger.log_action(user_id=admin_user.id, action='login_success', target_type='admin_user', target_id=admin_user.id)
    current_app.logger.info(f"Admin login successful for {admin_user.email}")
    return jsonify(success=True, message="Login successful", data={
        "token": create_admin_token(admin_user), "user": admin_user.to_dict()
    }), 200


@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    claims = get_jwt()
    now = datetime.now(timezone.utc)
    token_exp_timestamp = claims.get("exp")
    expires_at = datetime.fromtimestamp(token_exp_timestamp, tz=timezone.utc) if token_exp_timestamp \
        else now + current_app.config.get('JWT_ACCESS_TOKEN_EXPIRES', timedelta(hours=1))
    try:
        db.session.add(TokenBlocklist(jti=claims["jti"], created_at=now, expires_at=expires_at))
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error blocklisting token during logout: {e}", exc_info=True)
        return jsonify(message="Logout failed due to a server error.", success=False), 500
    current_app.audit_log_service.log_action(user_id=get_jwt_identity(), action='logout')
    return jsonify(success=True, message="Logout successful. Token invalidated."), 200


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def get_current_admin():
    admin_user = db.session.get(AdminUser, int(get_jwt_identity()))
    if not admin_user or not admin_user.is_active:
        return jsonify(message="Account not found or inactive", success=False), 404
    return jsonify(success=True, data=admin_user.to_dict()), 200


@auth_bp.route('/register', methods=['POST'])
@admin_required
def register_admin_user():
    """Creates another back-office account. Only admins may do this."""
    data = get_request_data()
    email = sanitize_input(data.get('email'), max_length=120)
    password = data.get('password') or ''
    full_name = sanitize_input(data.get('full_name'), max_length=120)
    role = parse_enum(AdminRoleEnum, data.get('role', 'staff'))
    audit_logger = current_app.audit_log_service

    if not email or not is_valid_email(email):
        return jsonify(message="A valid email is required", success=False), 400
    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify(message=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long", success=False), 400
    if role is None:
        return jsonify(message="Role must be one of: " + ", ".join(r.value for r in AdminRoleEnum), success=False), 400
    if AdminUser.query.filter(func.lower(AdminUser.email) == email.lower()).first():
        return jsonify(message=f"An account with email '{email}' already exists", success=False), 409

    new_user = AdminUser(email=email.lower(), full_name=full_name, role=role)
    new_user.set_password(password)
    try:
        db.session.add(new_user)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to create admin user {email}: {e}", exc_info=True)
        return jsonify(message=f"Failed to create account: {str(e)}", success=False), 500
    audit_logger.log_action(user_id=get_jwt_identity(), action='create_admin_user', target_type='admin_user', target_id=new_user.id, details=f"Account {new_user.email} ({role.value}) created.")
    return jsonify(success=True, message="Account created successfully", data=new_user.to_dict()), 201


@auth_bp.route('/password', methods=['PUT'])
@jwt_required()
def change_password():
    data = get_request_data()
    current_password = data.get('current_password') or ''
    new_password = data.get('new_password') or ''
    admin_user = db.session.get(AdminUser, int(get_jwt_identity()))
    if not admin_user:
        return jsonify(message="Account not found", success=False), 404
    if not admin_user.check_password(current_password):
        return jsonify(message="Current password is incorrect", success=False), 400
    if len(new_password) < MIN_PASSWORD_LENGTH:
        return jsonify(message=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long", success=False), 400
    admin_user.set_password(new_password)
    db.session.commit()
    current_app.audit_log_service.log_action(user_id=admin_user.id, action='change_password', target_type='admin_user', target_id=admin_user.id)
    return jsonify(success=True, message="Password updated successfully"), 200
