# ftl_backend/auth/tokens.py
from flask import jsonify
from flask_jwt_extended import create_access_token

from ..models import TokenBlocklist


def create_admin_token(admin_user):
    """Access token whose claims carry the role checked by the route table."""
    additional_claims = {
        "role": admin_user.role.value, "email": admin_user.email,
        "full_name": admin_user.full_name
    }
    return create_access_token(identity=str(admin_user.id), additional_claims=additional_claims)


def register_jwt_callbacks(jwt):
    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        jti = jwt_payload["jti"]
        return TokenBlocklist.query.filter_by(jti=jti).first() is not None

    @jwt.unauthorized_loader
    def missing_token_callback(reason):
        return jsonify(message="Access token is missing or invalid.", success=False), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return jsonify(message="Access token is missing or invalid.", success=False), 401

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify(message="Access token has expired.", success=False), 401

    @jwt.revoked_token_loader
    def revoked_token_callback(jwt_header, jwt_payload):
        return jsonify(message="Access token has been revoked.", success=False), 401
