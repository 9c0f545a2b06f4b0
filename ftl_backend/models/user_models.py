# ftl_backend/models/user_models.py
from werkzeug.security import generate_password_hash, check_password_hash

from .base import db, BaseModel, utcnow, isoformat_or_none
from .enums import AdminRoleEnum


class AdminUser(BaseModel):
    """
    Back-office account. Admins manage everything, staff manage content and submissions.
    """
    __tablename__ = 'admin_users'
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    full_name = db.Column(db.String(120), nullable=True)
    role = db.Column(db.Enum(AdminRoleEnum, name="admin_role_enum"), nullable=False, default=AdminRoleEnum.STAFF, index=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    last_login_at = db.Column(db.DateTime, nullable=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        data = {
            "id": self.id, "email": self.email, "full_name": self.full_name,
            "role": self.role.value if self.role else None, "is_active": self.is_active,
            "last_login_at": isoformat_or_none(self.last_login_at)
        }
        data.update(self.timestamps())
        return data

    def __repr__(self): return f'<AdminUser {self.email}>'


class TokenBlocklist(db.Model):
    """
    Stores revoked JWT tokens.
    """
    __tablename__ = 'token_blocklist'
    id = db.Column(db.Integer, primary_key=True)
    jti = db.Column(db.String(36), nullable=False, index=True, unique=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    expires_at = db.Column(db.DateTime, nullable=True)
