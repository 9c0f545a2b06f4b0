# ftl_backend/models/utility_models.py
from .base import db, utcnow, isoformat_or_none
from .enums import AuditLogStatusEnum, ChatSenderEnum


class AuditLog(db.Model):
    __tablename__ = 'audit_log'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('admin_users.id', ondelete='SET NULL'), index=True, nullable=True)
    action = db.Column(db.String(255), nullable=False, index=True)
    target_type = db.Column(db.String(50), index=True)
    target_id = db.Column(db.Integer, index=True)
    details = db.Column(db.Text)
    ip_address = db.Column(db.String(45))
    timestamp = db.Column(db.DateTime, default=utcnow, index=True)
    status = db.Column(db.Enum(AuditLogStatusEnum, name="audit_log_status_enum"), default=AuditLogStatusEnum.SUCCESS, index=True)

    def to_dict(self):
        return {
            "id": self.id, "user_id": self.user_id, "action": self.action,
            "target_type": self.target_type, "target_id": self.target_id,
            "details": self.details, "ip_address": self.ip_address,
            "timestamp": isoformat_or_none(self.timestamp),
            "status": self.status.value if self.status else None
        }


class ChatMessage(db.Model):
    __tablename__ = 'chat_messages'
    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.String(64), nullable=False, index=True)
    sender = db.Column(db.Enum(ChatSenderEnum, name="chat_sender_enum"), nullable=False)
    message = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    def to_dict(self):
        return {
            "id": self.id, "session_id": self.session_id,
            "sender": self.sender.value, "message": self.message,
            "created_at": isoformat_or_none(self.created_at)
        }
