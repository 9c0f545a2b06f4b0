# ftl_backend/audit_log_service.py
import logging
from flask import request, has_request_context
from sqlalchemy.exc import SQLAlchemyError

from .models.base import db
from .models import AuditLog, AuditLogStatusEnum


class AuditLogService:
    def __init__(self, app=None):
        self.app = app
        if app is not None:
            self.logger = app.logger # Use Flask app's logger
        else:
            self.logger = logging.getLogger(__name__)

    def log_action(self, action, user_id=None, target_type=None, target_id=None,
                   details=None, status="success", ip_address=None):
        try:
            status_enum = AuditLogStatusEnum(status.lower())
        except ValueError:
            self.logger.warning(f"Invalid audit log status string '{status}' received. Defaulting to INFO.")
            status_enum = AuditLogStatusEnum.INFO

        if ip_address is None and has_request_context():
            ip_address = request.remote_addr

        try:
            log_entry = AuditLog(
                action=action,
                user_id=int(user_id) if user_id is not None else None,
                target_type=target_type,
                target_id=int(target_id) if target_id is not None else None,
                details=details,
                status=status_enum,
                ip_address=ip_address
            )
            db.session.add(log_entry)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            self.logger.error(f"Failed to write audit log: Action={action}, UserID={user_id}, Target={target_type}/{target_id}. Error: {e}", exc_info=True)
