# ftl_backend/models/base.py
# Contains the shared SQLAlchemy instance to avoid circular imports.
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def utcnow():
    return datetime.now(timezone.utc)


def isoformat_or_none(dt_obj):
    return dt_obj.isoformat() if dt_obj else None


class BaseModel(db.Model):
    """Database-assigned identifier plus audit timestamps shared by every record."""
    __abstract__ = True
    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def timestamps(self):
        return {
            "created_at": isoformat_or_none(self.created_at),
            "updated_at": isoformat_or_none(self.updated_at)
        }
