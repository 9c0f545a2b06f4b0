# ftl_backend/models/__init__.py
from .base import db, BaseModel
from .enums import (AdminRoleEnum, ContactStatusEnum, ApplicationStatusEnum,
                    ServiceRequestStatusEnum, ChatSenderEnum, AuditLogStatusEnum)
from .content_models import BlogPost, TeamMember, Equipment, Service, Page
from .submission_models import Contact, Internship, InternshipApplication, ServiceRequest
from .user_models import AdminUser, TokenBlocklist
from .utility_models import AuditLog, ChatMessage
