# ftl_backend/models/enums.py
# Contains all Enum definitions for the models.
import enum


class AdminRoleEnum(enum.Enum):
    ADMIN = "admin"
    STAFF = "staff"

class ContactStatusEnum(enum.Enum):
    NEW = "new"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"

class ApplicationStatusEnum(enum.Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    SHORTLISTED = "shortlisted"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

class ServiceRequestStatusEnum(enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class ChatSenderEnum(enum.Enum):
    USER = "user"
    BOT = "bot"

class AuditLogStatusEnum(enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    INFO = "info"
