# ftl_backend/models/submission_models.py
# Records submitted from the public website forms.
from .base import db, BaseModel, isoformat_or_none
from .enums import ContactStatusEnum, ApplicationStatusEnum, ServiceRequestStatusEnum


class Contact(BaseModel):
    __tablename__ = 'contacts'
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), nullable=False, index=True)
    phone = db.Column(db.String(30), nullable=True)
    subject = db.Column(db.String(200), nullable=True)
    message = db.Column(db.Text, nullable=False)
    status = db.Column(db.Enum(ContactStatusEnum, name="contact_status_enum"), default=ContactStatusEnum.NEW, nullable=False, index=True)
    ip_address = db.Column(db.String(45), nullable=True)

    service_requests = db.relationship('ServiceRequest', back_populates='contact', lazy='dynamic')

    def to_dict(self):
        data = {
            "id": self.id, "name": self.name, "email": self.email, "phone": self.phone,
            "subject": self.subject, "message": self.message,
            "status": self.status.value if self.status else None
        }
        data.update(self.timestamps())
        return data

    def __repr__(self): return f'<Contact {self.email}>'


class Internship(BaseModel):
    """An internship posting published on the careers section."""
    __tablename__ = 'internships'
    title = db.Column(db.String(150), nullable=False)
    slug = db.Column(db.String(170), unique=True, nullable=False, index=True)
    department = db.Column(db.String(120), nullable=True)
    description = db.Column(db.Text, nullable=False)
    requirements = db.Column(db.Text, nullable=True)
    duration = db.Column(db.String(80), nullable=True)
    stipend = db.Column(db.String(80), nullable=True)
    location = db.Column(db.String(120), nullable=True)
    positions = db.Column(db.Integer, default=1, nullable=False)
    application_deadline = db.Column(db.Date, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    applications = db.relationship('InternshipApplication', back_populates='internship', lazy='dynamic')

    def to_dict(self):
        data = {
            "id": self.id, "title": self.title, "slug": self.slug,
            "department": self.department, "description": self.description,
            "requirements": self.requirements, "duration": self.duration,
            "stipend": self.stipend, "location": self.location, "positions": self.positions,
            "application_deadline": isoformat_or_none(self.application_deadline),
            "is_active": self.is_active,
            "application_count": self.applications.count()
        }
        data.update(self.timestamps())
        return data

    def __repr__(self): return f'<Internship {self.slug}>'


class InternshipApplication(BaseModel):
    __tablename__ = 'internship_applications'
    full_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), nullable=False, index=True)
    phone = db.Column(db.String(30), nullable=False)
    college = db.Column(db.String(200), nullable=False)
    course = db.Column(db.String(120), nullable=False)
    year_of_study = db.Column(db.String(30), nullable=True)
    internship_id = db.Column(db.Integer, db.ForeignKey('internships.id', ondelete='SET NULL'), nullable=True, index=True)
    preferred_start_date = db.Column(db.Date, nullable=True)
    duration = db.Column(db.String(80), nullable=True)
    cover_letter = db.Column(db.Text, nullable=True)
    resume_url = db.Column(db.String(255), nullable=True)
    status = db.Column(db.Enum(ApplicationStatusEnum, name="application_status_enum"), default=ApplicationStatusEnum.PENDING, nullable=False, index=True)

    internship = db.relationship('Internship', back_populates='applications')

    def to_dict(self):
        data = {
            "id": self.id, "full_name": self.full_name, "email": self.email,
            "phone": self.phone, "college": self.college, "course": self.course,
            "year_of_study": self.year_of_study, "internship_id": self.internship_id,
            "internship_title": self.internship.title if self.internship else None,
            "preferred_start_date": isoformat_or_none(self.preferred_start_date),
            "duration": self.duration, "cover_letter": self.cover_letter,
            "resume_url": self.resume_url,
            "status": self.status.value if self.status else None
        }
        data.update(self.timestamps())
        return data

    def __repr__(self): return f'<InternshipApplication {self.email}>'


class ServiceRequest(BaseModel):
    __tablename__ = 'service_requests'
    contact_id = db.Column(db.Integer, db.ForeignKey('contacts.id', ondelete='CASCADE'), nullable=False, index=True)
    service_id = db.Column(db.Integer, db.ForeignKey('services.id', ondelete='SET NULL'), nullable=True, index=True)
    service_name = db.Column(db.String(150), nullable=True)
    organization = db.Column(db.String(200), nullable=True)
    sample_type = db.Column(db.String(120), nullable=True)
    sample_count = db.Column(db.Integer, nullable=True)
    description = db.Column(db.Text, nullable=False)
    preferred_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.Enum(ServiceRequestStatusEnum, name="service_request_status_enum"), default=ServiceRequestStatusEnum.PENDING, nullable=False, index=True)

    contact = db.relationship('Contact', back_populates='service_requests')
    service = db.relationship('Service', back_populates='requests')

    def to_dict(self):
        data = {
            "id": self.id, "contact_id": self.contact_id,
            "contact": self.contact.to_dict() if self.contact else None,
            "service_id": self.service_id,
            "service_name": self.service.name if self.service else self.service_name,
            "organization": self.organization, "sample_type": self.sample_type,
            "sample_count": self.sample_count, "description": self.description,
            "preferred_date": isoformat_or_none(self.preferred_date),
            "status": self.status.value if self.status else None
        }
        data.update(self.timestamps())
        return data

    def __repr__(self): return f'<ServiceRequest {self.id}>'
