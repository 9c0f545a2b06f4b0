# ftl_backend/models/content_models.py
# Marketing content managed from the admin panel.
import json

from .base import db, BaseModel, isoformat_or_none


def split_tags(tags_str):
    if not tags_str:
        return []
    return [tag.strip() for tag in tags_str.split(',') if tag.strip()]


class BlogPost(BaseModel):
    __tablename__ = 'blog_posts'
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    excerpt = db.Column(db.String(500), nullable=True)
    content = db.Column(db.Text, nullable=False)
    author = db.Column(db.String(120), nullable=True)
    category = db.Column(db.String(80), nullable=True, index=True)
    tags = db.Column(db.String(255), nullable=True)
    image_url = db.Column(db.String(255), nullable=True)
    is_published = db.Column(db.Boolean, default=False, nullable=False, index=True)
    published_at = db.Column(db.DateTime, nullable=True, index=True)

    def to_dict(self, include_content=True):
        data = {
            "id": self.id, "title": self.title, "slug": self.slug,
            "excerpt": self.excerpt, "author": self.author, "category": self.category,
            "tags": split_tags(self.tags), "image_url": self.image_url,
            "is_published": self.is_published,
            "published_at": isoformat_or_none(self.published_at),
        }
        if include_content:
            data["content"] = self.content
        data.update(self.timestamps())
        return data

    def __repr__(self): return f'<BlogPost {self.slug}>'


class TeamMember(BaseModel):
    __tablename__ = 'team_members'
    name = db.Column(db.String(120), nullable=False)
    position = db.Column(db.String(120), nullable=False)
    department = db.Column(db.String(120), nullable=True)
    bio = db.Column(db.Text, nullable=True)
    email = db.Column(db.String(120), nullable=True)
    phone = db.Column(db.String(30), nullable=True)
    qualifications = db.Column(db.String(255), nullable=True)
    image_url = db.Column(db.String(255), nullable=True)
    display_order = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    def to_dict(self):
        data = {
            "id": self.id, "name": self.name, "position": self.position,
            "department": self.department, "bio": self.bio, "email": self.email,
            "phone": self.phone, "qualifications": self.qualifications,
            "image_url": self.image_url, "display_order": self.display_order,
            "is_active": self.is_active
        }
        data.update(self.timestamps())
        return data

    def __repr__(self): return f'<TeamMember {self.name}>'


class Equipment(BaseModel):
    __tablename__ = 'equipment'
    name = db.Column(db.String(150), nullable=False)
    category = db.Column(db.String(80), nullable=True, index=True)
    manufacturer = db.Column(db.String(120), nullable=True)
    model_number = db.Column(db.String(80), nullable=True)
    description = db.Column(db.Text, nullable=True)
    specifications = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(255), nullable=True)
    manual_url = db.Column(db.String(255), nullable=True)
    display_order = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    def to_dict(self):
        data = {
            "id": self.id, "name": self.name, "category": self.category,
            "manufacturer": self.manufacturer, "model_number": self.model_number,
            "description": self.description, "specifications": self.specifications,
            "image_url": self.image_url, "manual_url": self.manual_url,
            "display_order": self.display_order, "is_active": self.is_active
        }
        data.update(self.timestamps())
        return data

    def __repr__(self): return f'<Equipment {self.name}>'


class Service(BaseModel):
    """A testing service offered in the lab's catalogue."""
    __tablename__ = 'services'
    name = db.Column(db.String(150), nullable=False)
    slug = db.Column(db.String(170), unique=True, nullable=False, index=True)
    category = db.Column(db.String(80), nullable=True, index=True)
    short_description = db.Column(db.String(300), nullable=True)
    description = db.Column(db.Text, nullable=True)
    parameters = db.Column(db.Text, nullable=True)
    turnaround_time = db.Column(db.String(80), nullable=True)
    price_info = db.Column(db.String(120), nullable=True)
    display_order = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    requests = db.relationship('ServiceRequest', back_populates='service', lazy='dynamic')

    def to_dict(self):
        data = {
            "id": self.id, "name": self.name, "slug": self.slug, "category": self.category,
            "short_description": self.short_description, "description": self.description,
            "parameters": self.parameters, "turnaround_time": self.turnaround_time,
            "price_info": self.price_info, "display_order": self.display_order,
            "is_active": self.is_active
        }
        data.update(self.timestamps())
        return data

    def __repr__(self): return f'<Service {self.slug}>'


class Page(BaseModel):
    """CMS page; `content` holds the page sections as a JSON document."""
    __tablename__ = 'pages'
    slug = db.Column(db.String(120), unique=True, nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=True)
    meta_title = db.Column(db.String(255), nullable=True)
    meta_description = db.Column(db.Text, nullable=True)
    is_published = db.Column(db.Boolean, default=True, nullable=False, index=True)

    @property
    def content_data(self):
        if not self.content:
            return {}
        try:
            return json.loads(self.content)
        except ValueError:
            return {"body": self.content}

    def to_dict(self):
        data = {
            "id": self.id, "slug": self.slug, "title": self.title,
            "content": self.content_data, "meta_title": self.meta_title,
            "meta_description": self.meta_description, "is_published": self.is_published
        }
        data.update(self.timestamps())
        return data

    def __repr__(self): return f'<Page {self.slug}>'
