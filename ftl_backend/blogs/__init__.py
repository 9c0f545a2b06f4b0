# ftl_backend/blogs/__init__.py
from flask import Blueprint

blogs_bp = Blueprint('blogs', __name__)

from . import routes
