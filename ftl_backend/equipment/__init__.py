# ftl_backend/equipment/__init__.py
from flask import Blueprint

equipment_bp = Blueprint('equipment', __name__)

from . import routes
