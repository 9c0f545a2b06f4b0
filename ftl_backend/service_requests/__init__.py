# ftl_backend/service_requests/__init__.py
from flask import Blueprint

service_requests_bp = Blueprint('service_requests', __name__)

from . import routes
