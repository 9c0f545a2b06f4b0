# ftl_backend/internships/__init__.py
from flask import Blueprint

# Applications submitted by students (/api/internship) and the postings they apply to (/api/internships)
applications_bp = Blueprint('internship_applications', __name__)
internships_bp = Blueprint('internships', __name__)

from . import application_routes
from . import posting_routes
