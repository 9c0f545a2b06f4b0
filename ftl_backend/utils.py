# ftl_backend/utils.py
import re
from datetime import datetime, date
from functools import wraps
from flask import current_app, jsonify, request
from flask_jwt_extended import verify_jwt_in_request, get_jwt
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from unidecode import unidecode

from .models import AdminRoleEnum

STAFF_ROLES = (AdminRoleEnum.ADMIN.value, AdminRoleEnum.STAFF.value)
ADMIN_ROLES = (AdminRoleEnum.ADMIN.value,)


# --- Sanitization Helper ---
def sanitize_input(value, allow_html=False, max_length=None):
    """
    Basic input sanitizer.
    - Strips leading/trailing whitespace.
    - Optionally removes HTML tags.
    - Optionally truncates to max_length.
    """
    if value is None:
        return None

    value_str = str(value).strip()

    if not allow_html:
        value_str = re.sub(r'<[^>]*>', '', value_str)

    if max_length is not None and len(value_str) > max_length:
        value_str = value_str[:max_length]

    return value_str


def is_valid_email(email):
    if not email:
        return False
    regex = r'^[^\s@]+@[^\s@]+\.[^\s@]+$'
    return re.match(regex, email) is not None


def get_request_data():
    """JSON body for JSON requests, form fields for multipart submissions. Non-object JSON reads as empty."""
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form.to_dict()


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('true', '1', 't', 'yes', 'y', 'on')


def parse_int(value, default=None):
    if value is None or value == '':
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_date(value):
    """Parses an ISO date (YYYY-MM-DD); returns None for empty or invalid input."""
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value)[:10], '%Y-%m-%d').date()
    except ValueError:
        return None


def generate_slug(text):
    if not text: return ""
    text = unidecode(str(text)); text = re.sub(r'[^\w\s-]', '', text).strip().lower(); text = re.sub(r'[-\s]+', '-', text)
    return text


def parse_enum(enum_cls, value):
    if not value:
        return None
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        return None


def paginate_query(query):
    """Applies page/per_page from the query string; returns (items, pagination dict)."""
    page = max(request.args.get('page', 1, type=int) or 1, 1)
    per_page = request.args.get('per_page', current_app.config.get('DEFAULT_PAGE_SIZE', 20), type=int)
    per_page = min(max(per_page or 1, 1), current_app.config.get('MAX_PAGE_SIZE', 100))
    paginated = query.paginate(page=page, per_page=per_page, error_out=False)
    return paginated.items, {
        "page": paginated.page, "per_page": paginated.per_page,
        "total": paginated.total, "pages": paginated.pages
    }


def is_admin_mount():
    """True when the request arrived through an /api/admin/* prefix of the route table."""
    return bool(request.blueprint and request.blueprint.startswith('admin_'))


# --- Role checks ---
def check_roles(allowed_roles):
    """Returns an error response tuple if the request's JWT is missing or its role is not allowed, else None."""
    try: verify_jwt_in_request()
    except (JWTExtendedException, PyJWTError) as e:
        current_app.logger.warning(f"Access denied for {request.path}: JWT verification failed - {e}")
        return jsonify(message="Access token is missing or invalid.", success=False), 401
    claims = get_jwt()
    if claims.get('role') in allowed_roles:
        return None
    current_app.logger.warning(f"Access denied for {request.path}: Role {claims.get('role')} not in {list(allowed_roles)}.")
    return jsonify(message="You do not have permission to perform this action.", success=False), 403


def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        denied = check_roles(ADMIN_ROLES)
        if denied: return denied
        return fn(*args, **kwargs)
    return wrapper


def staff_or_admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        denied = check_roles(STAFF_ROLES)
        if denied: return denied
        return fn(*args, **kwargs)
    return wrapper


def make_unique_slug(model, text, exclude_id=None):
    """Slug for `text` that no other row of `model` uses (appends -2, -3, ...)."""
    base_slug = generate_slug(text) or 'item'
    slug = base_slug
    counter = 2
    while True:
        query = model.query.filter(model.slug == slug)
        if exclude_id is not None:
            query = query.filter(model.id != exclude_id)
        if not query.first():
            return slug
        slug = f"{base_slug}-{counter}"
        counter += 1


def get_by_id_or_slug(model, identifier):
    if identifier.isdecimal():
        return model.query.filter(model.id == int(identifier)).first()
    return model.query.filter(model.slug == identifier).first()
