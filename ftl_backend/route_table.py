# ftl_backend/route_table.py
# Single table of route groups. Each group is mounted once under its public
# prefix and once under its admin prefix; admin mounts require a staff or admin JWT.
from collections import namedtuple
from flask import request

from .utils import check_roles, STAFF_ROLES

RouteGroup = namedtuple('RouteGroup', ['name', 'blueprint', 'public_prefix', 'admin_prefix', 'admin_roles'])

ADMIN_MOUNT_PREFIX = 'admin_'


def build_route_table():
    from .contact import contact_bp
    from .internships import applications_bp, internships_bp
    from .auth import auth_bp
    from .blogs import blogs_bp
    from .service_requests import service_requests_bp
    from .team import team_bp
    from .equipment import equipment_bp
    from .pages import pages_bp
    from .lab_services import services_bp
    from .ai import ai_bp

    return [
        RouteGroup('contact', contact_bp, '/api/contact', '/api/admin/contacts', STAFF_ROLES),
        RouteGroup('internship_applications', applications_bp, '/api/internship', '/api/admin/internship-applications', STAFF_ROLES),
        # Login must stay reachable on the admin prefix, so auth routes guard themselves.
        RouteGroup('auth', auth_bp, '/api/auth', '/api/admin/auth', None),
        RouteGroup('blogs', blogs_bp, '/api/blogs', '/api/admin/blogs', STAFF_ROLES),
        RouteGroup('service_requests', service_requests_bp, '/api/service-request', '/api/admin/service-requests', STAFF_ROLES),
        RouteGroup('team', team_bp, '/api/team', '/api/admin/team', STAFF_ROLES),
        RouteGroup('equipment', equipment_bp, '/api/equipment', '/api/admin/equipment', STAFF_ROLES),
        RouteGroup('pages', pages_bp, '/api/pages', '/api/admin/pages', STAFF_ROLES),
        RouteGroup('internships', internships_bp, '/api/internships', '/api/admin/internships', STAFF_ROLES),
        RouteGroup('services', services_bp, '/api/services', '/api/admin/services', STAFF_ROLES),
        RouteGroup('ai', ai_bp, '/api/ai', None, None),
    ]


def validate_route_table(route_table):
    """Rejects tables where two mounts share a prefix or a blueprint name."""
    seen_prefixes = {}
    seen_names = set()
    for group in route_table:
        if group.name in seen_names:
            raise ValueError(f"Route group '{group.name}' is listed more than once")
        seen_names.add(group.name)
        for prefix in (group.public_prefix, group.admin_prefix):
            if prefix is None:
                continue
            normalized = prefix.rstrip('/')
            if normalized in seen_prefixes:
                raise ValueError(f"Prefix '{prefix}' of route group '{group.name}' is already mounted by '{seen_prefixes[normalized]}'")
            seen_prefixes[normalized] = group.name


def register_route_table(app, route_table=None):
    route_table = route_table if route_table is not None else build_route_table()
    validate_route_table(route_table)

    admin_guards = {}
    for group in route_table:
        app.register_blueprint(group.blueprint, url_prefix=group.public_prefix, name=group.name)
        if group.admin_prefix:
            admin_name = f"{ADMIN_MOUNT_PREFIX}{group.name}"
            app.register_blueprint(group.blueprint, url_prefix=group.admin_prefix, name=admin_name)
            if group.admin_roles:
                admin_guards[admin_name] = group.admin_roles
        app.logger.debug(f"Mounted route group '{group.name}' at {group.public_prefix}" +
                         (f" and {group.admin_prefix}" if group.admin_prefix else ""))

    @app.before_request
    def guard_admin_mounts():
        allowed_roles = admin_guards.get(request.blueprint)
        if allowed_roles is None or request.method == 'OPTIONS':
            return None
        return check_roles(allowed_roles)

    app.extensions['ftl_route_table'] = route_table
    return route_table
