import pytest
from flask import Blueprint
from flask_jwt_extended import create_access_token

from ftl_backend.route_table import RouteGroup, validate_route_table, build_route_table
from ftl_backend.utils import STAFF_ROLES


def test_every_group_is_mounted(app):
    table = app.extensions['ftl_route_table']
    names = {group.name for group in table}
    assert names == {'contact', 'internship_applications', 'auth', 'blogs', 'service_requests',
                     'team', 'equipment', 'pages', 'internships', 'services', 'ai'}
    assert 'admin_blogs' in app.blueprints
    assert 'admin_ai' not in app.blueprints


def test_default_table_is_valid():
    validate_route_table(build_route_table())


def test_duplicate_prefix_rejected():
    first, second = Blueprint('first', __name__), Blueprint('second', __name__)
    table = [
        RouteGroup('first', first, '/api/first', '/api/admin/shared', STAFF_ROLES),
        RouteGroup('second', second, '/api/second', '/api/admin/shared/', STAFF_ROLES),
    ]
    with pytest.raises(ValueError):
        validate_route_table(table)


def test_duplicate_name_rejected():
    bp = Blueprint('dup', __name__)
    table = [
        RouteGroup('dup', bp, '/api/a', None, None),
        RouteGroup('dup', bp, '/api/b', None, None),
    ]
    with pytest.raises(ValueError):
        validate_route_table(table)


@pytest.mark.parametrize('path', [
    '/api/admin/contacts', '/api/admin/blogs', '/api/admin/team', '/api/admin/equipment',
    '/api/admin/pages', '/api/admin/internships', '/api/admin/services',
    '/api/admin/service-requests', '/api/admin/internship-applications',
])
def test_admin_mounts_require_token(client, path):
    response = client.get(path)
    assert response.status_code == 401
    assert response.get_json()['success'] is False


def test_admin_mount_rejects_unknown_role(app, client):
    token = create_access_token(identity='99', additional_claims={'role': 'visitor'})
    response = client.get('/api/admin/blogs', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 403


def test_staff_can_use_admin_mounts(client, staff_headers):
    assert client.get('/api/admin/contacts', headers=staff_headers).status_code == 200
    assert client.get('/api/admin/blogs', headers=staff_headers).status_code == 200


def test_public_mount_stays_open(client):
    assert client.get('/api/blogs').status_code == 200
    assert client.get('/api/services').status_code == 200


def test_admin_auth_login_is_public(app, client):
    response = client.post('/api/admin/auth/login', json={
        'email': app.config['INITIAL_ADMIN_EMAIL'],
        'password': app.config['INITIAL_ADMIN_PASSWORD'],
    })
    assert response.status_code == 200
