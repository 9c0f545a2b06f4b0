"""Shared pytest fixtures.

app / client       : application built with TestingConfig on in-memory SQLite,
                     with uploads and images redirected to a temp directory
admin_headers      : Authorization header for the seeded admin account
staff_headers      : Authorization header for a staff account
"""
import pytest

from ftl_backend import create_app
from ftl_backend.auth.tokens import create_admin_token
from ftl_backend.config import TestingConfig
from ftl_backend.database import create_admin_user, populate_initial_data
from ftl_backend.models import AdminRoleEnum
from ftl_backend.models.base import db


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setattr(TestingConfig, 'UPLOAD_FOLDER', str(tmp_path / 'uploads'))
    monkeypatch.setattr(TestingConfig, 'IMAGE_FOLDER', str(tmp_path / 'image'))
    (tmp_path / 'image').mkdir()
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        populate_initial_data()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def auth_header(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_headers(app, client):
    response = client.post('/api/auth/login', json={
        'email': app.config['INITIAL_ADMIN_EMAIL'],
        'password': app.config['INITIAL_ADMIN_PASSWORD'],
    })
    assert response.status_code == 200
    return auth_header(response.get_json()['data']['token'])


@pytest.fixture
def staff_headers(app):
    user = create_admin_user('staff@test.ftl.org.in', 'staff_password_123', full_name='Lab Staff', role=AdminRoleEnum.STAFF)
    db.session.commit()
    return auth_header(create_admin_token(user))
