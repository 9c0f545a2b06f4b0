from ftl_backend.models import AuditLog


def test_login_returns_token_and_user(app, client):
    response = client.post('/api/auth/login', json={
        'email': app.config['INITIAL_ADMIN_EMAIL'].upper(),
        'password': app.config['INITIAL_ADMIN_PASSWORD'],
    })
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['token']
    assert data['user']['role'] == 'admin'
    assert data['user']['last_login_at'] is not None


def test_login_rejects_bad_password(app, client):
    response = client.post('/api/auth/login', json={
        'email': app.config['INITIAL_ADMIN_EMAIL'], 'password': 'wrong-password'
    })
    assert response.status_code == 401
    assert AuditLog.query.filter_by(action='login_fail_credentials').count() == 1


def test_login_requires_fields(client):
    assert client.post('/api/auth/login', json={'email': ''}).status_code == 400


def test_me_and_logout(client, admin_headers):
    me = client.get('/api/auth/me', headers=admin_headers)
    assert me.status_code == 200
    assert me.get_json()['data']['email'] == 'admin@test.ftl.org.in'

    assert client.post('/api/auth/logout', headers=admin_headers).status_code == 200
    revoked = client.get('/api/auth/me', headers=admin_headers)
    assert revoked.status_code == 401
    assert revoked.get_json()['message'] == 'Access token has been revoked.'


def test_admin_registers_staff(client, admin_headers):
    payload = {'email': 'analyst@test.ftl.org.in', 'password': 'analyst_pw_123', 'full_name': 'Analyst'}
    response = client.post('/api/auth/register', json=payload, headers=admin_headers)
    assert response.status_code == 201
    assert response.get_json()['data']['role'] == 'staff'

    duplicate = client.post('/api/auth/register', json=payload, headers=admin_headers)
    assert duplicate.status_code == 409


def test_staff_cannot_register_accounts(client, staff_headers):
    response = client.post('/api/auth/register', json={
        'email': 'other@test.ftl.org.in', 'password': 'other_pw_1234'
    }, headers=staff_headers)
    assert response.status_code == 403


def test_register_validates_password_length(client, admin_headers):
    response = client.post('/api/auth/register', json={
        'email': 'short@test.ftl.org.in', 'password': 'short'
    }, headers=admin_headers)
    assert response.status_code == 400


def test_change_password(app, client, admin_headers):
    wrong = client.put('/api/auth/password', json={
        'current_password': 'nope', 'new_password': 'brand_new_pw_1'
    }, headers=admin_headers)
    assert wrong.status_code == 400

    response = client.put('/api/auth/password', json={
        'current_password': app.config['INITIAL_ADMIN_PASSWORD'], 'new_password': 'brand_new_pw_1'
    }, headers=admin_headers)
    assert response.status_code == 200
    login = client.post('/api/auth/login', json={
        'email': app.config['INITIAL_ADMIN_EMAIL'], 'password': 'brand_new_pw_1'
    })
    assert login.status_code == 200
