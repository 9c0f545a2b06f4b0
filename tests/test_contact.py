import pytest

VALID_CONTACT = {
    'name': 'Asha Rao', 'email': 'asha@example.com', 'phone': '+91 98450 00000',
    'subject': 'Shelf life study', 'message': 'Please share the cost of a shelf life study.'
}


def submit(client, **overrides):
    return client.post('/api/contact', json=dict(VALID_CONTACT, **overrides))


def test_submit_contact(client):
    response = submit(client)
    assert response.status_code == 201
    payload = response.get_json()
    assert payload['success'] is True
    assert payload['data']['status'] == 'new'


@pytest.mark.parametrize('field', ['name', 'email', 'message'])
def test_required_fields(client, field):
    response = submit(client, **{field: ''})
    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_rejects_invalid_email(client):
    response = submit(client, email='not-an-email')
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Please enter a valid email address'


def test_strips_markup(client, staff_headers):
    contact_id = submit(client, name='<b>Asha</b>').get_json()['data']['id']
    detail = client.get(f'/api/admin/contacts/{contact_id}', headers=staff_headers)
    assert detail.get_json()['data']['name'] == 'Asha'


def test_listing_requires_staff(client):
    submit(client)
    assert client.get('/api/contact').status_code == 401


def test_list_paginates_and_searches(client, staff_headers):
    for i in range(3):
        submit(client, name=f'Visitor {i}', email=f'visitor{i}@example.com')
    response = client.get('/api/admin/contacts?per_page=2', headers=staff_headers)
    payload = response.get_json()
    assert len(payload['data']) == 2
    assert payload['pagination'] == {'page': 1, 'per_page': 2, 'total': 3, 'pages': 2}

    search = client.get('/api/admin/contacts?search=visitor1', headers=staff_headers)
    assert [c['email'] for c in search.get_json()['data']] == ['visitor1@example.com']


def test_viewing_marks_read_and_status_update(client, staff_headers):
    contact_id = submit(client).get_json()['data']['id']
    detail = client.get(f'/api/admin/contacts/{contact_id}', headers=staff_headers)
    assert detail.get_json()['data']['status'] == 'read'

    bad = client.patch(f'/api/admin/contacts/{contact_id}/status', json={'status': 'lost'}, headers=staff_headers)
    assert bad.status_code == 400
    ok = client.patch(f'/api/admin/contacts/{contact_id}/status', json={'status': 'replied'}, headers=staff_headers)
    assert ok.get_json()['data']['status'] == 'replied'


def test_soft_and_hard_delete(client, staff_headers):
    archived_id = submit(client).get_json()['data']['id']
    deleted_id = submit(client, email='other@example.com').get_json()['data']['id']

    assert client.delete(f'/api/admin/contacts/{archived_id}?soft=true', headers=staff_headers).status_code == 200
    assert client.delete(f'/api/admin/contacts/{deleted_id}', headers=staff_headers).status_code == 200

    listing = client.get('/api/admin/contacts', headers=staff_headers).get_json()['data']
    assert listing == []
    with_archived = client.get('/api/admin/contacts?include_archived=true', headers=staff_headers).get_json()['data']
    assert [c['id'] for c in with_archived] == [archived_id]
    assert client.get(f'/api/admin/contacts/{deleted_id}', headers=staff_headers).status_code == 404


@pytest.mark.parametrize('body', ['[1, 2]', '"hello"', '42', 'null'])
def test_non_object_json_rejected(client, body):
    response = client.post('/api/contact', data=body, content_type='application/json')
    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_non_object_json_on_update(client, staff_headers):
    response = client.put('/api/admin/services/1', data='["name"]', content_type='application/json', headers=staff_headers)
    assert response.status_code == 200
