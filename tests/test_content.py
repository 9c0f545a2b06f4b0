"""
Tests for the content groups: blogs, team, equipment, service catalogue and pages.
"""
import io
import os


def create_blog(client, headers, **fields):
    payload = {'title': 'Detecting Melamine in Milk', 'content': '<p>Method overview</p>',
               'excerpt': 'How we test', 'tags': 'dairy, adulteration'}
    payload.update(fields)
    return client.post('/api/admin/blogs', json=payload, headers=headers)


class TestBlogs:
    def test_create_and_slug(self, client, staff_headers):
        response = create_blog(client, staff_headers)
        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['slug'] == 'detecting-melamine-in-milk'
        assert data['tags'] == ['dairy', 'adulteration']
        assert data['is_published'] is False

        second = create_blog(client, staff_headers).get_json()['data']
        assert second['slug'] == 'detecting-melamine-in-milk-2'

    def test_drafts_hidden_on_public_mount(self, client, staff_headers):
        post = create_blog(client, staff_headers).get_json()['data']
        assert client.get('/api/blogs').get_json()['data'] == []
        assert client.get(f"/api/blogs/{post['slug']}").status_code == 404

        client.patch(f"/api/admin/blogs/{post['id']}/publish", headers=staff_headers)
        listing = client.get('/api/blogs').get_json()
        assert [p['slug'] for p in listing['data']] == [post['slug']]
        assert listing['pagination']['total'] == 1
        detail = client.get(f"/api/blogs/{post['slug']}").get_json()['data']
        assert detail['published_at'] is not None

    def test_requires_title_and_content(self, client, staff_headers):
        assert create_blog(client, staff_headers, content='').status_code == 400

    def test_anonymous_cannot_create(self, client):
        assert client.post('/api/blogs', json={'title': 'x', 'content': 'y'}).status_code == 401

    def test_update_and_delete(self, client, staff_headers):
        post = create_blog(client, staff_headers).get_json()['data']
        updated = client.put(f"/api/admin/blogs/{post['id']}", json={'excerpt': 'Updated'}, headers=staff_headers)
        assert updated.get_json()['data']['excerpt'] == 'Updated'
        assert client.delete(f"/api/admin/blogs/{post['id']}", headers=staff_headers).status_code == 200
        assert client.get(f"/api/admin/blogs/{post['id']}", headers=staff_headers).status_code == 404


class TestTeam:
    def test_create_with_photo(self, app, client, staff_headers):
        response = client.post('/api/admin/team', data={
            'name': 'Dr. Meera Iyer', 'position': 'Head of Microbiology',
            'image': (io.BytesIO(b'png-bytes'), 'meera.png'),
        }, headers=staff_headers, content_type='multipart/form-data')
        assert response.status_code == 201
        image_url = response.get_json()['data']['image_url']
        assert image_url.startswith('/uploads/team-images/team_')
        stored = os.path.join(app.config['UPLOAD_FOLDER'], image_url[len('/uploads/'):])
        assert os.path.isfile(stored)

        member_id = response.get_json()['data']['id']
        client.delete(f'/api/admin/team/{member_id}', headers=staff_headers)
        assert not os.path.exists(stored)

    def test_rejects_disallowed_extension(self, client, staff_headers):
        response = client.post('/api/admin/team', data={
            'name': 'Dr. Meera Iyer', 'position': 'Head of Microbiology',
            'image': (io.BytesIO(b'MZ'), 'payload.exe'),
        }, headers=staff_headers, content_type='multipart/form-data')
        assert response.status_code == 400
        assert 'File type not allowed' in response.get_json()['message']

    def test_inactive_members_hidden_publicly(self, client, staff_headers):
        client.post('/api/admin/team', json={'name': 'A', 'position': 'Analyst', 'is_active': False}, headers=staff_headers)
        client.post('/api/admin/team', json={'name': 'B', 'position': 'Analyst'}, headers=staff_headers)
        assert [m['name'] for m in client.get('/api/team').get_json()['data']] == ['B']
        assert len(client.get('/api/admin/team', headers=staff_headers).get_json()['data']) == 2


class TestEquipment:
    def test_create_with_image_and_manual(self, client, staff_headers):
        response = client.post('/api/admin/equipment', data={
            'name': 'HPLC', 'manufacturer': 'Agilent',
            'image': (io.BytesIO(b'jpg'), 'hplc.jpg'),
            'manual': (io.BytesIO(b'%PDF'), 'hplc-manual.pdf'),
        }, headers=staff_headers, content_type='multipart/form-data')
        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['image_url'].startswith('/uploads/equipment-images/')
        assert data['manual_url'].startswith('/uploads/equipment-manuals/')

    def test_manual_must_be_document(self, client, staff_headers):
        response = client.post('/api/admin/equipment', data={
            'name': 'GC-MS', 'manual': (io.BytesIO(b'png'), 'manual.png'),
        }, headers=staff_headers, content_type='multipart/form-data')
        assert response.status_code == 400


class TestServices:
    def test_seeded_catalogue_is_public(self, client):
        services = client.get('/api/services').get_json()['data']
        assert 'Microbiological Testing' in [s['name'] for s in services]

    def test_lookup_by_slug_and_id(self, client):
        by_slug = client.get('/api/services/water-testing').get_json()['data']
        assert client.get(f"/api/services/{by_slug['id']}").get_json()['data']['slug'] == 'water-testing'

    def test_crud(self, client, staff_headers):
        created = client.post('/api/admin/services', json={'name': 'Allergen Screening', 'category': 'Immunology'},
                              headers=staff_headers)
        assert created.status_code == 201
        service = created.get_json()['data']
        renamed = client.put(f"/api/admin/services/{service['id']}", json={'name': 'Allergen Panel'}, headers=staff_headers)
        assert renamed.get_json()['data']['slug'] == 'allergen-panel'
        assert client.delete(f"/api/admin/services/{service['id']}", headers=staff_headers).status_code == 200
        assert client.get('/api/services/allergen-panel').status_code == 404


class TestPages:
    def test_seeded_page_content_is_json(self, client):
        page = client.get('/api/pages/home').get_json()['data']
        assert page['content']['heading'] == 'Reliable food testing you can trust'

    def test_create_page_with_plain_text(self, client, staff_headers):
        response = client.post('/api/admin/pages', json={'title': 'Quality Policy', 'content': 'We test to standard.'},
                               headers=staff_headers)
        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['slug'] == 'quality-policy'
        assert data['content'] == {'body': 'We test to standard.'}

    def test_duplicate_slug_conflicts(self, client, staff_headers):
        response = client.post('/api/admin/pages', json={'title': 'Home again', 'slug': 'home', 'content': {}},
                               headers=staff_headers)
        assert response.status_code == 409

    def test_unpublished_hidden_publicly(self, client, staff_headers):
        created = client.post('/api/admin/pages', json={'title': 'Draft', 'is_published': False, 'content': {'body': 'x'}},
                              headers=staff_headers).get_json()['data']
        assert client.get('/api/pages/draft').status_code == 404
        assert client.get('/api/admin/pages/draft', headers=staff_headers).status_code == 200
        assert 'draft' not in [p['slug'] for p in client.get('/api/pages').get_json()['data']]
        assert client.delete(f"/api/admin/pages/{created['id']}", headers=staff_headers).status_code == 200

    def test_hero_settings(self, app, client):
        for name in ('b.jpg', 'a.png', 'notes.txt'):
            with open(os.path.join(app.config['IMAGE_FOLDER'], name), 'wb') as f:
                f.write(b'x')
        data = client.get('/api/pages/hero').get_json()['data']
        assert data['images'] == ['/images/a.png', '/images/b.jpg']
        assert data['interval'] == 6000
        assert data['autoplay'] is True
        assert data['pause_on_hover'] is True

    def test_hero_images_override(self, app, client):
        app.config['HERO_IMAGES'] = [f'/images/{i}.jpg' for i in range(8)]
        data = client.get('/api/pages/hero').get_json()['data']
        assert len(data['images']) == app.config['HERO_SLIDER_MAX_IMAGES']

    def test_renaming_to_taken_slug_conflicts(self, client, staff_headers):
        created = client.post('/api/admin/pages', json={'title': 'Careers', 'content': {'body': 'Join us'}},
                              headers=staff_headers).get_json()['data']
        response = client.put(f"/api/admin/pages/{created['id']}", json={'slug': 'home'}, headers=staff_headers)
        assert response.status_code == 409
        assert response.get_json()['success'] is False
        assert client.get('/api/pages/careers').status_code == 200

    def test_rename_to_free_slug(self, client, staff_headers):
        created = client.post('/api/admin/pages', json={'title': 'Careers', 'content': {}},
                              headers=staff_headers).get_json()['data']
        response = client.put(f"/api/admin/pages/{created['id']}", json={'slug': 'jobs'}, headers=staff_headers)
        assert response.get_json()['data']['slug'] == 'jobs'


def test_superscript_identifier_is_not_found(client):
    assert client.get('/api/services/²').status_code == 404
    assert client.get('/api/blogs/²').status_code == 404
