"""
Tests for visitor submissions: service requests, internship postings and applications.
"""
import io

from ftl_backend.models import Contact

SERVICE_REQUEST = {
    'name': 'Ravi Kumar', 'email': 'ravi@spicesco.in', 'organization': 'Spices Co',
    'sample_type': 'Chilli powder', 'sample_count': 3,
    'description': 'Need Sudan dye screening for export lots.', 'preferred_date': '2026-11-02'
}


def seeded_service_id(client):
    return client.get('/api/services/chemical-analysis').get_json()['data']['id']


class TestServiceRequests:
    def test_submit_links_service_and_contact(self, client):
        payload = dict(SERVICE_REQUEST, service_id=seeded_service_id(client))
        response = client.post('/api/service-request', json=payload)
        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['service_name'] == 'Chemical Analysis'
        assert data['contact']['email'] == 'ravi@spicesco.in'
        assert data['preferred_date'] == '2026-11-02'
        assert data['status'] == 'pending'

    def test_reuses_contact_with_same_email(self, client):
        client.post('/api/service-request', json=SERVICE_REQUEST)
        client.post('/api/service-request', json=dict(SERVICE_REQUEST, email='RAVI@spicesco.in'))
        assert Contact.query.count() == 1

    def test_validation(self, client):
        assert client.post('/api/service-request', json=dict(SERVICE_REQUEST, description='')).status_code == 400
        assert client.post('/api/service-request', json=dict(SERVICE_REQUEST, email='ravi')).status_code == 400
        assert client.post('/api/service-request', json=dict(SERVICE_REQUEST, sample_count=0)).status_code == 400
        assert client.post('/api/service-request', json=dict(SERVICE_REQUEST, service_id=9999)).status_code == 400

    def test_admin_workflow(self, client, staff_headers):
        request_id = client.post('/api/service-request', json=SERVICE_REQUEST).get_json()['data']['id']
        listing = client.get('/api/admin/service-requests?status=pending', headers=staff_headers).get_json()
        assert [r['id'] for r in listing['data']] == [request_id]

        updated = client.patch(f'/api/admin/service-requests/{request_id}/status',
                               json={'status': 'in_progress'}, headers=staff_headers)
        assert updated.get_json()['data']['status'] == 'in_progress'
        assert client.delete(f'/api/admin/service-requests/{request_id}', headers=staff_headers).status_code == 200
        assert client.get(f'/api/admin/service-requests/{request_id}', headers=staff_headers).status_code == 404


def create_internship(client, headers, **fields):
    payload = {'title': 'Food Microbiology Intern', 'description': 'Six week lab rotation', 'positions': 2}
    payload.update(fields)
    return client.post('/api/admin/internships', json=payload, headers=headers)


APPLICATION = {
    'full_name': 'Priya Nair', 'email': 'priya@college.edu', 'phone': '9876543210',
    'college': 'CFTRI', 'course': 'M.Sc Food Technology', 'year_of_study': '2'
}


class TestInternships:
    def test_postings(self, client, staff_headers):
        posting = create_internship(client, staff_headers).get_json()['data']
        assert posting['slug'] == 'food-microbiology-intern'
        assert client.get(f"/api/internships/{posting['slug']}").status_code == 200

        toggled = client.patch(f"/api/admin/internships/{posting['id']}/toggle", headers=staff_headers)
        assert toggled.get_json()['data']['is_active'] is False
        assert client.get('/api/internships').get_json()['data'] == []
        assert client.get(f"/api/internships/{posting['id']}").status_code == 404
        assert len(client.get('/api/admin/internships', headers=staff_headers).get_json()['data']) == 1

    def test_apply_with_resume(self, client, staff_headers):
        posting = create_internship(client, staff_headers).get_json()['data']
        form = dict(APPLICATION, internship_id=str(posting['id']),
                    resume=(io.BytesIO(b'%PDF-1.4'), 'priya_cv.pdf'))
        response = client.post('/api/internship', data=form, content_type='multipart/form-data')
        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['resume_url'].startswith('/uploads/resumes/resume_')
        assert data['internship_title'] == 'Food Microbiology Intern'
        assert client.get(f"/api/internships/{posting['id']}").get_json()['data']['application_count'] == 1

    def test_resume_must_be_document(self, client):
        form = dict(APPLICATION, resume=(io.BytesIO(b'x'), 'cv.png'))
        response = client.post('/api/internship', data=form, content_type='multipart/form-data')
        assert response.status_code == 400

    def test_closed_posting_rejects_applications(self, client, staff_headers):
        posting = create_internship(client, staff_headers, is_active=False).get_json()['data']
        response = client.post('/api/internship', json=dict(APPLICATION, internship_id=posting['id']))
        assert response.status_code == 400

    def test_missing_fields_listed(self, client):
        response = client.post('/api/internship', json=dict(APPLICATION, college='', course=''))
        assert response.status_code == 400
        assert response.get_json()['message'] == 'Missing required fields: college, course'

    def test_applications_admin_prefix(self, client, staff_headers):
        application_id = client.post('/api/internship', json=APPLICATION).get_json()['data']['id']
        listing = client.get('/api/admin/internship-applications', headers=staff_headers).get_json()
        assert listing['pagination']['total'] == 1
        updated = client.patch(f'/api/admin/internship-applications/{application_id}/status',
                               json={'status': 'shortlisted'}, headers=staff_headers)
        assert updated.get_json()['data']['status'] == 'shortlisted'
        # Postings keep their own admin prefix
        assert client.get('/api/admin/internships', headers=staff_headers).get_json()['data'] == []
