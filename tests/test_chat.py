import pytest

from ftl_backend.services.chat_service import build_reply, match_intent, FALLBACK_REPLY


def test_chat_reply_and_history(client):
    response = client.post('/api/ai/chat', json={'message': 'Do you offer internships?'})
    assert response.status_code == 200
    data = response.get_json()['data']
    assert 'internship' in data['reply'].lower()
    assert data['suggestions']

    history = client.get(f"/api/ai/chat/{data['session_id']}").get_json()['data']
    assert [m['sender'] for m in history] == ['user', 'bot']
    assert history[0]['message'] == 'Do you offer internships?'


def test_session_is_continued(client):
    first = client.post('/api/ai/chat', json={'message': 'hello'}).get_json()['data']
    client.post('/api/ai/chat', json={'message': 'How do I submit a sample?', 'session_id': first['session_id']})
    history = client.get(f"/api/ai/chat/{first['session_id']}").get_json()['data']
    assert len(history) == 4


@pytest.mark.parametrize('message', ['', '   ', None])
def test_empty_message_rejected(client, message):
    assert client.post('/api/ai/chat', json={'message': message}).status_code == 400


def test_long_message_rejected(client):
    response = client.post('/api/ai/chat', json={'message': 'a' * 1001})
    assert response.status_code == 400


def test_no_admin_mount(client):
    assert client.post('/api/admin/ai/chat', json={'message': 'hi'}).status_code == 404


def test_services_question_lists_catalogue(app):
    reply, _ = build_reply('What testing services do you offer?')
    assert 'Microbiological Testing' in reply


def test_named_service_is_described(app):
    reply, _ = build_reply('Tell me about water testing')
    assert reply.startswith('Water Testing:')


def test_unknown_question_falls_back(app):
    reply, _ = build_reply('qwerty zxcvb')
    assert reply == FALLBACK_REPLY


def test_intent_matching():
    assert match_intent('Is your lab NABL accredited?')[0] == 'accreditation'
    assert match_intent('what are your charges')[0] == 'pricing'
    assert match_intent('xyz') is None
