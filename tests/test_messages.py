from uuid import uuid4

from fastapi.testclient import TestClient

from om_intel.main import app


def _auth_headers(client: TestClient) -> dict:
    email = f"{uuid4()}@example.com"
    client.post('/api/auth/register', json={'email': email, 'password': 'secret123'})
    login = client.post('/api/auth/login', json={'email': email, 'password': 'secret123'})
    token = login.json()['access_token']
    return {'Authorization': f"Bearer {token}"}


def test_create_message_returns_record():
    with TestClient(app) as client:
        headers = _auth_headers(client)
        session_id = client.post('/api/chat-sessions', headers=headers).json()['session']['id']

        response = client.post(
            '/api/messages',
            json={'chat_session_id': session_id, 'role': 'user', 'content': 'Summarize the rent roll'},
            headers=headers,
        )

        assert response.status_code == 201
        message = response.json()['message']
        assert message['chat_session_id'] == session_id
        assert message['role'] == 'user'
        assert message['content'] == 'Summarize the rent roll'
        assert message['metadata'] == {}


def test_create_message_bumps_session_activity():
    with TestClient(app) as client:
        headers = _auth_headers(client)
        created = client.post('/api/chat-sessions', headers=headers).json()['session']

        client.post(
            '/api/messages',
            json={'chat_session_id': created['id'], 'role': 'user', 'content': 'hi'},
            headers=headers,
        )

        listed = client.get('/api/chat-sessions', headers=headers).json()['sessions']
        assert listed[0]['updated_at'] != created['updated_at']


def test_create_message_for_foreign_session_is_not_found():
    with TestClient(app) as client:
        owner = _auth_headers(client)
        other = _auth_headers(client)
        session_id = client.post('/api/chat-sessions', headers=owner).json()['session']['id']

        response = client.post(
            '/api/messages',
            json={'chat_session_id': session_id, 'role': 'user', 'content': 'hi'},
            headers=other,
        )

        assert response.status_code == 404
        assert response.json()['code'] == 'SESSION_NOT_FOUND'


def test_create_message_validates_payload():
    with TestClient(app) as client:
        headers = _auth_headers(client)
        session_id = client.post('/api/chat-sessions', headers=headers).json()['session']['id']

        response = client.post(
            '/api/messages',
            json={'chat_session_id': session_id, 'role': 'narrator', 'content': 'hi'},
            headers=headers,
        )

        assert response.status_code == 422
        body = response.json()
        assert body['code'] == 'VALIDATION_ERROR'
        assert 'role' in body['message']


def test_messages_rejects_get():
    with TestClient(app) as client:
        headers = _auth_headers(client)

        response = client.get('/api/messages', headers=headers)

        assert response.status_code == 405
        assert response.json()['code'] == 'METHOD_NOT_ALLOWED'
