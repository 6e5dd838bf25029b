from uuid import uuid4

from fastapi.testclient import TestClient

from om_intel.main import app


def _auth_headers(client: TestClient) -> dict:
    email = f"{uuid4()}@example.com"
    client.post('/api/auth/register', json={'email': email, 'password': 'secret123'})
    login = client.post('/api/auth/login', json={'email': email, 'password': 'secret123'})
    token = login.json()['access_token']
    return {'Authorization': f"Bearer {token}"}


def test_chat_session_detail_flow():
    with TestClient(app) as client:
        headers = _auth_headers(client)
        created = client.post(
            '/api/chat-sessions',
            json={'title': 'Tampa OM', 'document_id': 'doc-9'},
            headers=headers,
        )
        session_id = created.json()['session']['id']

        message = client.post(
            '/api/messages',
            json={
                'chat_session_id': session_id,
                'role': 'assistant',
                'content': 'The asking price is $12.5M.',
                'metadata': {'pages': [3, 4]},
            },
            headers=headers,
        )
        assert message.status_code == 201

        detail = client.get(f"/api/chat-sessions/{session_id}", headers=headers)
        assert detail.status_code == 200
        session = detail.json()['session']
        assert session['title'] == 'Tampa OM'
        assert session['document_id'] == 'doc-9'
        assert len(session['messages']) == 1
        assert session['messages'][0]['role'] == 'assistant'
        assert session['messages'][0]['metadata'] == {'pages': [3, 4]}

        renamed = client.put(f"/api/chat-sessions/{session_id}", json={'title': 'Tampa retail'}, headers=headers)
        assert renamed.status_code == 200
        assert renamed.json()['session']['title'] == 'Tampa retail'

        cleared = client.put(f"/api/chat-sessions/{session_id}", json={'title': ''}, headers=headers)
        assert cleared.status_code == 200
        assert cleared.json()['session']['title'] == 'New Chat'

        deleted = client.delete(f"/api/chat-sessions/{session_id}", headers=headers)
        assert deleted.status_code == 200
        assert deleted.json() == {'success': True}

        missing = client.get(f"/api/chat-sessions/{session_id}", headers=headers)
        assert missing.status_code == 404
        assert missing.json()['code'] == 'SESSION_NOT_FOUND'

        listed = client.get('/api/chat-sessions', headers=headers)
        assert listed.json()['sessions'] == []


def test_other_users_cannot_modify_session():
    with TestClient(app) as client:
        owner = _auth_headers(client)
        other = _auth_headers(client)
        session_id = client.post('/api/chat-sessions', json={'title': 'mine'}, headers=owner).json()['session']['id']

        renamed = client.put(f"/api/chat-sessions/{session_id}", json={'title': 'theirs'}, headers=other)
        assert renamed.status_code == 404

        deleted = client.delete(f"/api/chat-sessions/{session_id}", headers=other)
        assert deleted.status_code == 404

        detail = client.get(f"/api/chat-sessions/{session_id}", headers=owner)
        assert detail.json()['session']['title'] == 'mine'


def test_detail_rejects_unsupported_methods():
    with TestClient(app) as client:
        headers = _auth_headers(client)

        response = client.patch('/api/chat-sessions/some-id', json={'title': 'x'}, headers=headers)

        assert response.status_code == 405
        assert response.json()['code'] == 'METHOD_NOT_ALLOWED'
