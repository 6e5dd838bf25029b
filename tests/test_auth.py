from uuid import uuid4

from fastapi.testclient import TestClient

from om_intel.main import app
from om_intel.services.auth_service import create_refresh_token


def _register(client: TestClient) -> str:
    email = f"{uuid4()}@example.com"
    response = client.post('/api/auth/register', json={'email': email, 'password': 'secret123'})
    assert response.status_code == 201
    return email


def test_register_login_refresh_logout():
    with TestClient(app) as client:
        email = _register(client)

        login = client.post('/api/auth/login', json={'email': email, 'password': 'secret123'})
        assert login.status_code == 200
        tokens = login.json()
        assert tokens['token_type'] == 'bearer'

        me = client.get('/api/me', headers={'Authorization': f"Bearer {tokens['access_token']}"})
        assert me.status_code == 200
        assert me.json()['email'] == email

        refresh = client.post('/api/auth/refresh', json={'refresh_token': tokens['refresh_token']})
        assert refresh.status_code == 200
        rotated = refresh.json()['refresh_token']
        assert rotated != tokens['refresh_token']

        reused = client.post('/api/auth/refresh', json={'refresh_token': tokens['refresh_token']})
        assert reused.status_code == 401
        assert reused.json()['code'] == 'INVALID_TOKEN'

        logout = client.post('/api/auth/logout', json={'refresh_token': rotated})
        assert logout.status_code == 200
        after_logout = client.post('/api/auth/refresh', json={'refresh_token': rotated})
        assert after_logout.status_code == 401


def test_register_rejects_duplicate_email():
    with TestClient(app) as client:
        email = _register(client)

        response = client.post('/api/auth/register', json={'email': email, 'password': 'secret123'})

        assert response.status_code == 400
        assert response.json()['code'] == 'EMAIL_TAKEN'


def test_login_rejects_wrong_password():
    with TestClient(app) as client:
        email = _register(client)

        response = client.post('/api/auth/login', json={'email': email, 'password': 'wrongpass'})

        assert response.status_code == 401
        assert response.json()['code'] == 'INVALID_CREDENTIALS'


def test_invalid_bearer_token_is_rejected():
    with TestClient(app) as client:
        response = client.get('/api/chat-sessions', headers={'Authorization': 'Bearer not-a-jwt'})

        assert response.status_code == 401
        assert response.json()['code'] == 'INVALID_TOKEN'


def test_refresh_token_cannot_be_used_for_access():
    with TestClient(app) as client:
        email = _register(client)
        login = client.post('/api/auth/login', json={'email': email, 'password': 'secret123'}).json()

        response = client.get('/api/chat-sessions', headers={'Authorization': f"Bearer {login['refresh_token']}"})

        assert response.status_code == 401
        assert response.json()['code'] == 'INVALID_TOKEN'


def test_token_for_unknown_user_is_rejected():
    token, _ = create_refresh_token('ghost')
    with TestClient(app) as client:
        response = client.post('/api/auth/refresh', json={'refresh_token': token})

        assert response.status_code == 401
        assert response.json()['code'] == 'INVALID_TOKEN'


def test_access_token_accepted_from_session_cookie():
    with TestClient(app) as client:
        email = _register(client)
        login = client.post('/api/auth/login', json={'email': email, 'password': 'secret123'}).json()
        client.cookies.set('sb-access-token', login['access_token'])

        response = client.get('/api/chat-sessions')

        assert response.status_code == 200
        assert response.json() == {'sessions': []}
