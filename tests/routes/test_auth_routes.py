import asyncio
import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from portfolio_api.core.errors import ConflictError, InternalError
from portfolio_api.main import create_app, handle_unexpected_error
from portfolio_api.routes import auth_routes
from portfolio_api.services.auth_service import AuthService
from portfolio_api.services.user_store import UserStore


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def _auth_header(token: str) -> dict:
    return {'Authorization': f'Bearer {token}'}


def _register(client: TestClient, email='a@x.com', password='secret1', name='Ann') -> dict:
    response = client.post('/api/auth/register', json={'email': email, 'password': password, 'name': name})
    assert response.status_code == 201
    return response.json()


def test_register_login_and_me_scenario(client: TestClient) -> None:
    registered = _register(client)
    assert registered['message'] == 'User registered successfully'
    assert registered['token']

    login = client.post('/api/auth/login', json={'email': 'a@x.com', 'password': 'secret1'})
    assert login.status_code == 200
    assert login.json()['message'] == 'Login successful'

    wrong = client.post('/api/auth/login', json={'email': 'a@x.com', 'password': 'wrong'})
    assert wrong.status_code == 401
    assert wrong.json() == {'error': 'Invalid email or password'}

    me = client.get('/api/auth/me', headers=_auth_header(login.json()['token']))
    assert me.status_code == 200
    assert me.json() == {'id': 1, 'email': 'a@x.com', 'name': 'Ann', 'role': 'user'}


def test_register_response_never_exposes_password_hash(client: TestClient) -> None:
    body = _register(client)

    assert body['user'] == {'id': 1, 'email': 'a@x.com', 'name': 'Ann', 'role': 'user'}
    assert 'password' not in str(body['user'])


def test_register_duplicate_email_returns_400(client: TestClient) -> None:
    _register(client)

    response = client.post('/api/auth/register', json={'email': 'a@x.com', 'password': 'x', 'name': 'Other'})

    assert response.status_code == 400
    assert response.json() == {'error': 'User with this email already exists'}


def test_register_missing_fields_returns_400(client: TestClient) -> None:
    response = client.post('/api/auth/register', json={'email': 'a@x.com'})

    assert response.status_code == 400
    assert response.json() == {'error': 'Email, password, and name are required'}


def test_register_without_body_returns_400(client: TestClient) -> None:
    response = client.post('/api/auth/register')

    assert response.status_code == 400
    assert response.json() == {'error': 'Invalid request body'}


def test_login_missing_fields_returns_400(client: TestClient) -> None:
    response = client.post('/api/auth/login', json={'email': 'a@x.com'})

    assert response.status_code == 400
    assert response.json() == {'error': 'Email and password are required'}


def test_init_admin_scenario(client: TestClient) -> None:
    response = client.post('/api/auth/init-admin')

    assert response.status_code == 201
    body = response.json()
    assert body['user'] == {'id': 1, 'email': 'admin@example.com', 'name': 'Admin User', 'role': 'admin'}
    assert body['credentials'] == {'email': 'admin@example.com', 'password': 'admin123'}

    repeat = client.post('/api/auth/init-admin', json={})
    assert repeat.status_code == 400
    assert repeat.json() == {'error': 'Users already exist. Cannot initialize admin.'}


def test_init_admin_accepts_custom_credentials(client: TestClient) -> None:
    response = client.post('/api/auth/init-admin', json={'email': 'root@x.com', 'password': 'pw1'})

    assert response.status_code == 201
    assert response.json()['user']['name'] == 'Admin User'
    login = client.post('/api/auth/login', json={'email': 'root@x.com', 'password': 'pw1'})
    assert login.json()['user']['role'] == 'admin'


def test_me_without_token_returns_401(client: TestClient) -> None:
    response = client.get('/api/auth/me')

    assert response.status_code == 401
    assert response.json() == {'error': 'Access denied. No token provided.'}


def test_verify_with_invalid_token_returns_403(client: TestClient) -> None:
    response = client.post('/api/auth/verify', headers=_auth_header('not-a-token'))

    assert response.status_code == 403
    assert response.json() == {'error': 'Invalid or expired token.'}


def test_verify_returns_token_claims(client: TestClient) -> None:
    token = _register(client)['token']

    response = client.post('/api/auth/verify', headers=_auth_header(token))

    assert response.status_code == 200
    body = response.json()
    assert body['valid'] is True
    assert body['user']['userId'] == 1
    assert body['user']['email'] == 'a@x.com'
    assert body['user']['role'] == 'user'
    assert body['user']['exp'] > body['user']['iat']


def test_wrong_current_password_scenario(client: TestClient) -> None:
    token = _register(client)['token']

    response = client.patch(
        '/api/auth/password',
        json={'currentPassword': 'wrong', 'newPassword': 'secret2'},
        headers=_auth_header(token),
    )

    assert response.status_code == 401
    assert response.json() == {'error': 'Current password is incorrect'}
    login = client.post('/api/auth/login', json={'email': 'a@x.com', 'password': 'secret1'})
    assert login.status_code == 200


def test_change_password_then_login_with_new_password(client: TestClient) -> None:
    token = _register(client)['token']

    response = client.patch(
        '/api/auth/password',
        json={'currentPassword': 'secret1', 'newPassword': 'secret2'},
        headers=_auth_header(token),
    )

    assert response.status_code == 200
    assert response.json() == {'message': 'Password updated successfully'}
    assert client.post('/api/auth/login', json={'email': 'a@x.com', 'password': 'secret1'}).status_code == 401
    assert client.post('/api/auth/login', json={'email': 'a@x.com', 'password': 'secret2'}).status_code == 200


def test_change_password_missing_fields_returns_400(client: TestClient) -> None:
    token = _register(client)['token']

    response = client.patch('/api/auth/password', json={'currentPassword': 'secret1'}, headers=_auth_header(token))

    assert response.status_code == 400
    assert response.json() == {'error': 'Current password and new password are required'}


def test_update_profile_changes_name_and_email(client: TestClient) -> None:
    token = _register(client)['token']

    response = client.put('/api/auth/profile', json={'name': 'Annie', 'email': 'annie@x.com'}, headers=_auth_header(token))

    assert response.status_code == 200
    assert response.json() == {
        'message': 'Profile updated successfully',
        'user': {'id': 1, 'email': 'annie@x.com', 'name': 'Annie', 'role': 'user'},
    }


def test_update_profile_rejects_email_in_use(client: TestClient) -> None:
    _register(client)
    token = _register(client, email='b@x.com', name='Bob')['token']

    response = client.put('/api/auth/profile', json={'email': 'a@x.com'}, headers=_auth_header(token))

    assert response.status_code == 400
    assert response.json() == {'error': 'Email already in use'}


def test_deleted_account_token_still_verifies_but_user_is_gone(client: TestClient) -> None:
    token = _register(client)['token']

    deleted = client.delete('/api/auth/account', headers=_auth_header(token))
    assert deleted.status_code == 200
    assert deleted.json() == {'message': 'Account deleted successfully'}

    assert client.post('/api/auth/verify', headers=_auth_header(token)).status_code == 200
    me = client.get('/api/auth/me', headers=_auth_header(token))
    assert me.status_code == 404
    assert me.json() == {'error': 'User not found'}
    assert client.put('/api/auth/profile', json={'name': 'x'}, headers=_auth_header(token)).status_code == 404
    assert client.delete('/api/auth/account', headers=_auth_header(token)).status_code == 404


def test_registration_after_deletion_gets_new_id(client: TestClient) -> None:
    _register(client)
    token = _register(client, email='b@x.com', name='Bob')['token']
    client.delete('/api/auth/account', headers=_auth_header(token))

    assert _register(client, email='c@x.com', name='Cat')['user']['id'] == 3


def test_apps_keep_separate_user_stores() -> None:
    first = TestClient(create_app())
    second = TestClient(create_app())
    _register(first)

    response = second.post('/api/auth/login', json={'email': 'a@x.com', 'password': 'secret1'})

    assert response.status_code == 401


def test_register_route_can_be_called_directly() -> None:
    service = AuthService(UserStore())

    body = auth_routes.register(auth_routes.RegisterRequest(email='a@x.com', password='secret1', name='Ann'), service)

    assert body['user']['email'] == 'a@x.com'
    with pytest.raises(ConflictError):
        auth_routes.register(auth_routes.RegisterRequest(email='a@x.com', password='x', name='Ann'), service)


def test_unexpected_errors_become_generic_500(monkeypatch: pytest.MonkeyPatch) -> None:
    def explode(self, email, password):
        raise RuntimeError('database exploded')

    monkeypatch.setattr(AuthService, 'authenticate', explode)
    client = TestClient(create_app(), raise_server_exceptions=False)

    response = client.post('/api/auth/login', json={'email': 'a@x.com', 'password': 'secret1'})

    assert response.status_code == 500
    assert response.json() == {'error': 'Internal server error'}


def test_deleted_users_token_does_not_reach_bootstrapped_admin(client: TestClient) -> None:
    token = _register(client)['token']
    client.delete('/api/auth/account', headers=_auth_header(token))

    admin = client.post('/api/auth/init-admin')
    assert admin.status_code == 201
    assert admin.json()['user']['role'] == 'admin'
    assert admin.json()['user']['id'] != 1

    me = client.get('/api/auth/me', headers=_auth_header(token))
    assert me.status_code == 404
    hijack = client.put('/api/auth/profile', json={'email': 'hijack@x.com'}, headers=_auth_header(token))
    assert hijack.status_code == 404
    login = client.post('/api/auth/login', json={'email': 'admin@example.com', 'password': 'admin123'})
    assert login.json()['user']['email'] == 'admin@example.com'


def test_init_admin_keeps_explicit_empty_password(client: TestClient) -> None:
    response = client.post('/api/auth/init-admin', json={'password': ''})

    assert response.status_code == 201
    assert response.json()['credentials'] == {'email': 'admin@example.com', 'password': ''}


def test_unexpected_error_handler_answers_with_internal_error() -> None:
    request = SimpleNamespace(method='GET', url=SimpleNamespace(path='/api/auth/me'))

    response = asyncio.run(handle_unexpected_error(request, RuntimeError('boom')))

    assert response.status_code == 500
    assert json.loads(response.body) == {'error': InternalError().message}
    assert 'boom' not in response.body.decode()
