import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from catalog import CatalogClient
from config import Settings

ADMIN_EMAIL = 'admin@movieapp.com'
ADMIN_PASSWORD = 'adminpass'


class FakeTMDB:
    """httpx handler standing in for api.themoviedb.org."""

    def __init__(self):
        self.requests = []
        self.status_code = 200

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={'status_message': 'boom'})
        if request.url.path.endswith('/genre/movie/list'):
            return httpx.Response(200, json={'genres': [{'id': 27, 'name': 'Horror'}]})
        return httpx.Response(200, json={
            'page': int(request.url.params.get('page', 1)),
            'results': [{'id': 27205, 'title': 'Inception'}],
            'total_pages': 1,
            'total_results': 1,
        })

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def anyio_backend():
    return 'asyncio'


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret='test-secret',
        bcrypt_rounds=4,
        tmdb_api_key='test-key',
        admin_username='admin',
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture
def tmdb():
    return FakeTMDB()


@pytest.fixture
def app(settings, tmdb):
    app = create_app(settings)
    app.state.catalog = CatalogClient('test-key', transport=httpx.MockTransport(tmdb))
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def register(client, username='alice', email='alice@x.com', password='secret1'):
    resp = client.post('/api/auth/register', json={'username': username, 'email': email, 'password': password})
    assert resp.status_code == 201, resp.text
    return resp.json()


def bearer(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def alice(client):
    return register(client)


@pytest.fixture
def bob(client):
    return register(client, 'bob', 'bob@x.com', 'secret2')


@pytest.fixture
def admin_token(client):
    resp = client.post('/api/auth/login', json={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD})
    assert resp.status_code == 200, resp.text
    return resp.json()['token']
