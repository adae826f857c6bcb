import pytest
from faker import Faker

from api import create_app, shutdown_app

fake = Faker()

ADMIN_PASSWORD = "admin-pass-123"


def pytest_configure(config):
    config.addinivalue_line("markers", "auth: mark test as authentication-related")


@pytest.fixture()
def app_factory(tmp_path):
    """Build isolated apps on a temporary SQLite file; all are shut down afterwards."""
    created = []

    def _make(overrides=None, **kwargs):
        settings = {"DATABASE_URL": f"sqlite:///{tmp_path / f'test-{len(created)}.db'}"}
        settings.update(overrides or {})
        app = create_app("testing", overrides=settings, **kwargs)
        created.append(app)
        return app

    yield _make

    for app in created:
        shutdown_app(app)


@pytest.fixture()
def app(app_factory):
    return app_factory()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def storage(app):
    return app.extensions["storage"]


@pytest.fixture()
def auth_service(app):
    return app.extensions["auth_service"]


@pytest.fixture()
def token_issuer(app):
    return app.extensions["token_issuer"]


def register(client, email, password, role=None):
    body = {"email": email, "password": password}
    if role:
        body["role"] = role
    return client.post("/api/v1/auth/register", json=body)


def login(client, email, password):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def user_credentials():
    return {"email": fake.unique.email().lower(), "password": fake.password(length=12)}


@pytest.fixture()
def user_tokens(client, user_credentials):
    assert register(client, **user_credentials).status_code == 201
    resp = login(client, **user_credentials)
    assert resp.status_code == 200
    return resp.get_json()


@pytest.fixture()
def admin_tokens(client):
    email = fake.unique.email().lower()
    assert register(client, email, ADMIN_PASSWORD, role="ADMIN").status_code == 201
    resp = login(client, email, ADMIN_PASSWORD)
    assert resp.status_code == 200
    return resp.get_json()


@pytest.fixture()
def admin_headers(admin_tokens):
    return bearer(admin_tokens["accessToken"])


@pytest.fixture()
def user_headers(user_tokens):
    return bearer(user_tokens["accessToken"])
