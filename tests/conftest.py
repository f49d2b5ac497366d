import pytest

from api import create_app
from models import storage
from services import EXTENSION_KEY

ALICE = {"username": "alice", "email": "a@x.com", "password": "secret12"}
BOB = {"username": "bob", "email": "b@x.com", "password": "hunter22"}


@pytest.fixture
def app():
    app = create_app("testing")
    yield app
    storage.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return app.extensions[EXTENSION_KEY]


@pytest.fixture
def register(client):
    """POST /auth/register with ALICE's fields, overridable per call."""
    def _register(**overrides):
        return client.post("/auth/register", json={**ALICE, **overrides})
    return _register


@pytest.fixture
def alice(register):
    res = register()
    assert res.status_code == 201
    return res.get_json()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
