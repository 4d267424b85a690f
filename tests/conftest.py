# tests/conftest.py
import os, sys
import httpx
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ["APP_ENV"] = "test"

from notesync import create_app
from notesync.extensions import db
from notesync.client import create_client

PASSWORD = "SuperSecret123"


@pytest.fixture()
def app():
    app = create_app()
    app.config.update(TESTING=True)
    with app.app_context():
        # base SQLite en mémoire, propre pour chaque test
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


def register(client, email, username="tester", password=PASSWORD):
    r = client.post("/api/auth/register", json={"email": email, "username": username, "password": password})
    assert r.status_code == 201, r.get_json()
    return r.get_json()["token"]


def auth(token):
    return {"Authorization": f"Bearer {token}"}


class OutageTransport(httpx.BaseTransport):
    """Routes requests to the Flask app until an outage is simulated.

    ``failure`` raises a transport error; ``intercept`` answers in place of the app.
    """

    def __init__(self, app):
        self.inner = httpx.WSGITransport(app=app)
        self.failure = None
        self.intercept = None
        self.calls = 0

    def handle_request(self, request):
        self.calls += 1
        if self.failure is not None:
            raise self.failure("simulated outage", request=request)
        if self.intercept is not None:
            return self.intercept(request)
        return self.inner.handle_request(request)


@pytest.fixture()
def transport(app):
    return OutageTransport(app)


@pytest.fixture()
def device(tmp_path, transport):
    notes_client = create_client(
        storage_dir=str(tmp_path / "device"),
        base_url="http://testserver/api",
        timeout=2.0,
        transport=transport,
    )
    yield notes_client
    notes_client.close()
