# tests/conftest.py
import os
import sys
from functools import partial
from urllib.parse import urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

# make `import app` work when running from the repository root
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app import create_app
from extensions import db
from models import Role, User
from security import hash_password, token_for

API_URL = "http://ativix.test"


@pytest.fixture()
def app():
    # no app context is held open here: every test-client request must get its own,
    # otherwise Flask-Login's per-context user cache leaks between requests
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "SECRET_KEY": "test-secret",
        "JWT_SECRET": "test-jwt-secret",
        "LOG_LEVEL": "WARNING",
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


def make_user(app, username, role=Role.USER, password="secret123", name=None):
    """Insert a user and return it detached, with every column loaded."""
    with app.app_context():
        user = User(name=name or username.title(), username=username,
                    password=hash_password(password), role=role)
        db.session.add(user)
        db.session.commit()
        db.session.refresh(user)
        db.session.expunge(user)
        return user


@pytest.fixture()
def admin_user(app):
    return make_user(app, "admin", Role.ADMIN)


@pytest.fixture()
def regular_user(app):
    return make_user(app, "maria", Role.USER)


@pytest.fixture()
def other_user(app):
    return make_user(app, "joao", Role.USER)


def auth(app, user) -> dict:
    with app.app_context():
        return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture()
def admin_headers(app, admin_user):
    return auth(app, admin_user)


@pytest.fixture()
def user_headers(app, regular_user):
    return auth(app, regular_user)


@pytest.fixture()
def user_factory(app):
    return partial(make_user, app)


@pytest.fixture()
def auth_headers(app):
    return partial(auth, app)


# ---------- client library over the Flask test client ----------
class FlaskTestAdapter(BaseAdapter):
    """Serve ``requests`` calls from the Flask test client instead of the network."""

    def __init__(self, flask_client):
        super().__init__()
        self.flask_client = flask_client

    def send(self, request, **kwargs):
        parts = urlsplit(request.url)
        path = parts.path + (f"?{parts.query}" if parts.query else "")
        headers = {k: v for k, v in request.headers.items() if k.lower() != "content-length"}
        resp = self.flask_client.open(path, method=request.method, headers=headers, data=request.body)

        out = requests.Response()
        out.status_code = resp.status_code
        out._content = resp.get_data()
        out.headers = CaseInsensitiveDict(resp.headers)
        out.url = request.url
        out.request = request
        out.encoding = "utf-8"
        return out

    def close(self):
        pass


@pytest.fixture()
def session_store(tmp_path):
    from ativix_client import SessionStore
    return SessionStore(tmp_path / "session.json")


@pytest.fixture()
def api(client, session_store):
    from ativix_client import ApiClient
    api = ApiClient(API_URL, session_store)
    api.http.mount(API_URL, FlaskTestAdapter(client))
    return api
