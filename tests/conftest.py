"""Shared fixtures: app on a temporary SQLite file, one user per role, fake Cloudflare."""

import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from database_init import db
from models.cloudflare_acc import CloudflareAccount
from models.user import User

PASSWORD = "secret-password"


@pytest.fixture
def app(tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test_secret_key_for_testing_only",
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
            "WTF_CSRF_ENABLED": False,
            "SESSION_COOKIE_SECURE": False,
            "LOG_DIR": str(tmp_path / "logs"),
            "CLOUDFLARE_API_BASE": "https://cf.test/client/v4",
            "RATE_LIMIT_MAX_REQUESTS": 1000,
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def users(app):
    created = {}
    for role in ("viewer", "editor", "admin"):
        user = User(
            username=role,
            email=f"{role}@example.com",
            password=generate_password_hash(PASSWORD),
            role=role,
        )
        db.session.add(user)
        created[role] = user
    db.session.commit()
    return created


@pytest.fixture
def login(client, users):
    """login("editor") -> đăng nhập client với role tương ứng."""

    def _login(role="admin"):
        resp = client.post("/api/auth/login", json={"username": role, "password": PASSWORD})
        assert resp.status_code == 200, resp.get_json()
        return users[role]

    return _login


@pytest.fixture
def cf_account(app, users):
    account = CloudflareAccount(
        account_name="Main",
        email="ops@example.com",
        api_token="real-secret-token",
        account_id="acc123",
        created_by=users["admin"].id,
    )
    db.session.add(account)
    db.session.commit()
    return account


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else ""

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


class FakeCloudflare:
    """Ghi lại các request gửi tới Cloudflare và trả response đã cấu hình."""

    def __init__(self):
        self.calls = []
        self.response = FakeResponse(200, {"success": True, "result": {"id": "purge-1"}})
        self.error = None

    def __call__(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_cf(monkeypatch):
    fake = FakeCloudflare()
    monkeypatch.setattr("util.cloud_flare.requests.post", lambda url, **kw: fake("POST", url, **kw))
    monkeypatch.setattr("util.cloud_flare.requests.get", lambda url, **kw: fake("GET", url, **kw))
    return fake
