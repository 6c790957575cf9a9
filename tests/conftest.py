from __future__ import annotations

import pytest

from engineering_portal import create_app
from engineering_portal.extensions import db
from engineering_portal.models import Department, Role, User

ADMIN_PHONE = "0790000001"
USER_PHONE = "0790000002"
PASSWORD = "secret123"


class FakeSMTP:
    sent: list = []
    fail_with: Exception | None = None

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        return None

    def login(self, user, password):
        return None

    def send_message(self, message):
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        FakeSMTP.sent.append(message)


@pytest.fixture
def app(tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'portal.db'}",
            "UPLOAD_ROOT": str(tmp_path / "media"),
            "SEED_ON_STARTUP": False,
            "SMTP_HOST": "smtp.example.test",
            "SMTP_FROM": "support@example.test",
            "SMTP_USE_TLS": False,
        }
    )
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.sent = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr("engineering_portal.mailer.smtplib.SMTP", FakeSMTP)
    return FakeSMTP


def add(app, obj):
    with app.app_context():
        db.session.add(obj)
        db.session.commit()
        return obj.id


def fetch(app, model, item_id):
    with app.app_context():
        item = db.session.get(model, item_id)
        if item is not None:
            db.session.expunge(item)
        return item


def count(app, model, **filters):
    with app.app_context():
        return model.query.filter_by(**filters).count()


def make_user(app, phone, role=Role.USER, full_name="Test User"):
    user = User(username=phone, full_name=full_name, role=role)
    user.set_password(PASSWORD)
    return add(app, user)


def login(client, phone):
    return client.post("/account/login", data={"phone": phone, "password": PASSWORD})


@pytest.fixture
def admin_client(app, client):
    make_user(app, ADMIN_PHONE, Role.ADMIN, "Portal Admin")
    response = login(client, ADMIN_PHONE)
    assert response.status_code == 302
    return client


@pytest.fixture
def user_client(app, client):
    make_user(app, USER_PHONE)
    response = login(client, USER_PHONE)
    assert response.status_code == 302
    return client


@pytest.fixture
def department(app):
    return add(app, Department(code="COMP", name_ar="هندسة الحاسوب", name_en="Computer Engineering"))
