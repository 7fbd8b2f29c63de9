# conftest.py
# Pytest configuration for the SCMan test environment
#
# Points the application at a throw-away SQLite file before any scman module
# is imported, rebuilds the schema around every test and exposes factories
# for users, events and bearer headers.

import os
import tempfile
from datetime import date, timedelta

_TEST_DIR = tempfile.mkdtemp(prefix="scman-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DIR, 'scman-test.db')}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["LOG_FILE"] = ""
os.environ.pop("ADMIN_USERNAME", None)
os.environ.pop("ADMIN_PASSWORD", None)

import pytest
from fastapi.testclient import TestClient

from scman.core.security import create_user_token
from scman.db.base import Base
from scman.db.session import SessionLocal, engine, init_db
from scman.main import app
from scman.models.event import Event
from scman.models.user import User
from scman.services.notifications import notification_center
from scman.utils.crypto import hash_password


@pytest.fixture(autouse=True)
def schema():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal(expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def clear_notifications():
    yield
    notification_center.purge_expired()
    notification_center._queues.clear()


@pytest.fixture
def make_user(db):
    def _make_user(username="member", role="user", password="secret", active=True, full_name=None):
        user = User(
            username=username,
            full_name=full_name or username.title(),
            role=role,
            active=active,
            passhash=hash_password(password) if active else None,
        )
        db.add(user)
        db.commit()
        return user
    return _make_user


@pytest.fixture
def make_event(db):
    def _make_event(name="Regional Open", change_limit=2, type=0, days_ahead=14, description=None):
        start = date.today() + timedelta(days=days_ahead)
        event = Event(
            name=name,
            start=start,
            end=start + timedelta(days=1),
            location="Lisboa",
            sub_limit_date=start - timedelta(days=3),
            change_limit=change_limit,
            type=type,
            description=description,
        )
        db.add(event)
        db.commit()
        return event
    return _make_event


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_user_token(user)}"}
    return _auth_headers


@pytest.fixture
def admin(make_user):
    return make_user("root", role="admin", password="rootpass", full_name="Club Admin")


@pytest.fixture
def member(make_user):
    return make_user("ana", role="user", password="anapass", full_name="Ana Silva")
