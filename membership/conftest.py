"""Shared fixtures: in-memory SQLite store and an authenticated TestClient."""
import os

# must be set before membership.settings is first imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

from datetime import date, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from membership.auth import ROLE_ADMIN, get_current_user  # noqa: E402
from membership.db import get_db, init_db  # noqa: E402
from membership.main import app  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def current_user():
    """Mutable user returned by the auth override; tests may change the role."""
    return {"username": "admin", "role": ROLE_ADMIN}


@pytest.fixture
def client(session_factory, current_user):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: current_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def today():
    return date.today()


@pytest.fixture
def student_payload(today):
    """Factory for create-student bodies with unique emails."""
    counter = {"n": 0}

    def make(**overrides):
        counter["n"] += 1
        body = {
            "name": f"Student {counter['n']}",
            "email": f"student{counter['n']}@example.com",
            "phone": f"555-01{counter['n']:02d}",
            "membership_start": (today - timedelta(days=30)).isoformat(),
            "membership_end": (today + timedelta(days=60)).isoformat(),
        }
        body.update(overrides)
        return body

    return make
