# tests/conftest.py
import os

# Налаштування мають бути встановлені до імпорту saconnect
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_EMAILS"] = "admin@example.com"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from saconnect.database import Base, get_db
from saconnect.main import app
from saconnect.services import IdentityService

ADMIN_EMAIL = "admin@example.com"


@pytest.fixture
def engine():
    """
    Фікстура in-memory SQLite бази, спільної для всіх сесій тесту.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    """
    Фікстура для створення тестової сесії бази даних.
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory):
    """
    Тестовий клієнт API, що працює з тією ж базою, що й db_session.
    """
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """
    Фабрика користувачів з необов'язковими координатами.
    """
    identity = IdentityService(db_session, admin_emails={ADMIN_EMAIL})
    counter = {"n": 0}

    def _make_user(email=None, password="secret123", family_name=None, lat=None, lon=None):
        counter["n"] += 1
        user = identity.create_account(
            email or f"family{counter['n']}@example.com",
            password,
            family_name or f"Family {counter['n']}",
        )
        if lat is not None or lon is not None:
            user.lat = lat
            user.lon = lon
            db_session.commit()
            db_session.refresh(user)
        return user

    return _make_user
