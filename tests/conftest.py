"""
Test configuration for the dental clinic auth backend.
"""
import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ACCESS_TOKEN_KEY"] = "test-access-secret"
os.environ["REFRESH_TOKEN_KEY"] = "test-refresh-secret"
os.environ["PATIENT_LOGIN_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dental_clinic.database import Base, get_db
from dental_clinic.main import app
from dental_clinic.core.security import hash_password

# In-memory database shared across connections
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session factory
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """
    Create a test client with a test database session.

    The base URL is https so the Secure refresh cookie round-trips.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app, base_url="https://testserver") as client:
        yield client

    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """
    Capture outgoing emails instead of talking to SMTP.
    """
    sent = []

    def fake_verification(email, code):
        sent.append(("verification", email, code))

    def fake_password_changed(email, name):
        sent.append(("password_changed", email, name))

    monkeypatch.setattr("dental_clinic.email_verification.service.send_verification_email", fake_verification)
    monkeypatch.setattr("dental_clinic.password_reset.router.send_password_changed_notification", fake_password_changed)
    return sent


@pytest.fixture
def add_identity(db):
    """
    Insert a row into a role table, hashing the password if one is given.
    """
    def _add(model, password=None, **fields):
        row = model(password=hash_password(password) if password else None, **fields)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row
    return _add
