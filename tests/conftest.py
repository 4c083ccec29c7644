"""
Test configuration for the health profile service.
"""
import os

# Settings are read at import time, so the environment comes first
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from healthqr.database import Base, get_db
from healthqr.main import app
from healthqr.auth.service import SessionProvider
from healthqr.profiles.store import ProfileStore

# Test database URL
TEST_DATABASE_URL = "sqlite://"

# Create test database engine
engine = create_engine(
    TEST_DATABASE_URL,
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
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides = {}


@pytest.fixture
def store(db):
    """Profile store on the test database"""
    return ProfileStore(db)


@pytest.fixture
def provider():
    """A session provider with no listeners and no revoked tokens"""
    return SessionProvider()


@pytest.fixture
def credentials():
    return {"email": "jane@example.com", "password": "Password123!"}


@pytest.fixture
def auth_headers(client, credentials):
    """
    Register and sign in through the API; returns bearer headers and the user id.
    """
    response = client.post("/api/v1/auth/register", json=credentials)
    assert response.status_code == 201
    user_id = response.json()["id"]

    response = client.post("/api/v1/auth/login", json=credentials)
    assert response.status_code == 200
    token = response.json()["access_token"]

    return {"Authorization": f"Bearer {token}"}, user_id


@pytest.fixture
def profile_payload():
    """A complete profile as sent to PUT /api/v1/profiles/me"""
    return {
        "full_name": "Jane Doe",
        "date_of_birth": "1990-01-02",
        "blood_group": "O+",
        "blood_pressure": "120/80",
        "sugar_level": "95",
        "medical_condition_details": "Mild asthma",
        "allergies": ["Peanuts", "Penicillin"],
        "medications": ["Salbutamol"],
        "emergency_contacts": [
            {"name": "John Doe", "relationship": "Spouse", "phone": "555-0100"}
        ],
    }
