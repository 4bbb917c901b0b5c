"""
Test configuration for the clinic backend.
"""
import os

# Point the application at a throwaway database before it is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BOOTSTRAP_ADMIN_PASSWORD", "")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clinicdesk.database import Base, get_db
from clinicdesk.main import app
from clinicdesk.staff import service as staff_service
from clinicdesk.staff.schemas import StaffCreate

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

ADMIN_PASSWORD = "admin-pass"


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
def admin(db):
    """An administrator account."""
    return staff_service.add_staff(db, StaffCreate(
        username="Admin",
        password=ADMIN_PASSWORD,
        full_name="Clinic Admin",
        is_admin=True,
    ))


def login_headers(client, username, password):
    response = client.post("/api/v1/staff/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    token = response.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client, admin):
    """Authorization headers of a signed-in administrator."""
    return login_headers(client, "admin", ADMIN_PASSWORD)


@pytest.fixture
def staff_headers(client, db):
    """
    Factory signing in a non-admin staff member with the given module permissions.
    """
    def _make(username="reception", **permissions):
        staff_service.add_staff(db, StaffCreate(
            username=username,
            password="staff-pass",
            full_name=username.title(),
            permissions=permissions,
        ))
        return login_headers(client, username, "staff-pass")
    return _make
