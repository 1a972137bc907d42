"""
Test configuration for the clinic operations backend.
"""
import os

# Keep the application's own engine off disk and empty during tests
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEMO_DATA"] = "false"

from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clinic.database import Base, get_db
from clinic.main import app
from clinic.store import SessionStore
from clinic.users.models import Branch, User, UserRole
from clinic.patients.models import Patient
from clinic.appointments.models import Service

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
def store(db):
    """
    Clinic store over the test session.
    """
    return SessionStore(db)


@pytest.fixture(scope="function")
def clinic(db):
    """
    Two branches, a doctor, a receptionist per branch, an admin,
    the service catalogue and two patients.
    """
    west = Branch(name="West Clinic")
    east = Branch(name="East Clinic")
    db.add_all([west, east])
    db.flush()

    doctor = User(name="Dr. Prasanna", email="doctor@test.local", role=UserRole.DOCTOR)
    reception_west = User(name="Anjali", email="anjali@test.local", role=UserRole.RECEPTIONIST, branch_id=west.id)
    reception_east = User(name="Rohan", email="rohan@test.local", role=UserRole.RECEPTIONIST, branch_id=east.id)
    admin = User(name="Admin", email="admin@test.local", role=UserRole.ADMIN)
    consultation = Service(name="Consultation", duration_minutes=30, price=Decimal("500"))
    checkup = Service(name="Routine Check-up", duration_minutes=20, price=Decimal("300"))
    extended = Service(name="Extended Consultation", duration_minutes=60, price=Decimal("900"))
    sowmya = Patient(name="Sowmya", phone="9876543210", gender="F")
    rajesh = Patient(name="Rajesh Kumar", phone="8765432109", gender="M")
    db.add_all([
        doctor, reception_west, reception_east, admin,
        consultation, checkup, extended,
        sowmya, rajesh,
    ])
    db.commit()

    return SimpleNamespace(
        west=west,
        east=east,
        doctor=doctor,
        reception_west=reception_west,
        reception_east=reception_east,
        admin=admin,
        consultation=consultation,
        checkup=checkup,
        extended=extended,
        sowmya=sowmya,
        rajesh=rajesh,
    )


@pytest.fixture
def future_day():
    """
    A day far enough ahead that no slot is in the past.
    """
    return date.today() + timedelta(days=30)


@pytest.fixture
def as_user():
    """
    Build request headers identifying the acting staff member.
    """
    def headers(user):
        return {"X-User-Id": str(user.id)}
    return headers


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

    # Override the get_db dependency
    app.dependency_overrides[get_db] = override_get_db

    # Create test client
    with TestClient(app) as client:
        yield client

    # Remove dependency override
    app.dependency_overrides = {}
