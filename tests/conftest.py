"""
Pytest configuration and shared fixtures for tests
"""

import os
import uuid
from datetime import date

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RELEASE_FANOUT_MODE", "inline")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from booster_api.auth import get_current_user_id
from booster_api.database import Base, get_db
from booster_api.main import app
from booster_api.models import Booking, BoosterAvailability, BoosterProfile, UserRole


def new_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture(name="db_engine")
def db_engine_fixture():
    """Create in-memory SQLite database engine for testing"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # Keep single connection for in-memory DB
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture(name="session_factory")
def session_factory_fixture(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(name="db_session")
def db_session_fixture(session_factory):
    """Create database session for testing"""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(name="client")
def client_fixture(db_session):
    """API client with auth bypassed"""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user_id] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(name="auth_client")
def auth_client_fixture(db_session):
    """API client that verifies bearer tokens"""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ============================================================================
# FACTORIES
# ============================================================================


def make_booster(db, name="Booster", location="København", is_available=True, booster_id=None):
    booster = BoosterProfile(
        id=booster_id or new_id(),
        name=name,
        location=location,
        specialties=["makeup"],
        is_available=is_available,
    )
    db.add(booster)
    db.commit()
    return booster


def make_booking(db, booster=None, **overrides):
    data = {
        "id": new_id(),
        "service_name": "Bryllupsmakeup",
        "booking_date": date(2026, 11, 14),
        "booking_time": "10:00",
        "duration_hours": 3,
        "location": "Vesterbrogade 12, København",
        "amount": 3000,
        "customer_name": "Maria Jensen",
        "customer_email": "maria@example.com",
        "customer_phone": "+4512345678",
    }
    if booster is not None:
        data.update(booster_id=booster.id, booster_name=booster.name, booster_status="accepted", status="assigned")
    data.update(overrides)
    booking = Booking(**data)
    db.add(booking)
    db.commit()
    return booking


def make_slot(db, booster, booking, status="busy"):
    slot = BoosterAvailability(
        booster_id=booster.id,
        date=booking.booking_date,
        start_time=booking.booking_time,
        end_time="13:00",
        status=status,
        job_id=booking.id,
        notes=f"Booking: {booking.service_name}",
    )
    db.add(slot)
    db.commit()
    return slot


def make_admin(db, user_id=None):
    role = UserRole(user_id=user_id or new_id(), role="admin")
    db.add(role)
    db.commit()
    return role.user_id
