import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.sql import func

from .database import Base


def generate_uuid():
    """Generate a UUID string primary key"""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Naive UTC timestamp, matching what the DateTime columns store"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Booking(Base):
    """A confirmed customer appointment"""

    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    service_name = Column(String(255), nullable=False)
    booking_date = Column(Date, nullable=False, index=True)
    booking_time = Column(String(10), nullable=True)  # HH:MM format
    duration_hours = Column(Float, nullable=True)
    location = Column(Text, nullable=True)  # Free text, e.g. "Vesterbrogade 12, København"
    amount = Column(Float, nullable=True)  # DKK

    # Assignment: booster_id is set iff the booking is assigned
    booster_id = Column(String(36), nullable=True, index=True)
    booster_name = Column(String(255), nullable=True)
    booster_status = Column(String(50), default="pending", nullable=True)  # pending, accepted, rejected
    # pending_assignment → assigned → confirmed → completed / cancelled
    status = Column(String(50), default="pending_assignment", nullable=False, index=True)

    customer_name = Column(String(255), nullable=True)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(50), nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class BoosterProfile(Base):
    """A service professional who can be assigned to bookings"""

    __tablename__ = "booster_profiles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)  # City, sometimes neighbourhood
    specialties = Column(JSON, default=list, nullable=True)
    is_available = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime, server_default=func.now())


class UserRole(Base):
    """Role assignment directory (admin, booster, ...)"""

    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    role = Column(String(50), nullable=False, index=True)


class BoosterAvailability(Base):
    """Calendar entry for a booster; busy rows with job_id are booking commitments"""

    __tablename__ = "booster_availability"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    booster_id = Column(String(36), nullable=False, index=True)
    date = Column(Date, nullable=False)
    start_time = Column(String(10), nullable=True)
    end_time = Column(String(10), nullable=True)
    # available, busy, vacation, sick, blocked
    status = Column(String(20), default="available", nullable=False)
    job_id = Column(String(36), nullable=True, index=True)  # Booking reference
    notes = Column(Text, nullable=True)


class Job(Base):
    """Open-work listing projected from an unassigned booking"""

    __tablename__ = "jobs"
    __table_args__ = (
        # Legacy idempotency key; the unique index turns a racing second insert into a conflict
        UniqueConstraint("title", "date_needed", name="uq_jobs_title_date_needed"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=True, unique=True)
    title = Column(String(255), nullable=False)
    service_type = Column(String(255), nullable=True)
    location = Column(Text, nullable=True)
    date_needed = Column(Date, nullable=False)
    time_needed = Column(String(10), nullable=True)
    duration_hours = Column(Float, nullable=True)
    hourly_rate = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    # open, assigned, in_progress, completed
    status = Column(String(20), default="open", nullable=False, index=True)
    assigned_booster_id = Column(String(36), nullable=True)
    boosters_needed = Column(Integer, default=1, nullable=False)

    client_name = Column(String(255), nullable=True)
    client_email = Column(String(255), nullable=True)
    client_phone = Column(String(50), nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class ClaimRequest(Base):
    """Time-boxed first-refusal invitation for a released booking"""

    __tablename__ = "booster_booking_requests"
    __table_args__ = (
        Index("ix_claims_booking_status", "booking_id", "status"),
        # At most one accepted claim per booking
        Index(
            "uq_claims_one_accepted_per_booking",
            "booking_id",
            unique=True,
            sqlite_where=text("status = 'accepted'"),
            postgresql_where=text("status = 'accepted'"),
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=False)
    booster_id = Column(String(36), nullable=False, index=True)
    # pending → accepted | expired | withdrawn
    status = Column(String(20), default="pending", nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
    responded_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)


class Notification(Base):
    """Fire-and-forget message for a booster or an admin"""

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    recipient_id = Column(String(36), nullable=False, index=True)  # Any user id
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(50), nullable=False, index=True)  # job_released, job_released_admin
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
