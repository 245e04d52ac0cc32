"""Release repository - Database operations for the release workflow"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import (
    Booking,
    BoosterAvailability,
    BoosterProfile,
    ClaimRequest,
    Job,
    Notification,
    UserRole,
    utc_now,
)


class ReleaseRepository:
    """Repository for booking release database operations"""

    # Bookings & boosters
    @staticmethod
    def get_booking(db: Session, booking_id: str) -> Optional[Booking]:
        """Get a booking by ID"""
        return db.query(Booking).filter(Booking.id == booking_id).first()

    @staticmethod
    def get_booster_profile(db: Session, booster_id: str) -> Optional[BoosterProfile]:
        """Get a booster profile by ID"""
        return db.query(BoosterProfile).filter(BoosterProfile.id == booster_id).first()

    @staticmethod
    def get_booster_profiles(db: Session, booster_ids: list[str]) -> list[BoosterProfile]:
        """Get booster profiles by ID, preserving the order of booster_ids"""
        if not booster_ids:
            return []
        found = {
            b.id: b
            for b in db.query(BoosterProfile).filter(BoosterProfile.id.in_(booster_ids)).all()
        }
        return [found[booster_id] for booster_id in booster_ids if booster_id in found]

    @staticmethod
    def unassign_booking(db: Session, booking_id: str, booster_id: str) -> int:
        """
        Clear the booster assignment, guarded on the current assignee.
        Does not commit. Returns the number of rows updated (0 or 1).
        """
        return (
            db.query(Booking)
            .filter(Booking.id == booking_id, Booking.booster_id == booster_id)
            .update(
                {
                    Booking.booster_id: None,
                    Booking.booster_name: None,
                    Booking.booster_status: "pending",
                    Booking.status: "pending_assignment",
                    Booking.updated_at: utc_now(),
                },
                synchronize_session=False,
            )
        )

    @staticmethod
    def delete_booking_slots(db: Session, booster_id: str, booking_id: str) -> int:
        """Delete the booster's calendar commitment for a booking. Does not commit."""
        return (
            db.query(BoosterAvailability)
            .filter(
                BoosterAvailability.booster_id == booster_id,
                BoosterAvailability.job_id == booking_id,
            )
            .delete(synchronize_session=False)
        )

    @staticmethod
    def get_available_boosters(db: Session, exclude_booster_id: str) -> list[BoosterProfile]:
        """Get all available boosters except one, in store order"""
        return (
            db.query(BoosterProfile)
            .filter(
                BoosterProfile.is_available.is_(True),
                BoosterProfile.id != exclude_booster_id,
            )
            .all()
        )

    @staticmethod
    def get_admin_user_ids(db: Session) -> list[str]:
        """Get user IDs holding the admin role"""
        rows = db.query(UserRole.user_id).filter(UserRole.role == "admin").all()
        return [row.user_id for row in rows]

    # Notifications
    @staticmethod
    def create_notification(
        db: Session, recipient_id: str, title: str, message: str, notification_type: str
    ) -> Notification:
        """Create a notification"""
        notification = Notification(
            recipient_id=recipient_id,
            title=title,
            message=message,
            type=notification_type,
        )
        db.add(notification)
        db.commit()
        return notification

    # Claim requests
    @staticmethod
    def get_pending_claim_booster_ids(db: Session, booking_id: str) -> set[str]:
        """Get boosters that already hold a pending claim for a booking"""
        rows = (
            db.query(ClaimRequest.booster_id)
            .filter(ClaimRequest.booking_id == booking_id, ClaimRequest.status == "pending")
            .all()
        )
        return {row.booster_id for row in rows}

    @staticmethod
    def add_claim(db: Session, booking_id: str, booster_id: str, expires_at: datetime) -> ClaimRequest:
        """Stage a pending claim request. Does not commit."""
        claim = ClaimRequest(
            booking_id=booking_id,
            booster_id=booster_id,
            status="pending",
            expires_at=expires_at,
        )
        db.add(claim)
        return claim

    @staticmethod
    def get_claim(db: Session, claim_id: str) -> Optional[ClaimRequest]:
        """Get a claim request by ID"""
        return db.query(ClaimRequest).filter(ClaimRequest.id == claim_id).first()

    @staticmethod
    def get_claims_for_booking(db: Session, booking_id: str) -> list[ClaimRequest]:
        """Get all claim requests for a booking"""
        return (
            db.query(ClaimRequest)
            .filter(ClaimRequest.booking_id == booking_id)
            .order_by(ClaimRequest.created_at)
            .all()
        )

    # Job pool
    @staticmethod
    def get_job_by_booking_id(db: Session, booking_id: str) -> Optional[Job]:
        """Get the job linked to a booking"""
        return db.query(Job).filter(Job.booking_id == booking_id).first()

    @staticmethod
    def get_job_by_title_and_date(db: Session, title: str, date_needed: date) -> Optional[Job]:
        """Get a job by its legacy (title, date_needed) key"""
        return db.query(Job).filter(Job.title == title, Job.date_needed == date_needed).first()

    @staticmethod
    def create_job(db: Session, **job_data) -> Job:
        """Create a new job"""
        job = Job(**job_data)
        db.add(job)
        db.commit()
        db.refresh(job)
        return job
