"""Release service - Orchestrates releasing a booking and offering it to other boosters"""

import logging
from typing import Any, Callable, Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...auth import is_admin
from ...config import RELEASE_FANOUT_MODE
from ...models import Booking, BoosterProfile
from ...shared.validators import sanitize_reason, validate_uuid
from .claims import create_claims
from .job_pool import reconcile_job
from .matcher import derive_location_hint, find_eligible_boosters
from .notifications import notify_admins, notify_released_job
from .repository import ReleaseRepository
from .schemas import ReleaseJobResponse

logger = logging.getLogger(__name__)

RELEASED_MESSAGE = "Job released and offered to other boosters"


def run_best_effort(db: Session, step: str, func: Callable, *args, default: Any = None, **kwargs):
    """
    Run one fan-out step; a failure is logged and rolled back, never raised.
    The booking transition has already committed by the time these run.
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Release step '{step}' failed: {e}")
        return default


def match_candidates(
    db: Session,
    releasing_booster: Optional[BoosterProfile],
    booking: Booking,
    exclude_booster_id: str,
) -> list[BoosterProfile]:
    """Replacement boosters for a released booking, matched on its location hint"""
    location_hint = derive_location_hint(releasing_booster, booking)
    return find_eligible_boosters(db, exclude_booster_id, location_hint)


def run_fanout_stage(
    db: Session,
    booking: Booking,
    releasing_booster: Optional[BoosterProfile],
    candidates: list[BoosterProfile],
    reason: Optional[str] = None,
) -> dict:
    """
    Notify candidates, create claims, notify admins and reconcile the job pool.
    Every step runs even if an earlier one failed.
    """
    booking_id = booking.id
    summary = {
        "booking_id": booking_id,
        "boosters_notified": run_best_effort(
            db, "notify_boosters", notify_released_job, db, booking, candidates, default=0
        ),
        "claims_created": run_best_effort(
            db, "create_claims", create_claims, db, booking_id, candidates, default=0
        ),
        "admins_notified": run_best_effort(
            db, "notify_admins", notify_admins, db, booking, releasing_booster, reason, default=0
        ),
    }
    job = run_best_effort(db, "reconcile_job", reconcile_job, db, booking, reason)
    summary["job_id"] = job.id if job else None

    logger.info(f"📋 Release fan-out complete: {summary}")
    return summary


class ReleaseService:
    """Service layer for the booking release workflow"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReleaseRepository()

    def validate_request(
        self, booking_id: Optional[str], booster_id: Optional[str], reason: Any
    ) -> Optional[str]:
        """Reject bad input before touching the store; returns the sanitized reason"""
        if not booking_id or not booster_id:
            raise HTTPException(status_code=400, detail="Missing bookingId or boosterId")
        if not validate_uuid(booking_id) or not validate_uuid(booster_id):
            raise HTTPException(status_code=400, detail="Invalid ID format")
        return sanitize_reason(reason)

    def authorize(self, caller_id: Optional[str], booster_id: str) -> None:
        """Only the releasing booster or an admin may release a booking"""
        if caller_id is None or caller_id == booster_id:
            return
        if not is_admin(self.db, caller_id):
            logger.warning(f"⚠️ Release denied: caller {caller_id} is neither booster {booster_id} nor admin")
            raise HTTPException(
                status_code=403, detail="You are not allowed to release this job"
            )

    def load_assigned_booking(self, booking_id: str, booster_id: str) -> Booking:
        booking = self.repo.get_booking(self.db, booking_id)
        if not booking:
            logger.warning(f"⚠️ Booking not found: {booking_id}")
            raise HTTPException(status_code=404, detail="Booking not found")
        if booking.booster_id is None:
            raise HTTPException(status_code=409, detail="Booking is already released")
        if booking.booster_id != booster_id:
            raise HTTPException(status_code=403, detail="Booking does not belong to this booster")
        return booking

    def load_releasing_booster(self, booster_id: str) -> Optional[BoosterProfile]:
        """Matching context only; a missing profile falls back to the booking's location"""
        try:
            booster = self.repo.get_booster_profile(self.db, booster_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to load releasing booster {booster_id}: {e}")
            return None
        if not booster:
            logger.info(f"ℹ️ No profile for releasing booster {booster_id} - using booking location")
        return booster

    def unassign(self, booking: Booking, booster_id: str) -> None:
        """
        Clear the assignment, guarded on the current assignee.
        This is the authoritative write; any failure aborts the release.
        """
        try:
            updated = self.repo.unassign_booking(self.db, booking.id, booster_id)
            if updated == 0:
                self.db.rollback()
                logger.warning(f"⚠️ Booking {booking.id} was released concurrently")
                raise HTTPException(status_code=409, detail="Booking is already released")
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Error updating booking {booking.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to release booking") from e

        logger.info(f"✅ Booking {booking.id} unassigned from booster {booster_id}")

    def remove_calendar_slot(self, booster_id: str, booking_id: str) -> int:
        removed = self.repo.delete_booking_slots(self.db, booster_id, booking_id)
        self.db.commit()
        if removed:
            logger.info(f"🗓️ Removed {removed} calendar slot(s) of booster {booster_id} for {booking_id}")
        return removed

    async def dispatch_fanout(
        self,
        booking: Booking,
        booster_id: str,
        releasing_booster: Optional[BoosterProfile],
        candidates: list[BoosterProfile],
        reason: Optional[str],
    ) -> None:
        """Hand the fan-out stage to the worker in queue mode, otherwise run it here"""
        if RELEASE_FANOUT_MODE == "queue":
            from arq import create_pool

            from ...worker import get_redis_settings

            try:
                pool = await create_pool(get_redis_settings())
                try:
                    job = await pool.enqueue_job(
                        "release_fanout_task",
                        booking.id,
                        booster_id,
                        [c.id for c in candidates],
                        reason,
                    )
                finally:
                    await pool.close()
                logger.info(f"📋 Release fan-out queued for booking {booking.id}: {job.job_id if job else None}")
                return
            except Exception as e:
                logger.error(f"❌ Failed to queue release fan-out, running inline: {e}")

        run_fanout_stage(self.db, booking, releasing_booster, candidates, reason)

    async def release_job(
        self,
        booking_id: Optional[str],
        booster_id: Optional[str],
        reason: Any = None,
        caller_id: Optional[str] = None,
    ) -> ReleaseJobResponse:
        """
        Release a booking from its booster and offer it to replacements.

        Validation, lookup and the booking transition are fatal on failure.
        Everything after the transition is best-effort.
        """
        reason = self.validate_request(booking_id, booster_id, reason)
        self.authorize(caller_id, booster_id)

        logger.info(
            f"🔄 Releasing booking {booking_id} from booster {booster_id} "
            f"(reason: {reason!r}, released by: {caller_id or 'unauthenticated'})"
        )

        booking = self.load_assigned_booking(booking_id, booster_id)
        releasing_booster = self.load_releasing_booster(booster_id)

        self.unassign(booking, booster_id)

        run_best_effort(self.db, "remove_calendar_slot", self.remove_calendar_slot, booster_id, booking_id)

        candidates = run_best_effort(
            self.db,
            "match_boosters",
            match_candidates,
            self.db,
            releasing_booster,
            booking,
            booster_id,
            default=[],
        )

        try:
            await self.dispatch_fanout(booking, booster_id, releasing_booster, candidates, reason)
        except Exception as e:
            # Booking is already released; fan-out problems stay in the logs
            self.db.rollback()
            logger.error(f"❌ Release fan-out for booking {booking_id} failed: {e}")

        return ReleaseJobResponse(
            success=True, notifiedBoosters=len(candidates), message=RELEASED_MESSAGE
        )
