"""
Job Pool Reconciler
Keeps the open-jobs listing consistent with a released booking.

The job pool is a denormalized projection of bookings. After a release the
booking's job must exist exactly once and be `open` with no assignee.
"""

import logging
import math
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Booking, Job
from .repository import ReleaseRepository

logger = logging.getLogger(__name__)

DEFAULT_DURATION_HOURS = 2


def job_title_for(booking: Booking) -> str:
    return f"Booking: {booking.service_name}"


def hourly_rate_for(amount: Optional[float], duration_hours: Optional[float]) -> int:
    """Booking price spread over its duration, rounded half up"""
    duration = duration_hours or DEFAULT_DURATION_HOURS
    return int(math.floor((amount or 0) / duration + 0.5))


def _find_job(db: Session, booking: Booking) -> Optional[Job]:
    job = ReleaseRepository.get_job_by_booking_id(db, booking.id)
    if job:
        return job
    # Rows created before jobs were linked to bookings
    job = ReleaseRepository.get_job_by_title_and_date(db, job_title_for(booking), booking.booking_date)
    if job and job.booking_id is not None and job.booking_id != booking.id:
        logger.warning(
            f"⚠️ Job {job.id} ({job.title} on {job.date_needed}) belongs to booking {job.booking_id} "
            f"- reopening it for released booking {booking.id}"
        )
    return job


def _reopen(db: Session, job: Job, booking: Booking) -> Job:
    job.status = "open"
    job.assigned_booster_id = None
    if job.booking_id is None:
        job.booking_id = booking.id
    db.commit()
    logger.info(f"♻️ Job {job.id} reopened for released booking {booking.id}")
    return job


def reconcile_job(db: Session, booking: Booking, reason: Optional[str] = None) -> Job:
    """
    Upsert the open job for a released booking.

    Existing job (by booking link, then by title and date) is reopened.
    Otherwise a new open job is created; losing an insert race to a
    concurrent release falls back to reopening the winner's row.
    """
    job = _find_job(db, booking)
    if job:
        return _reopen(db, job, booking)

    description = f"Released booking. Customer: {booking.customer_name}."
    if reason:
        description += f" Released by previous booster with reason: {reason}"

    duration = booking.duration_hours or DEFAULT_DURATION_HOURS
    try:
        job = ReleaseRepository.create_job(
            db,
            booking_id=booking.id,
            title=job_title_for(booking),
            service_type=booking.service_name,
            location=booking.location or "Unknown",
            date_needed=booking.booking_date,
            time_needed=booking.booking_time,
            duration_hours=duration,
            hourly_rate=hourly_rate_for(booking.amount, duration),
            description=description,
            status="open",
            client_name=booking.customer_name,
            client_email=booking.customer_email,
            client_phone=booking.customer_phone,
            boosters_needed=1,
        )
    except IntegrityError:
        db.rollback()
        logger.info(f"ℹ️ Job for booking {booking.id} created concurrently - reopening existing row")
        job = _find_job(db, booking)
        if not job:
            raise
        return _reopen(db, job, booking)

    logger.info(f"✅ Job {job.id} created for released booking {booking.id} (rate {job.hourly_rate}/h)")
    return job
