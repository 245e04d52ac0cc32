"""
Release Notification Fan-out
Best-effort broadcast of "job available" messages to replacement boosters
and "job released" messages to administrators.

One write per recipient, no transactional grouping and no retry. A failed
write is logged and skipped; it never fails the release.
"""

import logging
from typing import NamedTuple, Optional

from sqlalchemy.orm import Session

from ...models import Booking, BoosterProfile
from .repository import ReleaseRepository

logger = logging.getLogger(__name__)

JOB_RELEASED = "job_released"
JOB_RELEASED_ADMIN = "job_released_admin"


class Recipient(NamedTuple):
    """Anything that can receive a notification: a booster or an admin user"""

    recipient_id: str
    label: str = ""


def _format_amount(amount: Optional[float]) -> str:
    if amount is None:
        return "0"
    return str(int(amount)) if float(amount).is_integer() else f"{amount:.2f}"


def notify(
    db: Session,
    recipients: list[Recipient],
    title: str,
    message: str,
    notification_type: str,
) -> int:
    """
    Write one notification per recipient.

    Returns:
        Number of notifications written
    """
    sent = 0
    for recipient in recipients:
        try:
            ReleaseRepository.create_notification(
                db, recipient.recipient_id, title, message, notification_type
            )
            sent += 1
            logger.debug(f"✅ {notification_type} notification written for {recipient.recipient_id}")
        except Exception as e:
            db.rollback()
            logger.error(
                f"❌ Failed to write {notification_type} notification for {recipient.recipient_id}: {e}"
            )
    return sent


def notify_released_job(db: Session, booking: Booking, candidates: list[BoosterProfile]) -> int:
    """Tell every eligible booster that the job is available"""
    if not candidates:
        return 0

    message = (
        f"A job for {booking.service_name} on {booking.booking_date} at {booking.booking_time} "
        f"in {booking.location or 'unknown location'} has been released and is now available. "
        f"Price: {_format_amount(booking.amount)} DKK."
    )
    recipients = [Recipient(b.id, b.name) for b in candidates]

    sent = notify(db, recipients, "New job available", message, JOB_RELEASED)
    logger.info(f"📣 Notified {sent}/{len(recipients)} boosters about released booking {booking.id}")
    return sent


def resolve_admin_recipients(db: Session) -> list[Recipient]:
    """Administrators are addressed directly by user id"""
    return [Recipient(user_id, "admin") for user_id in ReleaseRepository.get_admin_user_ids(db)]


def notify_admins(
    db: Session,
    booking: Booking,
    releasing_booster: Optional[BoosterProfile],
    reason: Optional[str] = None,
) -> int:
    """Tell every administrator who released the job and why"""
    recipients = resolve_admin_recipients(db)
    if not recipients:
        logger.warning("⚠️ No admin users found - skipping admin release notification")
        return 0

    booster_name = releasing_booster.name if releasing_booster and releasing_booster.name else "A booster"
    parts = [f'{booster_name} released the job "{booking.service_name}" on {booking.booking_date}.']
    if reason:
        parts.append(f"Reason: {reason}")
    parts.append("The job is now open and awaiting reassignment.")

    sent = notify(db, recipients, "Job released", " ".join(parts), JOB_RELEASED_ADMIN)
    logger.info(f"📣 Notified {sent}/{len(recipients)} admins about released booking {booking.id}")
    return sent
