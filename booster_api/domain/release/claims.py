"""
Claim Ledger
Time-boxed first-refusal invitations for released bookings.

Invariant: per booking at most one claim is ever `accepted`; once one is
accepted every pending sibling becomes `withdrawn`. Pending claims past
their expiry are flipped to `expired` by the worker's sweeper cron.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import and_, exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from ...config import CLAIM_FANOUT_LIMIT, CLAIM_TTL_HOURS
from ...models import BoosterProfile, ClaimRequest, utc_now
from .repository import ReleaseRepository

logger = logging.getLogger(__name__)


def create_claims(
    db: Session,
    booking_id: str,
    candidates: list[BoosterProfile],
    ttl: timedelta = timedelta(hours=CLAIM_TTL_HOURS),
    limit: int = CLAIM_FANOUT_LIMIT,
) -> int:
    """
    Give the first `limit` candidates a pending claim on the booking.

    Candidates already holding a pending claim for this booking are skipped.

    Returns:
        Number of claims created
    """
    if not candidates or limit <= 0:
        return 0

    expires_at = utc_now() + ttl
    already_invited = ReleaseRepository.get_pending_claim_booster_ids(db, booking_id)

    created = 0
    for booster in candidates[:limit]:
        if booster.id in already_invited:
            logger.debug(f"ℹ️ Booster {booster.id} already holds a pending claim on {booking_id}")
            continue
        ReleaseRepository.add_claim(db, booking_id, booster.id, expires_at)
        created += 1

    db.commit()
    logger.info(f"📨 Created {created} claim requests for booking {booking_id} (expire {expires_at})")
    return created


def accept_claim(db: Session, claim_id: str, now: Optional[datetime] = None) -> Optional[ClaimRequest]:
    """
    Accept a claim if it is still pending, unexpired and no sibling won first.

    Extension point for the claim-acceptance flow: enforces first-accepted-wins
    and withdraws the remaining pending siblings in the same transaction.

    Returns:
        The accepted claim, or None if the claim could not be accepted
    """
    now = now or utc_now()
    claim = ReleaseRepository.get_claim(db, claim_id)
    if not claim:
        logger.warning(f"⚠️ Claim {claim_id} not found")
        return None

    booking_id = claim.booking_id
    sibling = aliased(ClaimRequest)
    sibling_accepted = exists().where(
        and_(sibling.booking_id == booking_id, sibling.status == "accepted")
    )

    try:
        updated = (
            db.query(ClaimRequest)
            .filter(
                ClaimRequest.id == claim_id,
                ClaimRequest.status == "pending",
                ClaimRequest.expires_at > now,
                ~sibling_accepted,
            )
            .update(
                {ClaimRequest.status: "accepted", ClaimRequest.responded_at: now},
                synchronize_session=False,
            )
        )
        if updated == 0:
            db.rollback()
            logger.info(f"ℹ️ Claim {claim_id} not accepted (not pending, expired or already won)")
            return None

        withdrawn = (
            db.query(ClaimRequest)
            .filter(
                ClaimRequest.booking_id == booking_id,
                ClaimRequest.id != claim_id,
                ClaimRequest.status == "pending",
            )
            .update(
                {ClaimRequest.status: "withdrawn", ClaimRequest.responded_at: now},
                synchronize_session=False,
            )
        )
        db.commit()
    except IntegrityError:
        # A concurrent acceptance hit the one-accepted-per-booking index first
        db.rollback()
        logger.info(f"ℹ️ Claim {claim_id} lost the race for booking {booking_id}")
        return None

    db.refresh(claim)
    logger.info(f"✅ Claim {claim_id} accepted for booking {booking_id}, {withdrawn} siblings withdrawn")
    return claim


def expire_stale_claims(db: Session, now: Optional[datetime] = None) -> int:
    """Flip pending claims past their expiry to expired"""
    now = now or utc_now()
    expired = (
        db.query(ClaimRequest)
        .filter(ClaimRequest.status == "pending", ClaimRequest.expires_at <= now)
        .update({ClaimRequest.status: "expired"}, synchronize_session=False)
    )
    db.commit()
    if expired:
        logger.info(f"⏰ Expired {expired} stale claim requests")
    return expired
