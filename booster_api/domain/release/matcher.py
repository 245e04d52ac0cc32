"""
Eligibility matching for released bookings
Narrows all boosters down to available, location-compatible replacements
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Booking, BoosterProfile
from .repository import ReleaseRepository

logger = logging.getLogger(__name__)


def derive_location_hint(
    releasing_booster: Optional[BoosterProfile], booking: Booking
) -> Optional[str]:
    """
    Pick the location to match replacements against.

    Prefers the releasing booster's city; otherwise the first comma-separated
    part of the booking's free-text address.
    """
    if releasing_booster and releasing_booster.location and releasing_booster.location.strip():
        return releasing_booster.location.strip()

    if booking.location:
        first_part = booking.location.split(",")[0].strip()
        if first_part:
            return first_part

    return None


def locations_match(booster_location: Optional[str], location_hint: str) -> bool:
    """Case-insensitive substring match in either direction"""
    if not booster_location:
        return False
    booster_city = booster_location.strip().lower()
    hint = location_hint.strip().lower()
    if not booster_city or not hint:
        return False
    return hint in booster_city or booster_city in hint


def find_eligible_boosters(
    db: Session, exclude_booster_id: str, location_hint: Optional[str]
) -> list[BoosterProfile]:
    """
    Find replacement boosters for a released booking.

    Location data is free text with mixed granularity (city vs. neighbourhood),
    so matching is a permissive substring check. The releasing booster is never
    returned. No hint means no candidates.
    """
    if not location_hint or not location_hint.strip():
        logger.info("ℹ️ No location hint available - skipping booster matching")
        return []

    boosters = ReleaseRepository.get_available_boosters(db, exclude_booster_id)
    eligible = [
        b for b in boosters if b.id != exclude_booster_id and locations_match(b.location, location_hint)
    ]

    logger.info(
        f"🔍 Found {len(eligible)} eligible boosters near '{location_hint}' "
        f"({len(boosters)} available)"
    )
    return eligible
