"""Shared validation utilities"""

import re
from typing import Any, Optional

MAX_REASON_LENGTH = 500

UUID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
)


def validate_uuid(value: str) -> bool:
    """Validate canonical hyphenated UUID format (any case)"""
    if not isinstance(value, str):
        return False
    return UUID_PATTERN.fullmatch(value) is not None


def sanitize_reason(reason: Any, max_length: int = MAX_REASON_LENGTH) -> Optional[str]:
    """
    Normalize a free-text release reason for audit messages.

    Casts to string, truncates to max_length and strips angle brackets.
    Empty or whitespace-only input becomes None.
    """
    if reason is None:
        return None

    cleaned = re.sub(r"[<>]", "", str(reason)[:max_length]).strip()
    return cleaned or None
