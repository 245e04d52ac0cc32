"""
Release Domain

Handles a booster giving up an assigned booking: the booking is unassigned,
replacement boosters are matched and invited, admins are told, and the open
job pool is brought back in line with the booking.
"""

from .router import router

__all__ = ["router"]
