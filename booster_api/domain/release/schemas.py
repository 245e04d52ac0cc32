"""Release domain schemas - Pydantic models for validation"""

from typing import Any, Optional

from pydantic import BaseModel


class ReleaseJobRequest(BaseModel):
    """Schema for releasing a booking back to the pool"""

    # Presence is checked by the service so a missing id is a 400, not a 422
    bookingId: Optional[str] = None
    boosterId: Optional[str] = None
    reason: Optional[Any] = None  # cast to text by the service


class ReleaseJobResponse(BaseModel):
    """Schema for a successful release"""

    success: bool = True
    notifiedBoosters: int
    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned by every failed request"""

    error: str
