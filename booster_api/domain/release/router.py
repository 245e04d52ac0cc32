"""Release router - FastAPI endpoints for releasing a booked job"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from ...auth import get_current_user_id
from ...database import get_db
from .schemas import ErrorResponse, ReleaseJobRequest, ReleaseJobResponse
from .service import ReleaseService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Release"])


def get_release_service(db: Session = Depends(get_db)) -> ReleaseService:
    """Dependency injection for ReleaseService"""
    return ReleaseService(db)


@router.options("/release-job")
async def release_job_preflight():
    """CORS preflight without the Access-Control-Request-* headers"""
    return Response(status_code=200)


@router.post(
    "/release-job",
    response_model=ReleaseJobResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def release_job(
    data: ReleaseJobRequest,
    caller_id: Optional[str] = Depends(get_current_user_id),
    service: ReleaseService = Depends(get_release_service),
):
    """
    Release a booking from its booster.
    The booking goes back to pending_assignment and is offered to nearby boosters.
    """
    try:
        return await service.release_job(data.bookingId, data.boosterId, data.reason, caller_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Unexpected error releasing booking {data.bookingId}: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")
