import logging

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_coordinator, get_language
from app.core.i18n import Language
from app.schemas.booking import BookingDraft, BookingResult, EndTimeRequest, EndTimeResponse
from app.services.reservations.coordinator import BookingSubmissionCoordinator
from app.services.reservations.duration import duration_minutes, resolve_end_time

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/end-time", response_model=EndTimeResponse)
def preview_end_time(request: EndTimeRequest):
    end = resolve_end_time(request.start_time, request.sks, request.class_type, request.end_time)
    return EndTimeResponse(
        end_time=end,
        duration_minutes=duration_minutes(request.start_time, end),
        is_manual=request.end_time is not None,
    )

@router.post("", response_model=BookingResult)
async def submit_booking(
    draft: BookingDraft,
    coordinator: BookingSubmissionCoordinator = Depends(get_coordinator),
    language: Language = Depends(get_language),
):
    try:
        # expected failures come back as status="failed", not as HTTP errors
        return await coordinator.submit(draft, language)
    except Exception as e:
        logger.exception("Unexpected error while submitting booking")
        raise HTTPException(status_code=500, detail=str(e))
