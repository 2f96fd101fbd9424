from fastapi import APIRouter, Depends

from app.api.deps import get_language, get_repository
from app.core.i18n import Language
from app.schemas.checkout import PermitSubmission
from app.schemas.result import OperationResult
from app.services.reservations.permits import submit_permit

router = APIRouter()

@router.get("/candidates")
async def permit_candidates(repository=Depends(get_repository)):
    """Pending bookings and borrowed lending records still waiting for a permit."""
    return {
        "bookings": await repository.fetch_pending_bookings(),
        "lendings": await repository.fetch_borrowed_lendings(),
    }

@router.post("", response_model=OperationResult)
async def submit_permit_letter(
    submission: PermitSubmission,
    repository=Depends(get_repository),
    language: Language = Depends(get_language),
):
    return await submit_permit(repository, submission, language)
