from fastapi import APIRouter, Depends

from app.api.deps import get_checkout_service, get_language
from app.core.i18n import Language
from app.schemas.checkout import CheckoutRequest
from app.schemas.result import OperationResult
from app.services.reservations.checkout import CheckoutService

router = APIRouter()

@router.post("", response_model=OperationResult)
async def checkout_booking(
    request: CheckoutRequest,
    service: CheckoutService = Depends(get_checkout_service),
    language: Language = Depends(get_language),
):
    return await service.checkout(request, language)

@router.post("/lendings/{lending_id}/return", response_model=OperationResult)
async def return_lending(
    lending_id: str,
    service: CheckoutService = Depends(get_checkout_service),
    language: Language = Depends(get_language),
):
    return await service.return_lending(lending_id, language)
