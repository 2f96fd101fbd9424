from typing import Optional

from fastapi import Query, Request

from app.core.config import settings
from app.core.i18n import Language
from app.services.reservations.checkout import CheckoutService
from app.services.reservations.coordinator import BookingSubmissionCoordinator
from app.services.reservations.refresh import RoomStatusBoard


def get_language(lang: Optional[Language] = Query(None, description="Message language (en | id)")) -> Language:
    return lang or Language(settings.DEFAULT_LANGUAGE)


def get_repository(request: Request):
    return request.app.state.repository


def get_board(request: Request) -> RoomStatusBoard:
    return request.app.state.board


def get_coordinator(request: Request) -> BookingSubmissionCoordinator:
    return request.app.state.coordinator


def get_checkout_service(request: Request) -> CheckoutService:
    return request.app.state.checkout
