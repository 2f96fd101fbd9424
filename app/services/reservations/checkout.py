import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, List, Optional

from app.core import i18n
from app.core.errors import StorageError
from app.core.i18n import Language
from app.schemas.booking import BookingStatus
from app.schemas.checkout import CheckoutRequest
from app.schemas.result import OperationResult

logger = logging.getLogger(__name__)

class CheckoutService:
    """Ends an approved booking: checkout record, booking completion, issue report.

    Only the checkout insert is required to succeed. Completing the booking
    and filing the report are follow-ups whose failure is reported as a
    warning next to the success message.
    """

    def __init__(self, repository, on_checked_out: Optional[Callable[[], Awaitable[Any]]] = None):
        self.repository = repository
        self.on_checked_out = on_checked_out

    async def checkout(self, request: CheckoutRequest, language: Language = Language.EN) -> OperationResult:
        try:
            booking = await self.repository.fetch_booking(request.booking_id)
        except StorageError as e:
            return _failed(e, language, "Failed to process checkout", "Gagal memproses checkout")
        if booking is None or booking.get("status") != BookingStatus.APPROVED.value:
            return OperationResult(
                status="failed",
                message=i18n.get_text(
                    language,
                    "Please select an approved booking to check out",
                    "Silakan pilih pemesanan yang disetujui untuk checkout",
                ),
            )

        now = datetime.now(timezone.utc).isoformat()
        try:
            await self.repository.insert_checkout({
                "user_id": booking.get("user_id"),
                "booking_id": request.booking_id,
                "checkout_date": now,
                "expected_return_date": booking.get("end_time"),
                "status": "returned",
                "actual_return_date": now,
                "condition_on_checkout": "good",
                "condition_on_return": "good",
                "total_items": len(booking.get("equipment_requested") or []),
            })
        except StorageError as e:
            return _failed(e, language, "Failed to process checkout", "Gagal memproses checkout")

        notices: List[i18n.Notice] = []
        try:
            await self.repository.update_booking_status([request.booking_id], BookingStatus.COMPLETED.value)
        except StorageError as e:
            logger.warning("Checkout saved but booking %s not completed: %s", request.booking_id, e.message)
            notices.append(i18n.warning(
                language,
                "Checkout completed but failed to update booking status",
                "Checkout selesai tetapi gagal memperbarui status pemesanan",
            ))

        reported = False
        if request.has_issues and request.report_description:
            try:
                await self.repository.insert_report(self._report_row(request, booking))
                reported = True
            except StorageError as e:
                logger.warning("Issue report for booking %s not saved: %s", request.booking_id, e.message)
                notices.append(i18n.warning(
                    language,
                    "Checkout completed but failed to submit report",
                    "Checkout selesai tetapi gagal mengirim laporan",
                ))

        if self.on_checked_out is not None:
            try:
                await self.on_checked_out()
            except StorageError as e:
                logger.warning("Refresh after checkout failed: %s", e.message)

        if reported:
            message = i18n.get_text(
                language,
                "Checkout completed and issue reported successfully!",
                "Checkout selesai dan masalah berhasil dilaporkan!",
            )
        else:
            message = i18n.get_text(language, "Checkout completed successfully!", "Checkout berhasil diselesaikan!")
        return OperationResult(status="success", message=message, notices=notices)

    async def return_lending(self, lending_id: str, language: Language = Language.EN) -> OperationResult:
        """Mark a borrowed lending-tool record as returned."""
        try:
            await self.repository.update_lending_status(lending_id, "returned")
        except StorageError as e:
            return _failed(e, language, "Failed to return equipment", "Gagal mengembalikan peralatan")
        return OperationResult(
            status="success",
            message=i18n.get_text(language, "Equipment returned", "Peralatan dikembalikan"),
        )

    def _report_row(self, request: CheckoutRequest, booking: dict) -> dict:
        user_info = booking.get("user_info") or {}
        room = booking.get("room") or {}
        return {
            "reporter_id": booking.get("user_id"),
            "reporter_name": user_info.get("full_name"),
            "reporter_email": user_info.get("email"),
            "reporter_phone": user_info.get("phone_number"),
            "is_anonymous": False,
            "category": request.report_category,
            "priority": "medium",
            "title": f"Issue with {request.report_category.replace('_', ' ')}",
            "description": request.report_description,
            "location": room.get("name"),
            "room_id": booking.get("room_id"),
            "status": "new",
            "attachments": request.attachments,
        }

def _failed(e: StorageError, language: Language, en: str, id: str) -> OperationResult:
    logger.error("%s: %s", e.operation, e.message)
    return OperationResult(status="failed", message=i18n.error(language, e.message, en, id).message)
