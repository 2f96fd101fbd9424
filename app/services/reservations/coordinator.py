import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from datetime import tzinfo
from typing import Any, Awaitable, Callable, Dict, List, Optional

from app.core import i18n
from app.core.errors import NoRoomSelectedError, StorageError
from app.core.i18n import Language
from app.schemas.booking import BookingDraft, BookingResult, BookingStatus
from app.services.reservations.duration import resolve_end_time
from app.services.reservations.equipment import equipment_options, with_mandatory
from app.services.reservations.windows import localize

logger = logging.getLogger(__name__)

BOOKING_PURPOSE = "Class/Study Session"

class BookingSubmissionCoordinator:
    """Write path for a new booking.

    Order of side effects: supersede the room's approved bookings, insert
    the new pending booking, clear the room's ``is_available`` flag, then
    ask for a fresh status refresh. Failing to supersede or insert aborts,
    and a failed insert puts the superseded bookings back to approved.
    Failing to update the flag or to refresh only adds a warning.

    Submissions for the same room are serialized within this process and
    the supersede only touches rows that are still approved. Nothing guards
    against a second process doing the same at the same time.
    """

    def __init__(
        self,
        repository,
        tz: tzinfo,
        on_submitted: Optional[Callable[[], Awaitable[Any]]] = None,
    ):
        self.repository = repository
        self.tz = tz
        self.on_submitted = on_submitted
        self._room_locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = defaultdict(int)

    async def submit(self, draft: BookingDraft, language: Language = Language.EN) -> BookingResult:
        try:
            room_id = self._require_room(draft)
        except NoRoomSelectedError:
            return BookingResult(
                status="failed",
                message=i18n.get_text(language, "Please select a room", "Silakan pilih ruangan"),
            )

        start = localize(draft.start_time, self.tz)
        manual_end = localize(draft.end_time, self.tz) if draft.end_time else None
        end = resolve_end_time(start, draft.sks, draft.class_type, manual_end)
        if end is None:
            return BookingResult(
                status="failed",
                message=i18n.get_text(
                    language,
                    "End time could not be determined",
                    "Waktu selesai tidak dapat ditentukan",
                ),
            )

        notices: List[i18n.Notice] = []
        equipment = await self._equipment_for(room_id, draft.equipment_requested, notices, language)

        async with self._room_lock(room_id):
            try:
                superseded = await self._supersede(room_id)
            except StorageError as e:
                return self._failed(e, language)

            try:
                booking_id = await self.repository.insert_booking(
                    self._booking_row(draft, room_id, start, end, equipment)
                )
            except StorageError as e:
                await self._restore(room_id, superseded)
                return self._failed(e, language)
            logger.info("Booking %s created for room %s (%s - %s)", booking_id, room_id, start, end)

            try:
                await self.repository.set_room_availability(room_id, False)
            except StorageError as e:
                logger.warning("Booking %s saved but room %s flag not updated: %s", booking_id, room_id, e.message)
                notices.append(i18n.warning(
                    language,
                    "Booking saved, but failed to update room status.",
                    "Pemesanan tersimpan, tetapi gagal memperbarui status ruangan.",
                ))

        if self.on_submitted is not None:
            try:
                await self.on_submitted()
            except StorageError as e:
                logger.warning("Refresh after booking %s failed: %s", booking_id, e.message)
                notices.append(i18n.warning(
                    language,
                    "Room statuses could not be refreshed.",
                    "Status ruangan tidak dapat diperbarui.",
                ))

        notices.append(i18n.Notice(level="info", message=i18n.get_text(
            language,
            "You will receive notification once your booking is approved by admin.",
            "Anda akan menerima notifikasi setelah pemesanan disetujui oleh admin.",
        )))
        return BookingResult(
            status="success",
            message=i18n.get_text(
                language,
                "Booking submitted successfully! Status: pending approval",
                "Pemesanan berhasil dikirim! Status: menunggu persetujuan",
            ),
            booking_id=booking_id,
            end_time=end,
            superseded=superseded,
            notices=notices,
        )

    def _require_room(self, draft: BookingDraft) -> str:
        if not draft.room_id:
            raise NoRoomSelectedError("booking draft has no room")
        return draft.room_id

    async def _supersede(self, room_id: str) -> List[str]:
        """Mark the room's approved bookings completed; a new approval ends prior occupancy."""
        approved = await self.repository.fetch_approved_bookings_for_room(room_id)
        if not approved:
            return []
        ids = [b.id for b in approved]
        updated = await self.repository.update_booking_status(
            ids, BookingStatus.COMPLETED.value, only_if=BookingStatus.APPROVED.value
        )
        logger.info("Superseded %d approved booking(s) on room %s", len(updated), room_id)
        return updated

    @asynccontextmanager
    async def _room_lock(self, room_id: str):
        """Serialize submissions per room; a lock lives only while someone holds or awaits it."""
        lock = self._room_locks.setdefault(room_id, asyncio.Lock())
        self._lock_users[room_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[room_id] -= 1
            if not self._lock_users[room_id]:
                del self._lock_users[room_id]
                del self._room_locks[room_id]

    async def _restore(self, room_id: str, superseded: List[str]) -> None:
        """Put superseded bookings back to approved after a failed insert."""
        if not superseded:
            return
        try:
            await self.repository.update_booking_status(
                superseded, BookingStatus.APPROVED.value, only_if=BookingStatus.COMPLETED.value
            )
        except StorageError as e:
            logger.error(
                "Insert failed and booking(s) %s on room %s could not be restored to approved: %s",
                ", ".join(superseded), room_id, e.message,
            )

    async def _equipment_for(
        self, room_id: str, requested: List[str], notices: List[i18n.Notice], language: Language
    ) -> List[str]:
        try:
            available = await self.repository.fetch_equipment()
        except StorageError as e:
            logger.warning("Could not load equipment for room %s: %s", room_id, e.message)
            notices.append(i18n.warning(
                language,
                "Mandatory equipment could not be checked.",
                "Peralatan wajib tidak dapat diperiksa.",
            ))
            return list(dict.fromkeys(requested))
        return with_mandatory(requested, equipment_options(room_id, available))

    def _booking_row(self, draft: BookingDraft, room_id: str, start, end, equipment: List[str]) -> Dict[str, Any]:
        user_info = None
        if not draft.user_id:
            user_info = {
                "full_name": draft.full_name,
                "identity_number": draft.identity_number,
                "study_program_id": draft.study_program_id,
                "phone_number": draft.phone_number,
                "email": f"{draft.identity_number}@student.edu",
                "department_id": draft.department_id,
            }
        return {
            "room_id": room_id,
            "start_time": start.isoformat(),
            "end_time": end.isoformat(),
            "sks": draft.sks,
            "class_type": draft.class_type.value,
            "equipment_requested": equipment,
            "notes": draft.notes or None,
            "status": BookingStatus.PENDING.value,
            "purpose": BOOKING_PURPOSE,
            "user_id": draft.user_id,
            "user_info": user_info,
        }

    def _failed(self, e: StorageError, language: Language) -> BookingResult:
        logger.error("Booking submission failed during %s: %s", e.operation, e.message)
        notice = i18n.error(language, e.message, "Failed to create booking", "Gagal membuat pemesanan")
        return BookingResult(status="failed", message=notice.message)
