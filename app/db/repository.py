import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import AsyncClient

from app.core.errors import StorageError
from app.schemas.room import Equipment, Room, StudyProgram
from app.schemas.schedule import BookingRecord, ExamSlot, LectureSlot
from app.services.reservations.windows import day_names

logger = logging.getLogger(__name__)

class ReservationRepository:
    """Every read and write the reservation core needs, one request each."""

    def __init__(self, client: AsyncClient):
        self.client = client

    async def _execute(self, operation: str, query) -> List[Dict[str, Any]]:
        try:
            response = await query.execute()
        except Exception as e:
            message = getattr(e, "message", None) or str(e)
            logger.error("DB Error during %s: %s", operation, message)
            raise StorageError(operation, message) from e
        return response.data or []

    # --- Reads ---

    async def fetch_rooms(self) -> List[Room]:
        rows = await self._execute(
            "fetch rooms",
            self.client.table("rooms").select("*, department:departments(*)").order("name"),
        )
        return [Room.model_validate(r) for r in rows]

    async def fetch_approved_bookings(self, start: datetime, end: datetime) -> List[BookingRecord]:
        """Approved bookings overlapping ``[start, end)``."""
        rows = await self._execute(
            "fetch approved bookings",
            self.client.table("bookings")
            .select("id, room_id, start_time, end_time, status, purpose")
            .eq("status", "approved")
            .lt("start_time", end.isoformat())
            .gt("end_time", start.isoformat()),
        )
        return [BookingRecord.model_validate(r) for r in rows]

    async def fetch_approved_bookings_for_room(self, room_id: str) -> List[BookingRecord]:
        rows = await self._execute(
            "fetch approved bookings for room",
            self.client.table("bookings")
            .select("id, room_id, start_time, end_time, status, purpose")
            .eq("room_id", room_id)
            .eq("status", "approved"),
        )
        return [BookingRecord.model_validate(r) for r in rows]

    async def fetch_lecture_slots(self, on: date) -> List[LectureSlot]:
        """Lecture slots held on the weekday of ``on``, under either day-name spelling."""
        # ilike without wildcards is a case-insensitive equality
        day_filter = ",".join(f"day.ilike.{name}" for name in day_names(on))
        rows = await self._execute(
            "fetch lecture schedules",
            self.client.table("lecture_schedules").select("*").or_(day_filter),
        )
        return [LectureSlot.model_validate(r) for r in rows]

    async def fetch_exam_slots(self, on: date) -> List[ExamSlot]:
        rows = await self._execute(
            "fetch exams",
            self.client.table("exams").select("*").eq("date", on.isoformat()),
        )
        return [ExamSlot.model_validate(r) for r in rows]

    async def fetch_equipment(self) -> List[Equipment]:
        rows = await self._execute(
            "fetch equipment",
            self.client.table("equipment").select("*").eq("is_available", True),
        )
        return [Equipment.model_validate(r) for r in rows]

    async def fetch_study_programs(self) -> List[StudyProgram]:
        rows = await self._execute(
            "fetch study programs",
            self.client.table("study_programs").select("*, department:departments(*)"),
        )
        return [StudyProgram.model_validate(r) for r in rows]

    async def fetch_users(self) -> List[Dict[str, Any]]:
        return await self._execute(
            "fetch users",
            self.client.table("users")
            .select("id, identity_number, full_name, email, phone_number, department_id, study_program_id")
            .order("full_name"),
        )

    async def fetch_booking(self, booking_id: str) -> Optional[Dict[str, Any]]:
        rows = await self._execute(
            "fetch booking",
            self.client.table("bookings").select("*, room:rooms(id, name, code)").eq("id", booking_id),
        )
        return rows[0] if rows else None

    async def fetch_pending_bookings(self) -> List[Dict[str, Any]]:
        return await self._execute(
            "fetch pending bookings",
            self.client.table("bookings").select("*").eq("status", "pending")
            .order("created_at", desc=True),
        )

    async def fetch_borrowed_lendings(self) -> List[Dict[str, Any]]:
        """Borrowed lending-tool records that still have no permit attached."""
        return await self._execute(
            "fetch lending records",
            self.client.table("lending_tool").select("*").eq("status", "borrow")
            .or_("attachments.is.null,attachments.eq.{}")
            .order("created_at", desc=True),
        )

    # --- Writes ---

    async def insert_booking(self, data: Dict[str, Any]) -> str:
        rows = await self._execute("insert booking", self.client.table("bookings").insert(data))
        return rows[0]["id"]

    async def update_booking_status(
        self, booking_ids: List[str], status: str, only_if: Optional[str] = None
    ) -> List[str]:
        """Set ``status`` on the given bookings; with ``only_if`` only rows still in that status change."""
        query = (
            self.client.table("bookings")
            .update({"status": status, "updated_at": _now_iso()})
            .in_("id", booking_ids)
        )
        if only_if is not None:
            query = query.eq("status", only_if)
        rows = await self._execute("update booking status", query)
        return [r["id"] for r in rows]

    async def set_room_availability(self, room_id: str, is_available: bool) -> None:
        await self._execute(
            "update room availability",
            self.client.table("rooms").update({"is_available": is_available}).eq("id", room_id),
        )

    async def insert_checkout(self, data: Dict[str, Any]) -> str:
        rows = await self._execute("insert checkout", self.client.table("checkouts").insert(data))
        return rows[0]["id"]

    async def insert_report(self, data: Dict[str, Any]) -> str:
        rows = await self._execute("insert report", self.client.table("reports").insert(data))
        return rows[0]["id"]

    async def update_lending_status(self, lending_id: str, status: str) -> None:
        await self._execute(
            "update lending status",
            self.client.table("lending_tool")
            .update({"status": status, "updated_at": _now_iso()})
            .eq("id", lending_id),
        )

    async def update_attachments(self, table: str, record_id: str, attachments: List[str]) -> None:
        """Attach permit documents to a ``bookings`` or ``lending_tool`` row."""
        await self._execute(
            f"update {table} attachments",
            self.client.table(table)
            .update({"attachments": attachments, "updated_at": _now_iso()})
            .eq("id", record_id),
        )


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
