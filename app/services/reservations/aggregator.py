import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta, tzinfo
from typing import Dict, List, Optional

from app.schemas.room import Room
from app.schemas.schedule import BookingRecord, ExamSlot, LectureSlot, ScheduleEntry
from app.services.reservations.names import RoomNameMatcher
from app.services.reservations.windows import (
    TimeWindow,
    is_weekday,
    localize,
    resolve_windows,
)

logger = logging.getLogger(__name__)

@dataclass
class RoomConflicts:
    booking_conflicts: List[BookingRecord] = field(default_factory=list)
    lecture_conflicts: List[LectureSlot] = field(default_factory=list)
    exam_conflicts: List[ExamSlot] = field(default_factory=list)
    has_any_today: bool = False
    today: List[ScheduleEntry] = field(default_factory=list)

@dataclass
class ConflictSnapshot:
    now: datetime
    until: Optional[datetime]
    rooms: List[Room]
    conflicts: Dict[str, RoomConflicts]

    def for_room(self, room_id: str) -> RoomConflicts:
        return self.conflicts.get(room_id) or RoomConflicts()

class ConflictAggregator:
    """Collects today's bookings, lectures and exams per room.

    Each source is read once per call. Records are then routed to rooms
    through two lookups: room id (bookings, exams) and normalized room
    name (lectures, which carry no room id).
    """

    def __init__(self, repository, tz: tzinfo, matcher: Optional[RoomNameMatcher] = None):
        self.repository = repository
        self.tz = tz
        self.matcher = matcher or RoomNameMatcher()

    async def collect(self, now: datetime, until: Optional[datetime] = None) -> ConflictSnapshot:
        now = localize(now, self.tz)
        if until is not None:
            until = localize(until, self.tz)
        today = now.date()
        day_start = datetime.combine(today, time.min, tzinfo=self.tz)
        day_end = day_start + timedelta(days=1)
        # bookings are absolute, so a planned interval past midnight can reach tomorrow's
        horizon = max(day_end, until) if until is not None else day_end

        # any failing source fails the whole refresh
        rooms, bookings, lectures, exams = await asyncio.gather(
            self.repository.fetch_rooms(),
            self.repository.fetch_approved_bookings(day_start, horizon),
            self.repository.fetch_lecture_slots(today),
            self.repository.fetch_exam_slots(today),
        )

        by_id: Dict[str, RoomConflicts] = {room.id: RoomConflicts() for room in rooms}
        by_name: Dict[str, List[RoomConflicts]] = {}
        for room in rooms:
            by_name.setdefault(self.matcher.key(room.name), []).append(by_id[room.id])

        def is_active(window: TimeWindow) -> bool:
            if until is None:
                return window.contains(now)
            return window.overlaps(now, until)

        todays_bookings = [b for b in bookings if b.status == "approved" and b.room_id in by_id]
        for booking, window in resolve_windows(todays_bookings, now):
            in_today = window.overlaps(day_start, day_end)
            active = is_active(window)
            # past midnight a booking only matters when it overlaps the planned interval
            if not (in_today or active):
                continue
            entry = by_id[booking.room_id]
            entry.has_any_today = entry.has_any_today or in_today
            entry.today.append(_entry(booking, window, active, booking.purpose or "Booking"))
            if active:
                entry.booking_conflicts.append(booking)

        todays_lectures = [s for s in lectures if s.room and is_weekday(s.day, today)]
        for lecture, window in resolve_windows(todays_lectures, now):
            active = is_active(window)
            title = " - ".join(p for p in (lecture.course_name or "Lecture", lecture.class_name) if p)
            for entry in by_name.get(self.matcher.key(lecture.room), []):
                entry.has_any_today = True
                entry.today.append(_entry(lecture, window, active, title))
                if active:
                    entry.lecture_conflicts.append(lecture)

        todays_exams = [
            e for e in exams
            if not e.is_take_home and e.room_id in by_id and (e.date or "")[:10] == today.isoformat()
        ]
        for exam, window in resolve_windows(todays_exams, now):
            active = is_active(window)
            entry = by_id[exam.room_id]
            entry.has_any_today = True
            entry.today.append(_entry(exam, window, active, exam.course_name or "Exam"))
            if active:
                entry.exam_conflicts.append(exam)

        for entry in by_id.values():
            entry.today.sort(key=lambda e: e.start)

        logger.info(
            "Collected %d bookings, %d lectures, %d exams for %d rooms on %s",
            len(todays_bookings), len(todays_lectures), len(todays_exams), len(rooms), today,
        )
        return ConflictSnapshot(now=now, until=until, rooms=rooms, conflicts=by_id)


def _entry(record, window: TimeWindow, active: bool, title: str) -> ScheduleEntry:
    return ScheduleEntry(
        kind=record.kind, id=record.id, title=title,
        start=window.start, end=window.end, active=active,
    )
