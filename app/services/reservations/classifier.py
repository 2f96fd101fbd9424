from typing import List

from app.core.i18n import Language, status_label
from app.schemas.room import RoomStatus, RoomWithStatus
from app.services.reservations.aggregator import ConflictSnapshot, RoomConflicts

def classify(conflicts: RoomConflicts) -> RoomStatus:
    """Status of one room from its aggregated conflicts.

    Id-keyed sources (bookings, exams) are checked before the name-keyed
    lecture match, but an active lecture alone still means In Use.
    """
    if conflicts.booking_conflicts or conflicts.exam_conflicts:
        return RoomStatus.IN_USE
    if conflicts.lecture_conflicts:
        return RoomStatus.IN_USE
    if conflicts.has_any_today:
        return RoomStatus.SCHEDULED
    return RoomStatus.AVAILABLE

def classify_rooms(
    snapshot: ConflictSnapshot,
    language: Language = Language.EN,
    bookable_only: bool = False,
) -> List[RoomWithStatus]:
    result = []
    for room in snapshot.rooms:
        if bookable_only and not room.is_available:
            continue
        status = classify(snapshot.for_room(room.id))
        result.append(RoomWithStatus(room=room, status=status, label=status_label(language, status.value)))
    return result
