from datetime import datetime
from typing import List, Optional

from app.core.i18n import Language
from app.schemas.room import RoomWithStatus
from app.services.reservations.aggregator import ConflictAggregator
from app.services.reservations.classifier import classify, classify_rooms
from app.services.reservations.coordinator import BookingSubmissionCoordinator
from app.services.reservations.duration import PER_UNIT_MINUTES, calculate_end_time
from app.services.reservations.names import normalize_room_name


async def get_room_statuses(
    aggregator: ConflictAggregator,
    now: datetime,
    until: Optional[datetime] = None,
    language: Language = Language.EN,
    bookable_only: bool = False,
) -> List[RoomWithStatus]:
    """Status of every room at ``now`` (or over ``[now, until]``), read fresh from storage."""
    snapshot = await aggregator.collect(now, until)
    return classify_rooms(snapshot, language, bookable_only)


__all__ = [
    "BookingSubmissionCoordinator",
    "ConflictAggregator",
    "PER_UNIT_MINUTES",
    "calculate_end_time",
    "classify",
    "get_room_statuses",
    "normalize_room_name",
]
