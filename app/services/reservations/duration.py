from datetime import datetime, timedelta
from typing import Optional, Union

from app.schemas.booking import ClassType

# Minutes of one credit unit (SKS) per class type
PER_UNIT_MINUTES = {
    ClassType.THEORY: 50,
    ClassType.PRACTICAL: 170,
}

def calculate_end_time(
    start: Union[datetime, str, None],
    units: Optional[int],
    class_type: Union[ClassType, str],
) -> Optional[datetime]:
    """``start + units * per-unit minutes``, or None when there is nothing to compute yet.

    A missing start, a non-positive unit count or an unknown class type all
    mean "no end time yet", which is a normal state while a form is filled in.

    >>> calculate_end_time("2024-01-01T08:00", 2, "theory")
    datetime.datetime(2024, 1, 1, 9, 40)
    """
    if not start or not units or units <= 0:
        return None
    try:
        minutes = PER_UNIT_MINUTES[ClassType(class_type)]
    except ValueError:
        return None
    if isinstance(start, str):
        start = datetime.fromisoformat(start)
    return start + timedelta(minutes=units * minutes)

def resolve_end_time(
    start: Union[datetime, str, None],
    units: Optional[int],
    class_type: Union[ClassType, str],
    manual_end: Optional[datetime] = None,
) -> Optional[datetime]:
    """Manual end time when the user gave one, otherwise the computed one."""
    if manual_end is not None:
        return manual_end
    return calculate_end_time(start, units, class_type)

def duration_minutes(start: datetime, end: Optional[datetime]) -> Optional[int]:
    """Informational length of a booking in whole minutes."""
    if end is None:
        return None
    return int((end - start).total_seconds() // 60)
