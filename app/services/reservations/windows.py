"""Resolve schedule records into comparable time windows.

Bookings carry absolute timestamps. Lecture and exam slots carry wall-clock
times of day that are anchored to the date of the reference instant, so all
three kinds end up as aware datetimes in the facility time zone.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from typing import Iterable, Iterator, List, Optional, Tuple

from pydantic import TypeAdapter

from app.core.errors import RecordTimeError
from app.schemas.schedule import ScheduleRecord

logger = logging.getLogger(__name__)

# Indexed by date.weekday(); lecture schedules are stored with Indonesian names
DAY_NAMES = ["Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu"]
DAY_NAMES_EN = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

TIME_FORMATS = ("%H:%M:%S", "%H:%M")

# accepts what Postgres emits for timestamptz, including trimmed fractions and "Z"
_TIMESTAMP = TypeAdapter(datetime)


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.start < end and self.end > start


def day_names(on: date) -> List[str]:
    """Every spelling a lecture row may use for the weekday of ``on``."""
    return [DAY_NAMES[on.weekday()], DAY_NAMES_EN[on.weekday()]]


def is_weekday(name: Optional[str], on: date) -> bool:
    if not name:
        return False
    return name.strip().lower() in [n.lower() for n in day_names(on)]


def localize(moment: datetime, tz: tzinfo) -> datetime:
    """Naive values are taken as facility wall clock; aware ones are converted."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def parse_timestamp(value: str, tz: tzinfo) -> datetime:
    return localize(_TIMESTAMP.validate_python(value), tz)


def parse_time_of_day(value: str) -> time:
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    raise ValueError(f"not a time of day: {value!r}")


def _absolute_window(record, now: datetime) -> TimeWindow:
    return TimeWindow(
        parse_timestamp(record.start_time, now.tzinfo),
        parse_timestamp(record.end_time, now.tzinfo),
    )


def _wall_clock_window(record, now: datetime) -> TimeWindow:
    today = now.date()
    return TimeWindow(
        datetime.combine(today, parse_time_of_day(record.start_time), tzinfo=now.tzinfo),
        datetime.combine(today, parse_time_of_day(record.end_time), tzinfo=now.tzinfo),
    )


_RESOLVERS = {
    "booking": _absolute_window,
    "lecture": _wall_clock_window,
    "exam": _wall_clock_window,
}


def resolve_window(record: ScheduleRecord, now: datetime) -> Optional[TimeWindow]:
    """Window of ``record`` relative to ``now`` (which must be aware).

    Returns None when the record has no start or end. Raises RecordTimeError
    when a time value is malformed.
    """
    if not record.start_time or not record.end_time:
        return None
    try:
        return _RESOLVERS[record.kind](record, now)
    except (TypeError, ValueError) as e:
        value = f"{record.start_time} - {record.end_time}"
        raise RecordTimeError(record.id, value) from e


def resolve_windows(
    records: Iterable[ScheduleRecord], now: datetime
) -> Iterator[Tuple[ScheduleRecord, TimeWindow]]:
    """Yield ``(record, window)`` pairs, skipping records without a usable window."""
    for record in records:
        try:
            window = resolve_window(record, now)
        except RecordTimeError as e:
            logger.warning("Skipping %s record: %s", record.kind, e)
            continue
        if window is not None:
            yield record, window
