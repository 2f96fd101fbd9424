from datetime import datetime, timedelta

import pytest

from app.schemas.booking import ClassType
from app.services.reservations.duration import (
    PER_UNIT_MINUTES,
    calculate_end_time,
    duration_minutes,
    resolve_end_time,
)
from tests.fakes import TZ

START = datetime(2024, 1, 1, 8, 0)


def test_theory_units_are_fifty_minutes():
    assert calculate_end_time(START, 2, ClassType.THEORY) == datetime(2024, 1, 1, 9, 40)


def test_practical_units_are_one_hundred_seventy_minutes():
    assert calculate_end_time(START, 2, "practical") == datetime(2024, 1, 1, 13, 40)
    assert calculate_end_time(START, 1, ClassType.PRACTICAL) == datetime(2024, 1, 1, 10, 50)


def test_string_start_is_accepted():
    assert calculate_end_time("2024-01-01T08:00", 2, "theory") == datetime(2024, 1, 1, 9, 40)


@pytest.mark.parametrize("start, units, class_type", [
    (None, 2, "theory"),
    ("", 2, "theory"),
    (START, 0, "theory"),
    (START, -1, "theory"),
    (START, None, "theory"),
    (START, 2, "seminar"),
])
def test_nothing_to_compute_yields_none(start, units, class_type):
    assert calculate_end_time(start, units, class_type) is None


def test_timezone_is_preserved():
    start = datetime(2024, 1, 1, 8, 0, tzinfo=TZ)
    assert calculate_end_time(start, 3, "theory").tzinfo is TZ


@pytest.mark.parametrize("units", range(1, 7))
def test_end_is_linear_in_units(units):
    for class_type, minutes in PER_UNIT_MINUTES.items():
        assert calculate_end_time(START, units, class_type) - START == timedelta(minutes=units * minutes)


def test_manual_end_overrides_computation():
    manual = datetime(2024, 1, 1, 12, 0)
    assert resolve_end_time(START, 2, "theory", manual) == manual
    assert resolve_end_time(START, 2, "theory") == datetime(2024, 1, 1, 9, 40)


def test_duration_minutes():
    assert duration_minutes(START, datetime(2024, 1, 1, 9, 40)) == 100
    assert duration_minutes(START, None) is None
