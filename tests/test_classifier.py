"""Tests for deriving a room's status from its conflicts."""

from app.core.i18n import Language
from app.schemas.room import RoomStatus
from app.services.reservations.aggregator import ConflictSnapshot, RoomConflicts
from app.services.reservations.classifier import classify, classify_rooms
from tests.fakes import NOW, make_booking, make_exam, make_lecture, make_room


def test_no_records_means_available():
    assert classify(RoomConflicts()) == RoomStatus.AVAILABLE


def test_records_today_but_none_active_means_scheduled():
    assert classify(RoomConflicts(has_any_today=True)) == RoomStatus.SCHEDULED


def test_active_booking_means_in_use():
    conflicts = RoomConflicts(booking_conflicts=[make_booking("b1", "r1", "x", "y")], has_any_today=True)
    assert classify(conflicts) == RoomStatus.IN_USE


def test_active_exam_means_in_use():
    conflicts = RoomConflicts(exam_conflicts=[make_exam("e1", "r1", "09:00", "11:00")], has_any_today=True)
    assert classify(conflicts) == RoomStatus.IN_USE


def test_active_lecture_alone_means_in_use():
    conflicts = RoomConflicts(lecture_conflicts=[make_lecture("l1", "Lab A", "09:00", "11:00")], has_any_today=True)
    assert classify(conflicts) == RoomStatus.IN_USE


def test_classify_is_pure():
    conflicts = RoomConflicts(has_any_today=True)
    assert classify(conflicts) == classify(conflicts)
    assert conflicts == RoomConflicts(has_any_today=True)


def test_classify_rooms_labels_and_filters():
    snapshot = ConflictSnapshot(
        now=NOW,
        until=None,
        rooms=[make_room("r1", "Lab A"), make_room("r2", "Lab B", is_available=False)],
        conflicts={"r1": RoomConflicts(has_any_today=True)},
    )
    result = classify_rooms(snapshot, Language.ID)
    assert [(r.room.id, r.status, r.label) for r in result] == [
        ("r1", RoomStatus.SCHEDULED, "Terjadwal"),
        ("r2", RoomStatus.AVAILABLE, "Tersedia"),
    ]
    assert [r.room.id for r in classify_rooms(snapshot, bookable_only=True)] == ["r1"]


def test_administrative_flag_does_not_change_status():
    snapshot = ConflictSnapshot(now=NOW, until=None, rooms=[make_room("r1", "Lab A", is_available=False)], conflicts={})
    assert classify_rooms(snapshot)[0].status == RoomStatus.AVAILABLE
