import asyncio
from datetime import timedelta

import pytest

from app.core.errors import StorageError
from app.schemas.room import RoomStatus
from app.services.reservations.aggregator import ConflictAggregator
from app.services.reservations.refresh import RefreshScheduler, RepeatingTask, RoomStatusBoard
from tests.fakes import NOW, TZ, FakeRepository, make_booking, make_room


def make_board(repo):
    return RoomStatusBoard(ConflictAggregator(repo, TZ), clock=lambda: NOW)


def busy_repo():
    return FakeRepository(
        rooms=[make_room("r1", "Lab A")],
        bookings=[make_booking("b1", "r1", "2024-01-01T09:00:00", "2024-01-01T11:00:00")],
    )


def test_board_is_empty_before_first_refresh():
    board = make_board(busy_repo())
    assert board.snapshot is None
    assert board.statuses() == []
    assert board.room_schedule("r1") == []


def test_refresh_publishes_statuses():
    board = make_board(busy_repo())
    asyncio.run(board.refresh())
    assert [r.status for r in board.statuses()] == [RoomStatus.IN_USE]
    assert [e.id for e in board.room_schedule("r1")] == ["b1"]


def test_failed_refresh_keeps_previous_snapshot():
    repo = busy_repo()
    board = make_board(repo)
    asyncio.run(board.refresh())
    previous = board.snapshot

    repo.fail.add("fetch_exam_slots")
    with pytest.raises(StorageError):
        asyncio.run(board.refresh())
    assert board.snapshot is previous
    assert board.last_error.operation == "fetch_exam_slots"
    assert [r.status for r in board.statuses()] == [RoomStatus.IN_USE]

    repo.fail.clear()
    asyncio.run(board.refresh())
    assert board.last_error is None


def test_tick_moves_clock_without_reading_storage():
    repo = busy_repo()
    board = make_board(repo)
    later = NOW + timedelta(minutes=5)
    assert board.tick(later) == later
    assert board.now == later
    assert repo.calls == []


class GatedRepository(FakeRepository):
    """fetch_rooms blocks on the gate registered for the current call."""

    def __init__(self, *args, **kw):
        super().__init__(*args, **kw)
        self.gates = []

    async def fetch_rooms(self):
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        return await super().fetch_rooms()


def test_closing_discards_in_flight_refresh():
    repo = GatedRepository(rooms=[make_room("r1", "Lab A")])
    board = make_board(repo)

    async def scenario():
        pending = asyncio.create_task(board.refresh())
        while not repo.gates:
            await asyncio.sleep(0)
        board.close()
        repo.gates[0].set()
        await pending

    asyncio.run(scenario())
    assert board.snapshot is None
    assert board.statuses() == []


def test_older_refresh_finishing_last_is_discarded():
    repo = GatedRepository(rooms=[make_room("r1", "Lab A")])
    board = make_board(repo)

    async def scenario():
        first = asyncio.create_task(board.refresh(NOW))
        second = asyncio.create_task(board.refresh(NOW + timedelta(hours=1)))
        while len(repo.gates) < 2:
            await asyncio.sleep(0)
        repo.gates[1].set()
        await second
        repo.gates[0].set()
        await first

    asyncio.run(scenario())
    assert board.snapshot.now == NOW + timedelta(hours=1)


def test_older_refresh_failing_late_does_not_mark_board_stale():
    repo = GatedRepository(rooms=[make_room("r1", "Lab A")])
    board = make_board(repo)

    async def scenario():
        first = asyncio.create_task(board.refresh(NOW))
        second = asyncio.create_task(board.refresh(NOW + timedelta(hours=1)))
        while len(repo.gates) < 2:
            await asyncio.sleep(0)
        repo.gates[1].set()
        await second
        repo.fail.add("fetch_rooms")
        repo.gates[0].set()
        with pytest.raises(StorageError):
            await first

    asyncio.run(scenario())
    assert board.last_error is None
    assert board.snapshot.now == NOW + timedelta(hours=1)


def test_refresh_after_close_does_nothing():
    repo = busy_repo()
    board = make_board(repo)
    board.close()
    assert asyncio.run(board.refresh()) is None
    assert repo.calls == []


def test_repeating_task_survives_failing_iterations():
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) == 1:
            raise StorageError("fetch_rooms", "timeout")

    async def scenario():
        task = RepeatingTask("flaky", 0.001, flaky)
        task.start()
        while len(calls) < 3:
            await asyncio.sleep(0.001)
        assert task.running
        await task.stop()
        assert not task.running

    asyncio.run(scenario())
    assert len(calls) >= 3


def test_repeating_task_awaits_coroutine_callbacks():
    done = []

    async def callback():
        done.append(1)

    async def scenario():
        task = RepeatingTask("async", 0.001, callback)
        task.start()
        while not done:
            await asyncio.sleep(0.001)
        await task.stop()

    asyncio.run(scenario())
    assert done


def test_scheduler_runs_both_timers_and_closes_board_on_stop():
    repo = busy_repo()
    board = make_board(repo)
    scheduler = RefreshScheduler(board, now_interval=0.001, full_interval=0.001)

    async def scenario():
        scheduler.start()
        assert all(t.running for t in scheduler.tasks)
        while board.snapshot is None:
            await asyncio.sleep(0.001)
        await scheduler.stop()

    asyncio.run(scenario())
    assert board.closed
    assert not any(t.running for t in scheduler.tasks)
    assert [t.name for t in scheduler.tasks] == ["clock-tick", "status-refresh"]
