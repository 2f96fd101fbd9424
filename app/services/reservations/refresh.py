import asyncio
import inspect
import logging
from datetime import datetime
from typing import Any, Callable, List, Optional

from app.core.errors import StorageError
from app.core.i18n import Language
from app.schemas.room import RoomWithStatus
from app.schemas.schedule import ScheduleEntry
from app.services.reservations.aggregator import ConflictAggregator, ConflictSnapshot
from app.services.reservations.classifier import classify_rooms

logger = logging.getLogger(__name__)

class RoomStatusBoard:
    """Owns the latest room-status snapshot shown to users.

    ``tick`` only moves the clock used by time displays; ``refresh`` rereads
    storage. A failed refresh keeps the previous snapshot. Refreshes may
    overlap: a result is applied only if no newer refresh has been applied
    already, and nothing is applied once the board is closed.
    """

    def __init__(self, aggregator: ConflictAggregator, clock: Optional[Callable[[], datetime]] = None):
        self.aggregator = aggregator
        self._clock = clock or (lambda: datetime.now(aggregator.tz))
        self.now = self._clock()
        self.snapshot: Optional[ConflictSnapshot] = None
        self.last_error: Optional[StorageError] = None
        self.closed = False
        self._started = 0
        self._applied = 0

    def tick(self, now: Optional[datetime] = None) -> datetime:
        self.now = now or self._clock()
        return self.now

    async def refresh(self, now: Optional[datetime] = None) -> Optional[ConflictSnapshot]:
        if self.closed:
            return self.snapshot
        self._started += 1
        generation = self._started
        try:
            snapshot = await self.aggregator.collect(now or self._clock())
        except StorageError as e:
            # an older refresh failing after a newer one was applied does not make the board stale
            if not self.closed and generation > self._applied:
                self.last_error = e
            logger.error("Room status refresh failed, keeping previous snapshot: %s", e.message)
            raise
        if self.closed:
            logger.debug("Board closed during refresh, result discarded")
            return self.snapshot
        if generation < self._applied:
            logger.debug("Discarding refresh #%d, #%d already applied", generation, self._applied)
            return self.snapshot
        self._applied = generation
        self.snapshot = snapshot
        self.now = snapshot.now
        self.last_error = None
        return snapshot

    def statuses(self, language: Language = Language.EN, bookable_only: bool = False) -> List[RoomWithStatus]:
        if self.snapshot is None:
            return []
        return classify_rooms(self.snapshot, language, bookable_only)

    def room_schedule(self, room_id: str) -> List[ScheduleEntry]:
        if self.snapshot is None:
            return []
        return list(self.snapshot.for_room(room_id).today)

    def close(self) -> None:
        self.closed = True

class RepeatingTask:
    """Runs ``callback`` every ``interval`` seconds until stopped."""

    def __init__(self, name: str, interval: float, callback: Callable[[], Any]):
        self.name = name
        self.interval = interval
        self.callback = callback
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if not self.running:
            self._task = asyncio.create_task(self._run(), name=self.name)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                result = self.callback()
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception:
                # next iteration retries; the board keeps its previous state
                logger.exception("%s iteration failed", self.name)

class RefreshScheduler:
    """Two independent timers: a clock tick and a full status refresh."""

    def __init__(self, board: RoomStatusBoard, now_interval: float = 60.0, full_interval: float = 300.0):
        self.board = board
        self.tasks = [
            RepeatingTask("clock-tick", now_interval, board.tick),
            RepeatingTask("status-refresh", full_interval, board.refresh),
        ]

    def start(self) -> None:
        for task in self.tasks:
            task.start()
        logger.info("Refresh scheduler started (%s)", ", ".join(f"{t.name} every {t.interval}s" for t in self.tasks))

    async def stop(self) -> None:
        self.board.close()
        for task in self.tasks:
            await task.stop()
        logger.info("Refresh scheduler stopped")
