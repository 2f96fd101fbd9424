from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.deps import get_board, get_language, get_repository
from app.core import i18n
from app.core.errors import StorageError
from app.core.i18n import Language
from app.schemas.room import EquipmentOptions, RoomStatusReport
from app.schemas.schedule import ScheduleEntry
from app.services.reservations import get_room_statuses
from app.services.reservations.equipment import equipment_options
from app.services.reservations.refresh import RoomStatusBoard

router = APIRouter()

def _unavailable(e: StorageError, language: Language) -> HTTPException:
    notice = i18n.error(
        language, e.message,
        "Failed to calculate room availability.", "Gagal menghitung ketersediaan ruangan.",
    )
    return HTTPException(status_code=503, detail=notice.message)

@router.get("/status", response_model=RoomStatusReport)
async def room_statuses(
    at: Optional[datetime] = Query(None, description="Reference instant; defaults to the last refresh"),
    until: Optional[datetime] = Query(None, description="Planned end; checks overlap with [at, until]"),
    bookable_only: bool = Query(False, description="Hide rooms whose is_available flag is off"),
    board: RoomStatusBoard = Depends(get_board),
    language: Language = Depends(get_language),
):
    if at is not None or until is not None:
        # ad-hoc query for another instant; does not touch the shared snapshot
        try:
            rooms = await get_room_statuses(board.aggregator, at or board.tick(), until, language, bookable_only)
        except StorageError as e:
            raise _unavailable(e, language)
        return RoomStatusReport(now=at or board.now, rooms=rooms)

    if board.snapshot is None:
        try:
            await board.refresh()
        except StorageError as e:
            raise _unavailable(e, language)

    report = RoomStatusReport(now=board.now, rooms=board.statuses(language, bookable_only))
    if board.last_error is not None:
        report.stale = True
        report.warning = _unavailable(board.last_error, language).detail
    return report

@router.post("/refresh", response_model=RoomStatusReport)
async def refresh_statuses(
    board: RoomStatusBoard = Depends(get_board),
    language: Language = Depends(get_language),
):
    try:
        await board.refresh()
    except StorageError as e:
        raise _unavailable(e, language)
    return RoomStatusReport(now=board.now, rooms=board.statuses(language))

@router.get("/{room_id}/schedule", response_model=List[ScheduleEntry])
async def room_schedule(room_id: str, board: RoomStatusBoard = Depends(get_board)):
    return board.room_schedule(room_id)

@router.get("/{room_id}/equipment", response_model=EquipmentOptions)
async def room_equipment(
    room_id: str,
    repository=Depends(get_repository),
    language: Language = Depends(get_language),
):
    try:
        equipment = await repository.fetch_equipment()
    except StorageError as e:
        notice = i18n.error(language, e.message, "Failed to load equipment.", "Gagal memuat peralatan.")
        raise HTTPException(status_code=503, detail=notice.message)
    return equipment_options(room_id, equipment)
