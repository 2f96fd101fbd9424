from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

class Department(BaseModel):
    id: str
    name: str
    code: Optional[str] = None

class Room(BaseModel):
    id: str
    name: str
    code: Optional[str] = None
    capacity: Optional[int] = None
    department_id: Optional[str] = None
    department: Optional[Department] = None
    # administrative gate, independent of the schedule-derived status
    is_available: bool = True
    equipment: Optional[List[str]] = None

class RoomStatus(str, Enum):
    AVAILABLE = "Available"
    SCHEDULED = "Scheduled"
    IN_USE = "In Use"

class RoomWithStatus(BaseModel):
    room: Room
    status: RoomStatus
    label: str = ""

class Equipment(BaseModel):
    id: str
    name: str
    code: Optional[str] = None
    category: Optional[str] = None
    is_mandatory: bool = False
    is_available: bool = True
    rooms_id: Optional[str] = None     # None: general equipment usable in any room
    quantity: Optional[int] = None

class EquipmentOptions(BaseModel):
    room_id: str
    equipment: List[Equipment]
    selected: List[str]

class StudyProgram(BaseModel):
    id: str
    name: str
    code: Optional[str] = None
    department_id: Optional[str] = None

# --- Response Model for the status board ---
class RoomStatusReport(BaseModel):
    now: datetime
    rooms: List[RoomWithStatus]
    stale: bool = False            # last refresh failed; rooms are from the previous one
    warning: Optional[str] = None
