from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# --- Schedule records as stored ---
# Time fields stay raw strings: a malformed value must only drop its own
# record when windows are resolved, never fail validation of the whole batch.

class BookingRecord(BaseModel):
    kind: Literal["booking"] = "booking"
    id: str
    room_id: Optional[str] = None
    start_time: Optional[str] = None   # timestamptz, ISO 8601
    end_time: Optional[str] = None
    status: str = "pending"
    purpose: Optional[str] = None

class LectureSlot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["lecture"] = "lecture"
    id: str
    room: Optional[str] = None         # free-text room name, no room id
    day: Optional[str] = None          # weekday name, e.g. "Senin"
    start_time: Optional[str] = None   # "HH:MM:SS"
    end_time: Optional[str] = None
    course_name: Optional[str] = None
    class_name: Optional[str] = Field(default=None, alias="class")
    subject_study: Optional[str] = None

class ExamSlot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["exam"] = "exam"
    id: str
    room_id: Optional[str] = None
    date: Optional[str] = None         # "YYYY-MM-DD"
    start_time: Optional[str] = None   # "HH:MM:SS"
    end_time: Optional[str] = None
    is_take_home: bool = False
    course_name: Optional[str] = None
    class_name: Optional[str] = Field(default=None, alias="class")
    semester: Optional[int] = None

ScheduleRecord = Union[BookingRecord, LectureSlot, ExamSlot]

# --- Response Model for the room schedule detail ---
class ScheduleEntry(BaseModel):
    kind: Literal["booking", "lecture", "exam"]
    id: str
    title: str
    start: datetime
    end: datetime
    active: bool
