from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from app.schemas.result import OperationResult

class ClassType(str, Enum):
    THEORY = "theory"
    PRACTICAL = "practical"

class BookingStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    COMPLETED = "completed"
    REJECTED = "rejected"

class BookingDraft(BaseModel):
    """Booking form as entered by the user.

    ``room_id`` may still be empty here: the submission coordinator rejects
    a draft without a room before touching storage.
    """
    full_name: str = Field(min_length=3)
    identity_number: str = Field(min_length=5)
    study_program_id: str = Field(min_length=1)
    phone_number: str = Field(min_length=10)
    room_id: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None   # manual override
    sks: int = Field(default=2, ge=1, le=6)
    class_type: ClassType = ClassType.THEORY
    equipment_requested: List[str] = []
    notes: Optional[str] = None
    user_id: Optional[str] = None         # set when the user is signed in
    department_id: Optional[str] = None

    @model_validator(mode="after")
    def check_manual_end_time(self):
        if self.end_time is not None and self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self

class EndTimeRequest(BaseModel):
    start_time: datetime
    sks: int = Field(default=0, ge=0, le=6)   # 0: no end time yet
    class_type: ClassType = ClassType.THEORY
    end_time: Optional[datetime] = None

class EndTimeResponse(BaseModel):
    end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    is_manual: bool = False

class BookingResult(OperationResult):
    booking_id: Optional[str] = None
    end_time: Optional[datetime] = None
    superseded: List[str] = []
