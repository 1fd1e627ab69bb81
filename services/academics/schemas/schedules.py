# services/academics/schemas/schedules.py

from pydantic import Field, model_validator
from typing import Optional
from datetime import datetime
from uuid import UUID

from shared.schemas import APIModel

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"  # HH:MM, 24h


def check_time_range(start_time: str, end_time: str) -> None:
    # zero-padded HH:MM strings sort chronologically
    if end_time <= start_time:
        raise ValueError("End time must be after start time")


class ScheduleCreate(APIModel):
    group_id: UUID
    subject_id: UUID
    professor_id: UUID
    day_of_week: int = Field(ge=0, le=6)  # 0 = Sunday
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)
    room: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = None
    is_active: bool = True

    @model_validator(mode="after")
    def valid_range(self):
        check_time_range(self.start_time, self.end_time)
        return self


class ScheduleUpdate(APIModel):
    group_id: Optional[UUID] = None
    subject_id: Optional[UUID] = None
    professor_id: Optional[UUID] = None
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    start_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    room: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class ScheduleOut(APIModel):
    id: UUID
    group_id: UUID
    subject_id: UUID
    professor_id: UUID
    day_of_week: int
    start_time: str
    end_time: str
    room: Optional[str]
    notes: Optional[str]
    is_active: bool
    created_at: datetime
