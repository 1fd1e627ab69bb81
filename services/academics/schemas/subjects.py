# services/academics/schemas/subjects.py

from pydantic import Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from shared.schemas import APIModel
from services.academics.models.subjects import DEFAULT_SUBJECT_COLOR

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class SubjectCreate(APIModel):
    name: str = Field(min_length=1, max_length=100)
    code: str = Field(min_length=1, max_length=20)
    description: Optional[str] = None
    color: str = Field(default=DEFAULT_SUBJECT_COLOR, pattern=COLOR_PATTERN)
    is_active: bool = True


class SubjectUpdate(APIModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    code: Optional[str] = Field(default=None, min_length=1, max_length=20)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)
    is_active: Optional[bool] = None


class SubjectOut(APIModel):
    id: UUID
    name: str
    code: str
    description: Optional[str]
    color: str
    is_active: bool
    created_at: datetime
