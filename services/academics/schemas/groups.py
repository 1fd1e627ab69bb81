# services/academics/schemas/groups.py

from pydantic import Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from shared.schemas import APIModel


class GroupCreate(APIModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    academic_year: str = Field(min_length=1, max_length=10)
    is_active: bool = True


class GroupUpdate(APIModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    academic_year: Optional[str] = Field(default=None, min_length=1, max_length=10)
    is_active: Optional[bool] = None


class GroupOut(APIModel):
    id: UUID
    name: str
    description: Optional[str]
    academic_year: str
    is_active: bool
    created_by: Optional[UUID]
    created_at: datetime
