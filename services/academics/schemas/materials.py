# services/academics/schemas/materials.py

from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
from uuid import UUID

from shared.schemas import APIModel
from services.academics.models.materials import ALLOWED_FILE_TYPES, MAX_FILE_SIZE

URL_PATTERN = r"^https?://\S+$"


class MaterialCreate(APIModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    file_name: str = Field(min_length=1, max_length=255)
    file_url: str = Field(pattern=URL_PATTERN)
    file_type: str
    file_size: int = Field(gt=0, le=MAX_FILE_SIZE)
    group_id: UUID
    subject_id: UUID
    is_visible: bool = True

    @field_validator("file_type")
    @classmethod
    def allowed_file_type(cls, value):
        if value not in ALLOWED_FILE_TYPES:
            raise ValueError(f"Unsupported file type: {value}")
        return value


class MaterialUpdate(APIModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    group_id: Optional[UUID] = None
    subject_id: Optional[UUID] = None
    is_visible: Optional[bool] = None


class MaterialOut(APIModel):
    id: UUID
    title: str
    description: Optional[str]
    file_name: str
    file_url: str
    file_type: str
    file_size: int
    group_id: UUID
    subject_id: UUID
    uploaded_by: UUID
    is_visible: bool
    created_at: datetime
