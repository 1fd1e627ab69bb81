# services/academics/schemas/grades.py

from pydantic import Field, field_validator, model_validator
from typing import Optional
from datetime import datetime
from uuid import UUID

from shared.schemas import APIModel
from services.academics.models.grades import DEFAULT_MAX_VALUE, GradeType


def check_grade_bounds(grade_value: float, max_value: float) -> None:
    if grade_value < 0:
        raise ValueError("Grade must be positive")
    if grade_value > max_value:
        raise ValueError(f"Grade cannot exceed {max_value:g}")


class GradeCreate(APIModel):
    student_id: UUID
    subject_id: UUID
    group_id: UUID
    grade_value: float = Field(ge=0)
    max_value: float = Field(default=DEFAULT_MAX_VALUE, ge=1, le=999)
    grade_type: GradeType
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None

    @field_validator("grade_value", "max_value")
    @classmethod
    def two_decimals(cls, value):
        return round(value, 2)

    @model_validator(mode="after")
    def within_bounds(self):
        check_grade_bounds(self.grade_value, self.max_value)
        return self


class GradeUpdate(APIModel):
    grade_value: Optional[float] = Field(default=None, ge=0)
    max_value: Optional[float] = Field(default=None, ge=1, le=999)
    grade_type: Optional[GradeType] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None

    @field_validator("grade_value", "max_value")
    @classmethod
    def two_decimals(cls, value):
        return round(value, 2) if value is not None else value


class GradeOut(APIModel):
    id: UUID
    student_id: UUID
    subject_id: UUID
    group_id: UUID
    grade_value: float
    max_value: float
    grade_type: GradeType
    title: str
    description: Optional[str]
    graded_by: UUID
    graded_at: datetime
    created_at: datetime
