# services/user_management/schemas/users.py
from pydantic import EmailStr, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime
from uuid import UUID

from shared.schemas import APIModel
from services.user_management.models.users import UserRole


class UserCreate(APIModel):
    email: EmailStr
    password: str = Field(min_length=6)
    confirm_password: str = Field(min_length=6)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: UserRole = UserRole.STUDENT
    is_active: bool = True
    must_change_password: bool = True

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower()

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserUpdate(APIModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    must_change_password: Optional[bool] = None
    # Admin-side reset; stored hashed
    password: Optional[str] = Field(default=None, min_length=6)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower() if value is not None else value


class UserOut(APIModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool
    must_change_password: bool
    created_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime
