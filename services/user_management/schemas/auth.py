# services/user_management/schemas/auth.py
from pydantic import EmailStr, Field, field_validator, model_validator

from shared.schemas import APIModel
from services.user_management.schemas.users import UserOut


class LoginRequest(APIModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower()


class LoginResponse(APIModel):
    user: UserOut


class ChangePasswordRequest(APIModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)
    confirm_password: str = Field(min_length=6)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self
