from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from pawhub.models.enums import Sex, UserRole

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
PHONE_MIN_LENGTH = 6


def _check_password_ceiling(value: str) -> str:
    if len(value) > PASSWORD_MAX_LENGTH:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_LENGTH} characters long")
    return value


class RegisterRequest(BaseModel):
    name: str
    phone_number: str
    email: EmailStr | None = None
    password: str
    age: int | None = None
    sex: Sex | None = None
    location: str | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name must not be empty")
        return value

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, value: str) -> str:
        value = value.strip()
        if len(value) < PHONE_MIN_LENGTH:
            raise ValueError(f"Phone number must be at least {PHONE_MIN_LENGTH} characters long")
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
        return _check_password_ceiling(value)


class LoginRequest(BaseModel):
    phone_number: str
    password: str

    model_config = ConfigDict(extra="forbid")

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, value: str) -> str:
        # Same normalisation as registration, so the stored handle matches.
        return value.strip()

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _check_password_ceiling(value)


class UserResponse(BaseModel):
    id: UUID
    name: str
    phone_number: str
    email: EmailStr | None = None
    role: UserRole
    is_active: bool
    age: int | None = None
    sex: Sex | None = None
    location: str | None = None
    avatar_img: str | None = None
    joined_date: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UserActiveUpdate(BaseModel):
    is_active: bool
