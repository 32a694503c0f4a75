import uuid
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, EmailStr, Field


class RegisterUser(BaseModel):
    full_name: Annotated[str, Field(min_length=1, max_length=255)]
    phone_number: Annotated[str, Field(min_length=6, max_length=32)]
    email: EmailStr
    parent_phone_number: Annotated[str, Field(min_length=6, max_length=32)]
    curriculum: str | None = None
    curriculum_type: str | None = None
    level: str | None = None
    language: str | None = None
    grade: str | None = None
    password: Annotated[str, Field(min_length=6, max_length=72)]
    confirm_password: str
    recaptcha_token: str | None = None


class LoginUser(BaseModel):
    phone_number: str
    password: str


class UserOut(BaseModel):
    id: uuid.UUID
    full_name: str
    phone_number: str
    email: str
    role: str
    parent_phone_number: str | None = None
    curriculum: str | None = None
    curriculum_type: str | None = None
    level: str | None = None
    language: str | None = None
    grade: str | None = None
    balance: Decimal
    points: int
    is_suspended: bool
    image_url: str | None = None
    last_login_at: datetime | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class CreateStaffAccount(BaseModel):
    full_name: Annotated[str, Field(min_length=1, max_length=255)]
    phone_number: Annotated[str, Field(min_length=6, max_length=32)]
    email: EmailStr
    password: Annotated[str, Field(min_length=6, max_length=72)]
    role: Literal["TEACHER", "SUPERVISOR"] = "TEACHER"
