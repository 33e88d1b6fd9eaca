# app/schemas/admin.py
import re
from pydantic import EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from app.schemas.base import BaseSchema

STRONG_PASSWORD = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])")


def check_strong_password(value: str) -> str:
    if not STRONG_PASSWORD.match(value):
        raise ValueError(
            "Password must be at least 8 characters with uppercase, lowercase, number, and special character"
        )
    return value


class AdminLogin(BaseSchema):
    email: EmailStr
    password: str = Field(..., min_length=6)


class AdminRegister(BaseSchema):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator("password")
    @classmethod
    def strong_password(cls, value):
        return check_strong_password(value)


class PasswordChange(BaseSchema):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)

    @field_validator("new_password")
    @classmethod
    def strong_password(cls, value):
        return check_strong_password(value)


class RefreshTokenRequest(BaseSchema):
    refresh_token: str = Field(..., min_length=1)


class PasswordResetInitiate(BaseSchema):
    email: EmailStr


class PasswordResetComplete(BaseSchema):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)


class Admin(BaseSchema):
    id: int
    username: str
    email: EmailStr
    role: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
