# app/schemas/user.py
from pydantic import EmailStr, Field
from typing import Optional
from datetime import date, datetime

from app.schemas.base import BaseSchema, TimestampMixin


class UserRegister(BaseSchema):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    date_of_birth: Optional[date] = None


class UserLogin(BaseSchema):
    email: EmailStr
    password: str = Field(..., min_length=1)


class User(TimestampMixin, BaseSchema):
    id: int
    email: EmailStr
    first_name: str
    last_name: str
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    is_active: bool
    is_email_verified: bool
    last_login: Optional[datetime] = None
