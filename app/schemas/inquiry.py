# app/schemas/inquiry.py
from pydantic import EmailStr, Field, model_validator
from typing import Optional, Literal

from app.schemas.base import BaseSchema, TimestampMixin, reject_explicit_nulls

InquiryStatus = Literal["NEW", "READ", "REPLIED", "CLOSED"]


class InquiryCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    subject: Optional[str] = Field(None, max_length=500)
    message: str = Field(..., min_length=1, max_length=5000)
    artwork_id: Optional[int] = Field(None, ge=1)


class InquiryUpdate(BaseSchema):
    status: Optional[InquiryStatus] = None
    admin_reply: Optional[str] = Field(None, max_length=5000)

    @model_validator(mode="after")
    def check_nulls(self):
        reject_explicit_nulls(self, ("status",))
        return self


class Inquiry(TimestampMixin, BaseSchema):
    id: int
    name: str
    email: str
    subject: Optional[str] = None
    message: str
    status: str
    artwork_id: Optional[int] = None
    admin_reply: Optional[str] = None
