# app/schemas/artwork.py
from pydantic import Field, field_validator, model_validator
from typing import Optional, List, Literal
from datetime import datetime

from app.schemas.base import BaseSchema, TimestampMixin, reject_explicit_nulls

ArtworkStatus = Literal["AVAILABLE", "SOLD", "RESERVED"]


class ArtworkImage(BaseSchema):
    id: int
    artwork_id: Optional[int] = None
    filename: str
    original_name: Optional[str] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None
    url: str
    is_primary: bool
    created_at: Optional[datetime] = None


class ArtworkBase(BaseSchema):
    original_price: Optional[float] = Field(None, ge=0)
    medium: Optional[str] = Field(None, max_length=255)
    dimensions: Optional[str] = Field(None, max_length=255)
    year: Optional[int] = Field(None, ge=0, le=9999)
    is_featured: Optional[bool] = None
    image_url: Optional[str] = None


class ArtworkCreate(ArtworkBase):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., max_length=1000)
    price: float = Field(..., ge=0)
    category_id: int = Field(..., ge=1)
    status: ArtworkStatus = "AVAILABLE"

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class ArtworkUpdate(ArtworkBase):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    price: Optional[float] = Field(None, ge=0)
    category_id: Optional[int] = Field(None, ge=1)
    status: Optional[ArtworkStatus] = None
    is_active: Optional[bool] = None

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def check_nulls(self):
        reject_explicit_nulls(self, ("name", "price", "category_id", "status", "is_active", "is_featured"))
        return self


class Artwork(TimestampMixin, BaseSchema):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    original_price: Optional[float] = None
    medium: Optional[str] = None
    dimensions: Optional[str] = None
    year: Optional[int] = None
    status: str
    is_active: bool
    is_featured: bool
    view_count: int
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    category_color: Optional[str] = None
    primary_image: Optional[str] = None
    images: List[ArtworkImage] = []


class Pagination(BaseSchema):
    total: int
    limit: int
    offset: int
    has_more: bool
    page: int
    total_pages: int
