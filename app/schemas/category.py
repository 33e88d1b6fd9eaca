# app/schemas/category.py
from pydantic import Field, field_validator, model_validator
from typing import Optional, List

from app.schemas.base import BaseSchema, TimestampMixin, reject_explicit_nulls
from app.schemas.artwork import Artwork

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class CategoryBase(BaseSchema):
    @field_validator("name", "description", mode="before", check_fields=False)
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class CategoryCreate(CategoryBase):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    color: str = Field("#6366f1", pattern=HEX_COLOR)


class CategoryUpdate(CategoryBase):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    color: Optional[str] = Field(None, pattern=HEX_COLOR)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None

    @model_validator(mode="after")
    def check_nulls(self):
        reject_explicit_nulls(self, ("name", "color", "is_active", "sort_order"))
        return self


class Category(TimestampMixin, BaseSchema):
    id: int
    name: str
    description: Optional[str] = None
    color: str
    is_active: bool
    sort_order: int
    artwork_count: Optional[int] = None


class CategoryWithArtworks(Category):
    artworks: List[Artwork] = []
