# app/schemas/base.py
from datetime import datetime
from typing import Any, Dict, Iterable, Optional
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python, readable from ORM rows"""
    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class TimestampMixin(BaseModel):
    """Timestamp fields for database models"""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def reject_explicit_nulls(model: BaseModel, fields: Iterable[str]) -> None:
    """
    Partial updates treat an omitted field as "leave unchanged" and an explicit
    null as "clear". Columns that cannot be cleared reject the null outright.
    """
    for field in fields:
        if field in model.model_fields_set and getattr(model, field) is None:
            raise ValueError(f"{to_camel(field)} cannot be null")
