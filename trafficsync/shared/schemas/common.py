"""Base schema and shared value objects."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schema that reads snake_case or camelCase and writes camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Coordinates(CamelModel):
    """Geographic position of a device."""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class MessageResponse(BaseModel):
    """Plain message body."""
    message: str


def dump_record(model: BaseModel) -> dict:
    """JSON-safe camelCase dict, the canonical wire form of a record."""
    return model.model_dump(mode="json", by_alias=True)


def sparse_fields(model: BaseModel) -> dict:
    """
    Fields the caller actually supplied, with nulls dropped.

    Top-level keys stay snake_case (column names); nested models are dumped
    to their camelCase JSON form, which is how JSON columns store them.
    """
    fields = {}
    for name in model.model_fields_set:
        value = getattr(model, name)
        if value is None:
            continue
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json", by_alias=True)
        fields[name] = value
    return fields


__all__ = [
    "CamelModel",
    "Coordinates",
    "MessageResponse",
    "dump_record",
    "sparse_fields",
]
