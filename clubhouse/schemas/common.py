"""Shared schema bases."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

_UNSTRIPPED_FIELDS = frozenset({"password", "confirm_password"})


class CamelModel(BaseModel):
    """Model exchanged as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CamelInput(CamelModel):
    """Request payload whose blank strings count as absent."""

    @field_validator("*", mode="before")
    @classmethod
    def _normalize_text(cls, value: object, info: ValidationInfo) -> object:
        if not isinstance(value, str):
            return value
        if info.field_name in _UNSTRIPPED_FIELDS:
            return value or None
        normalized = value.strip()
        return normalized or None


class CamelOutput(CamelModel):
    """Response payload built from table rows."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
