"""Shared base for request bodies that write to the database."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ValidationInfo, field_validator


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


class WriteRequest(BaseModel):
    """Body whose fields map onto table columns.

    Fields listed in ``non_nullable`` back NOT NULL columns: they may be
    omitted from a partial update, but an explicit null is rejected.
    """

    non_nullable: ClassVar[tuple[str, ...]] = ()

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.field_name in cls.non_nullable:
            raise ValueError("campo não pode ser nulo")
        return value

    def changes(self) -> dict[str, Any]:
        """Fields the client sent, with nested models dumped in full."""
        return {name: _plain(getattr(self, name)) for name in self.model_fields_set}
