"""Shared schema configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DeleteResponse(CamelModel):
    """Response after deleting an entity."""

    success: bool = True


class ErrorResponse(BaseModel):
    """Body of every client or server fault."""

    detail: str
    code: str
    field: str | None = None
