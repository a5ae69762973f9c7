"""Pydantic schemas for tag API."""

from __future__ import annotations

from pydantic import Field

from lifelog.schemas.common import CamelModel


class TagCreate(CamelModel):
    """Request body for creating a tag."""

    name: str | None = None
    color: str | None = Field(default=None, max_length=32)


class TagResponse(CamelModel):
    """A tag."""

    model_config = {"from_attributes": True}

    id: str
    name: str
    color: str | None = None
    created_at: int
