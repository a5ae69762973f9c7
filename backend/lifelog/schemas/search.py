"""Pydantic schemas for search API."""

from __future__ import annotations

from lifelog.schemas.common import CamelModel
from lifelog.schemas.log import LogResponse


class SearchResponse(CamelModel):
    """Search results, newest first."""

    items: list[LogResponse]
