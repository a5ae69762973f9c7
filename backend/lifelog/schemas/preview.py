"""Pydantic schemas for link preview API."""

from __future__ import annotations

from lifelog.schemas.common import CamelModel


class PreviewResponse(CamelModel):
    """Metadata scraped from a linked page."""

    url: str
    hostname: str
    title: str | None = None
    description: str | None = None
    image: str | None = None
    site_name: str | None = None
