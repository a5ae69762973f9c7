"""Pydantic schemas for stats API."""

from __future__ import annotations

from typing import Any

from pydantic import Field, SerializerFunctionWrapHandler, model_serializer

from lifelog.schemas.common import CamelModel


class TopTag(CamelModel):
    """A tag with its association count."""

    id: str
    name: str
    count: int


class MonthDay(CamelModel):
    """Number of entries on one local day."""

    date: str = Field(description="Local day as YYYY-MM-DD")
    count: int


class StatsResponse(CamelModel):
    """Sidebar statistics for one timezone."""

    today_count: int = Field(default=0, description="Entries in today's local window")
    week_count: int = Field(default=0, description="Entries in this week's local window")
    recent_urls: list[str] = Field(default_factory=list, description="Latest bookmark URLs")
    top_tags: list[TopTag] = Field(default_factory=list, description="Most used tags")
    month_days: list[MonthDay] | None = Field(
        default=None, description="Per-day counts; only present when month is requested"
    )

    @model_serializer(mode="wrap")
    def _omit_missing_month_days(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        if self.month_days is None:
            data.pop("monthDays", None)
            data.pop("month_days", None)
        return data
