"""Business logic services for Lifelog."""

from lifelog.services.cursor import Cursor
from lifelog.services.log import LogService
from lifelog.services.pagination import Page, clamp_limit
from lifelog.services.preview import PreviewService
from lifelog.services.search import SearchService
from lifelog.services.stats import StatsService
from lifelog.services.tag import TagService
from lifelog.services.time_window import TimeWindow

__all__ = [
    "Cursor",
    "LogService",
    "Page",
    "PreviewService",
    "SearchService",
    "StatsService",
    "TagService",
    "TimeWindow",
    "clamp_limit",
]
