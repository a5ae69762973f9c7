"""API router that aggregates all routes."""

from fastapi import APIRouter

from lifelog.api.routes import health, logs, preview, search, stats, tags, timeline

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(logs.router)
api_router.include_router(timeline.router)
api_router.include_router(tags.router)
api_router.include_router(search.router)
api_router.include_router(stats.router)
api_router.include_router(preview.router)
