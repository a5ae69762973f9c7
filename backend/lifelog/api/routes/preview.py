"""Link preview API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from lifelog.schemas.preview import PreviewResponse
from lifelog.services.preview import PreviewService

router = APIRouter(prefix="/preview", tags=["preview"])

_preview_service: PreviewService | None = None


def get_preview_service() -> PreviewService:
    """Dependency returning the shared preview service."""
    global _preview_service
    if _preview_service is None:
        _preview_service = PreviewService()
    return _preview_service


async def close_preview_service() -> None:
    """Release the shared HTTP client."""
    global _preview_service
    if _preview_service is not None:
        await _preview_service.close()
        _preview_service = None


@router.get("", response_model=PreviewResponse, response_model_exclude_none=True)
async def get_preview(
    response: Response,
    url: str | None = Query(None, description="http(s) URL to preview"),
    service: PreviewService = Depends(get_preview_service),
) -> PreviewResponse:
    """Get title, description and image of a linked page."""
    preview = await service.fetch(url)
    response.headers["Cache-Control"] = "public, max-age=3600"
    return preview
