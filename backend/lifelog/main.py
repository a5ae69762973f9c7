"""FastAPI application entry point."""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from lifelog.api.router import api_router
from lifelog.api.routes.preview import close_preview_service
from lifelog.core.config import settings
from lifelog.core.exceptions import LifelogError, ValidationError
from lifelog.core.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from lifelog.schemas.common import ErrorResponse
from lifelog.utils.ids import new_id

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.version,
        host=settings.host,
        port=settings.port,
    )
    yield
    await close_preview_service()
    logger.info("shutting_down_application")


def error_response(status_code: int, detail: str, code: str, field: str | None = None) -> JSONResponse:
    body = ErrorResponse(detail=detail, code=code, field=field)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def lifelog_error_handler(request: Request, exc: LifelogError) -> JSONResponse:
    """Render service errors as client faults."""
    field = exc.field if isinstance(exc, ValidationError) else None
    return error_response(exc.status_code, exc.message, exc.code, field)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render malformed bodies and query strings like other validation errors."""
    errors = exc.errors()
    field = None
    message = "Invalid request"
    if errors:
        first = errors[0]
        # loc is e.g. ("body", "tagIds") or ("query", "limit")
        names = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
        field = names[0] if names else None
        message = f"Invalid {field}: {first.get('msg')}" if field else str(first.get("msg"))
    return error_response(400, message, "VALIDATION_ERROR", field)


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and hide their details from the caller."""
    logger.error(
        "unhandled_error",
        method=request.method,
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return error_response(500, "Internal Server Error", "INTERNAL")


async def request_context_middleware(request: Request, call_next):
    """Tag log events with a request id and report the request's duration."""
    request_id = request.headers.get("x-request-id") or new_id()
    bind_request_context(request_id, request.method, request.url.path)
    start = time.perf_counter()
    try:
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.debug("request_completed", status=response.status_code, duration_ms=duration_ms)
        response.headers["x-request-id"] = request_id
        return response
    finally:
        clear_request_context()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Personal life-logging service: timestamped entries, tags, search and stats",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # Configure CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(request_context_middleware)

    app.add_exception_handler(LifelogError, lifelog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    # Storage failures are answered here; anything else reaches the
    # server error middleware through the Exception handler.
    app.add_exception_handler(SQLAlchemyError, internal_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    # Include API routes
    app.include_router(api_router)

    return app


# Create the application instance
app = create_app()


def main() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "lifelog.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
