"""Error taxonomy shared by services and the HTTP layer."""

from __future__ import annotations


class LifelogError(Exception):
    """Base exception for client-visible failures."""

    status_code = 400

    def __init__(self, message: str, code: str = "LIFELOG_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(LifelogError):
    """Raised when a parameter or field is missing or malformed."""

    def __init__(self, message: str, field: str | None = None, code: str = "VALIDATION_ERROR"):
        self.field = field
        super().__init__(message, code)


class InvalidCursorError(ValidationError):
    """Raised when a pagination cursor cannot be decoded."""

    def __init__(self, message: str = "Invalid cursor"):
        super().__init__(message, field="cursor", code="INVALID_CURSOR")


class InvalidTimezoneError(LifelogError):
    """Raised when a timezone name cannot be resolved."""

    def __init__(self, message: str = "Invalid timezone"):
        super().__init__(message, "INVALID_TIMEZONE")


class NotFoundError(LifelogError):
    """Raised when a referenced entity does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: str | None = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found", "NOT_FOUND")


class ConflictError(LifelogError):
    """Raised when a unique field already holds the requested value."""

    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, "CONFLICT")


class PreviewFetchError(LifelogError):
    """Raised when a link preview cannot be fetched from upstream."""

    status_code = 502

    def __init__(self, message: str = "Failed to fetch preview"):
        super().__init__(message, "UPSTREAM_ERROR")
