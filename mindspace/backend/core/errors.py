# mindspace/backend/core/errors.py
from __future__ import annotations

from typing import Any, List, Optional


class AppError(Exception):
    """
    Base class for failures the API reports to clients.

    Every subclass maps to one HTTP status and renders as
    ``{"error": message}`` (plus ``details`` for validation failures).
    """

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[List[Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_body(self) -> dict:
        body: dict = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation failed"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Unauthorized"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"


class Internal(AppError):
    status_code = 500
    default_message = "Internal server error"


def field_error(field: str, message: str) -> dict:
    return {"field": field, "message": message}
