"""Error type translated into the JSON error envelope by the app handlers."""

from __future__ import annotations

from typing import Any

VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_CURSOR = "INVALID_CURSOR"
ENTRY_NOT_FOUND = "ENTRY_NOT_FOUND"
REDIS_UNAVAILABLE = "REDIS_UNAVAILABLE"


class APIError(Exception):
    def __init__(
        self,
        code: str,
        message: str,
        status_code: int,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)
