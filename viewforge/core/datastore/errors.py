"""
API errors — what a client sees when a request fails.

Store failures are translated to a fixed set of client-safe messages.
Backend detail goes to the log only.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from viewforge.core.datastore.store import (
    FOREIGN_KEY_VIOLATION,
    INVALID_TEXT_REPRESENTATION,
    NO_ROWS,
    NOT_NULL_VIOLATION,
    UNIQUE_VIOLATION,
    DataStoreError,
)

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(ApiError):
    """Bad request. ``details`` maps field names to messages."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", details: dict[str, list[str]] | None = None):
        super().__init__(message, details)


class NotFoundError(ApiError):
    status_code = 404

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")


class DatabaseError(ApiError):
    status_code = 500

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message)


# code → client message for 400 responses
_BAD_REQUEST_MESSAGES = {
    UNIQUE_VIOLATION: "This record already exists",
    FOREIGN_KEY_VIOLATION: "Related record not found",
    NOT_NULL_VIOLATION: "Required field is missing",
    INVALID_TEXT_REPRESENTATION: "Invalid data format",
}


def translate_store_error(error: DataStoreError, resource: str = "Resource") -> ApiError:
    """Map a store failure to the error a client is allowed to see."""
    logger.error("Data store error %s: %s (%s)", error.code, error, error.details)

    if error.code in _BAD_REQUEST_MESSAGES:
        return ValidationError(_BAD_REQUEST_MESSAGES[error.code])
    if error.code == NO_ROWS:
        return NotFoundError(resource)
    return DatabaseError()


def validation_details(error: PydanticValidationError) -> dict[str, list[str]]:
    """Group pydantic errors as ``{field: [messages]}``."""
    details: dict[str, list[str]] = {}
    for err in error.errors():
        key = ".".join(str(p) for p in err["loc"]) or "body"
        details.setdefault(key, []).append(err["msg"])
    return details
