"""
Shared helpers for the API blueprints.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

from flask import current_app, jsonify, request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from viewforge.core.datastore.errors import ValidationError, validation_details
from viewforge.core.datastore.store import DataStore
from viewforge.core.models.settings import Settings

RecordT = TypeVar("RecordT", bound=BaseModel)


def get_store() -> DataStore:
    return current_app.config["DATA_STORE"]


def get_settings() -> Settings:
    return current_app.config["VIEWFORGE_SETTINGS"]


def success(data: Any, metadata: dict[str, Any] | None = None, status: int = 200):  # type: ignore[no-untyped-def]
    body: dict[str, Any] = {"data": data}
    if metadata is not None:
        body["metadata"] = metadata
    return jsonify(body), status


def parse_body(schema: type[RecordT]) -> RecordT:
    """Validate the JSON request body against a record schema.

    Raises:
        ValidationError: With per-field details when the body is invalid.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Validation failed", {"body": ["Request body must be a JSON object"]})
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError("Validation failed", validation_details(e)) from e


@dataclass
class Page:
    page: int
    page_size: int
    sort_by: str
    descending: bool

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def metadata(self, total: int) -> dict[str, int]:
        return {
            "total": total,
            "page": self.page,
            "pageSize": self.page_size,
            "totalPages": (total + self.page_size - 1) // self.page_size,
        }


def _int_arg(name: str, default: int) -> int:
    try:
        return int(request.args.get(name, default))
    except (TypeError, ValueError):
        return default


def page_params(sortable: tuple[str, ...], default_sort: str = "created_at") -> Page:
    """Read ``page``, ``pageSize``, ``sortBy`` and ``sortOrder``.

    Page numbers and sizes are clamped into range. An unknown sort
    column is a validation error.
    """
    api = get_settings().api
    page = max(1, _int_arg("page", 1))
    page_size = min(api.max_page_size, max(1, _int_arg("pageSize", api.page_size)))

    sort_by = request.args.get("sortBy") or default_sort
    if sort_by not in sortable:
        raise ValidationError(
            "Validation failed",
            {"sortBy": [f"Must be one of: {', '.join(sortable)}"]},
        )
    sort_order = (request.args.get("sortOrder") or "desc").lower()
    if sort_order not in ("asc", "desc"):
        raise ValidationError("Validation failed", {"sortOrder": ["Must be 'asc' or 'desc'"]})

    return Page(page=page, page_size=page_size, sort_by=sort_by, descending=sort_order == "desc")
