"""
View configuration parser — raw definition in, canonical configuration out.

Fills every optional part of a view definition with its default so the
layout generators never have to. Parsing is idempotent: feeding a parsed
configuration back in yields an equal configuration.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from viewforge.core.config.schema import ConfigurationError, required_violations
from viewforge.core.models.view import Hierarchy, ViewConfiguration

logger = logging.getLogger(__name__)

_DEFAULT_VERSION = "1.0"
_DEFAULT_FEATURES = {"sorting": False, "pagination": False, "filtering": False}


def parse_configuration(
    config: dict[str, Any] | ViewConfiguration,
    *,
    source: str = "",
    log: logging.Logger | None = None,
) -> ViewConfiguration:
    """Normalize a view definition.

    Args:
        config: Raw definition (camelCase mapping) or an already parsed one.
        source: Where the definition came from, used in error messages.
        log: Logger for diagnostics (default: this module's logger).

    Returns:
        The canonical ViewConfiguration.

    Raises:
        ConfigurationError: If ``entity.primary`` or ``fields`` is missing,
            listing every such problem at once.
    """
    log = log or logger

    if isinstance(config, ViewConfiguration):
        config = config.to_raw()

    violations = required_violations(config)
    if violations:
        log.error("Cannot parse view configuration%s: %d problem(s)",
                  f" {source}" if source else "", len(violations))
        raise ConfigurationError(violations, source=source)

    hierarchy = _normalize_hierarchy(config.get("hierarchy") or {})
    scope = config.get("scope") or {}
    entity = config["entity"]
    layout = config.get("layout") or {}

    normalized = {
        "version": config.get("version") or _DEFAULT_VERSION,
        "hierarchy": hierarchy,
        "scope": {
            "level": scope.get("level") or "module",
            "path": scope.get("path") or Hierarchy.model_validate(hierarchy).path(),
        },
        "entity": {
            "primary": entity["primary"],
            "related": list(entity.get("related") or []),
        },
        "fields": [_normalize_field(f) for f in config["fields"]],
        "layout": {
            "type": layout.get("type") or "table",
            "features": {**_DEFAULT_FEATURES, **(layout.get("features") or {})},
        },
    }

    try:
        parsed = ViewConfiguration.model_validate(normalized)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        ]
        raise ConfigurationError(problems, source=source) from e

    log.debug(
        "Parsed %s view for %s (%d fields)",
        parsed.layout.type, parsed.entity.primary, len(parsed.fields),
    )
    return parsed


def _normalize_hierarchy(hierarchy: dict[str, Any]) -> dict[str, Any]:
    def node(value: Any, default: str | None) -> dict[str, Any] | None:
        if isinstance(value, str):
            return {"name": value}
        if isinstance(value, dict) and value.get("name"):
            return value
        return {"name": default} if default else None

    story = hierarchy.get("userStory") or hierarchy.get("user_story")
    if isinstance(story, str):
        story = {"code": story}

    return {
        "application": node(hierarchy.get("application"), "Unknown App"),
        "module": node(hierarchy.get("module"), "Unknown Module"),
        "subModule": node(hierarchy.get("subModule") or hierarchy.get("sub_module"), None),
        "userStory": story or None,
    }


def _normalize_field(field: dict[str, Any]) -> dict[str, Any]:
    return {
        "entity": field["entity"],
        "field": field["field"],
        "label": field.get("label") or field["field"],
        "type": field.get("type") or "string",
        "isRelated": bool(field.get("isRelated", field.get("is_related", False))),
    }
