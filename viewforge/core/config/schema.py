"""
View configuration schema check.

Reports every structural problem in one pass so an author can fix a
definition in a single edit, rather than failing on the first missing key.
"""

from __future__ import annotations

from typing import Any

from viewforge.core.models.view import LAYOUT_TYPES, SCOPE_LEVELS


_FIELD_KEYS = (
    ("entity", "entity"),
    ("field", "field name"),
    ("label", "label"),
    ("type", "type"),
)
# label and type have defaults; entity and field do not
_PARSE_FIELD_KEYS = _FIELD_KEYS[:2]


class ConfigurationError(Exception):
    """A view configuration is structurally incomplete.

    Attributes:
        violations: Every problem found, in document order.
    """

    def __init__(self, violations: list[str], source: str = ""):
        self.violations = list(violations)
        self.source = source
        where = f" in {source}" if source else ""
        listing = "; ".join(self.violations)
        super().__init__(f"Invalid view configuration{where}: {listing}")


def validate_view_config(config: Any) -> list[str]:
    """Check a raw view definition.

    Returns:
        A list of violations; empty when the configuration is complete.
    """
    if not isinstance(config, dict):
        return [f"Configuration must be a mapping, got {type(config).__name__}"]

    errors: list[str] = []

    if not config.get("version"):
        errors.append("Missing version field")

    hierarchy = config.get("hierarchy")
    if not isinstance(hierarchy, dict):
        errors.append("Missing hierarchy field")
    else:
        if not hierarchy.get("application"):
            errors.append("Missing hierarchy.application")
        if not hierarchy.get("module"):
            errors.append("Missing hierarchy.module")

    scope = config.get("scope")
    if not isinstance(scope, dict):
        errors.append("Missing scope field")
    elif not scope.get("level"):
        errors.append("Missing scope.level")
    elif scope["level"] not in SCOPE_LEVELS:
        errors.append(f"Invalid scope level: {scope['level']}")

    entity = config.get("entity")
    if not isinstance(entity, dict):
        errors.append("Missing entity field")
    elif not entity.get("primary"):
        errors.append("Missing entity.primary")

    errors.extend(_field_errors(config.get("fields")))

    layout = config.get("layout")
    if not isinstance(layout, dict):
        errors.append("Missing layout field")
    elif not layout.get("type"):
        errors.append("Missing layout.type")
    elif layout["type"] not in LAYOUT_TYPES:
        errors.append(f"Invalid layout type: {layout['type']}")
    if isinstance(layout, dict) and layout.get("features") and not isinstance(layout["features"], dict):
        errors.append("layout.features must be a mapping")

    return errors


def required_violations(config: Any) -> list[str]:
    """The subset of violations that make a configuration unparseable.

    Everything else has a default; these do not.
    """
    if not isinstance(config, dict):
        return [f"Configuration must be a mapping, got {type(config).__name__}"]

    errors: list[str] = []
    entity = config.get("entity")
    if not isinstance(entity, dict) or not entity.get("primary"):
        errors.append("Missing entity.primary")

    errors.extend(_field_errors(config.get("fields"), _PARSE_FIELD_KEYS))

    for section in ("hierarchy", "scope", "layout"):
        if config.get(section) and not isinstance(config[section], dict):
            errors.append(f"{section} must be a mapping")

    layout = config.get("layout")
    if isinstance(layout, dict):
        if layout.get("type") and layout["type"] not in LAYOUT_TYPES:
            errors.append(f"Invalid layout type: {layout['type']}")
        if layout.get("features") and not isinstance(layout["features"], dict):
            errors.append("layout.features must be a mapping")
    return errors


def _field_errors(fields: Any, keys: tuple = _FIELD_KEYS) -> list[str]:
    if not isinstance(fields, list):
        return ["Missing or invalid fields array"]
    if not fields:
        return ["No fields specified"]

    errors: list[str] = []
    for index, field in enumerate(fields):
        if not isinstance(field, dict):
            errors.append(f"Field {index}: not a mapping")
            continue
        for key, label in keys:
            if not field.get(key):
                errors.append(f"Field {index}: missing {label}")
    return errors
