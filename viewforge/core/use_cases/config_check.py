"""
Config check use case — validate a view configuration file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from viewforge.core.config.loader import ConfigError, load_document
from viewforge.core.config.schema import validate_view_config
from viewforge.core.services.generators import supported_layouts


@dataclass
class ConfigCheckResult:
    """Result of view configuration validation."""

    valid: bool = False
    config_path: Path | None = None
    entity: str | None = None
    layout: str | None = None
    field_count: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "entity": self.entity,
            "layout": self.layout,
            "field_count": self.field_count,
            "errors": self.errors,
            "warnings": self.warnings,
        }


def check_view_config(config_path: Path) -> ConfigCheckResult:
    """Validate a view configuration and report every violation at once."""
    result = ConfigCheckResult(config_path=config_path)

    try:
        raw = load_document(config_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    result.errors = validate_view_config(raw)

    entity = raw.get("entity")
    if isinstance(entity, dict):
        result.entity = entity.get("primary")
    layout = raw.get("layout")
    if isinstance(layout, dict):
        result.layout = layout.get("type")
    fields = raw.get("fields")
    if isinstance(fields, list):
        result.field_count = len(fields)
        labels = [f.get("label") for f in fields if isinstance(f, dict) and f.get("label")]
        dupes = sorted({label for label in labels if labels.count(label) > 1})
        if dupes:
            result.warnings.append(f"Duplicate field labels: {', '.join(dupes)}")

    if result.layout in supported_layouts() and layout.get("features") is None:
        result.warnings.append("No layout.features given; sorting, pagination and filtering are off")

    result.valid = not result.errors
    return result
