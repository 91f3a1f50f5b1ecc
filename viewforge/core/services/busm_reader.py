"""
BUSM reader — entity, field, relationship and enum lookups over a BUSM.

The reader only answers questions about the model. It does not check
business-rule transitions against enum domains; ``rule_audit`` does that.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from viewforge.core.config.loader import ConfigError, load_document
from viewforge.core.models.busm import BusmEntity, BusmField, BusmModel, BusmRelationship

logger = logging.getLogger(__name__)


class EntityNotFoundError(LookupError):
    """The BUSM has no entity with the requested name."""

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"Entity '{entity}' not found in BUSM")


def effective_phase(field: BusmField) -> int:
    """Phase in which a field first appears.

    Required and essential fields always belong to phase 1. Otherwise the
    explicit ``phase`` wins, and fields without one land in phase 3 when
    marked ``complexity: advanced`` and phase 2 otherwise.
    """
    if field.required or field.essential:
        return 1
    if field.phase is not None:
        return field.phase
    return 3 if field.complexity == "advanced" else 2


class BusmReader:
    """Lookups over one loaded BUSM model."""

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger
        self.model: BusmModel | None = None

    def load_busm(self, path: Path) -> BusmModel:
        """Load a BUSM JSON file.

        Raises:
            ConfigError: If the file is missing, not ``.json`` or invalid.
        """
        if path.suffix.lower() != ".json":
            raise ConfigError(f"BUSM must be a JSON file: {path}")
        return self.load_busm_data(load_document(path), source=str(path))

    def load_busm_data(self, data: dict[str, Any], source: str = "") -> BusmModel:
        try:
            model = BusmModel.model_validate(data)
        except PydanticValidationError as e:
            where = f" {source}" if source else ""
            raise ConfigError(f"Invalid BUSM{where}: {e}") from e

        # Entity and field names come from their mapping keys
        for name, entity in model.entities.items():
            entity.name = entity.name or name
            for field_name, field in entity.fields.items():
                field.name = field_name

        self.model = model
        self._log.info(
            "Loaded BUSM %s: %d entities, %d relationships, %d enums",
            model.version, len(model.entities), len(model.relationships), len(model.enums),
        )
        return model

    def _require_model(self) -> BusmModel:
        if self.model is None:
            raise ConfigError("No BUSM loaded")
        return self.model

    # ── Entities ────────────────────────────────────────────────

    def entity_names(self) -> list[str]:
        return list(self._require_model().entities)

    def has_entity(self, entity: str) -> bool:
        return entity in self._require_model().entities

    def get_entity(self, entity: str) -> BusmEntity:
        """Raises EntityNotFoundError for unknown entities."""
        try:
            return self._require_model().entities[entity]
        except KeyError:
            raise EntityNotFoundError(entity) from None

    def get_primary_key(self, entity: str) -> str | None:
        ent = self.get_entity(entity)
        if ent.primary_key:
            return ent.primary_key
        for field in ent.fields.values():
            if field.primary_key:
                return field.name
        return None

    # ── Fields ──────────────────────────────────────────────────

    def get_fields(self, entity: str) -> list[BusmField]:
        return list(self.get_entity(entity).fields.values())

    def get_field(self, entity: str, name: str) -> BusmField | None:
        return self.get_entity(entity).fields.get(name)

    def get_required_fields(self, entity: str) -> list[str]:
        return [f.name for f in self.get_fields(entity) if f.required]

    def filter_fields_for_phase(self, entity: str, phase: int) -> list[BusmField]:
        """Fields whose effective phase is ``phase`` or earlier.

        A later phase always includes every field of an earlier one.
        """
        return [f for f in self.get_fields(entity) if effective_phase(f) <= phase]

    # ── Relationships and enums ─────────────────────────────────

    def get_relationships(self, entity: str) -> list[BusmRelationship]:
        """Relationships where ``entity`` is either end."""
        model = self._require_model()
        return [
            rel for rel in model.relationships.values()
            if entity in (rel.source, rel.target)
        ]

    def get_enum_values(self, enum_name: str) -> list[str]:
        """Values of a named enum, ``[]`` if the BUSM does not define it."""
        enum = self._require_model().enums.get(enum_name)
        return list(enum.values) if enum else []

    def get_field_enum(self, entity: str, field_name: str) -> list[str]:
        field = self.get_field(entity, field_name)
        if field is None or not field.enum:
            return []
        return self.get_enum_values(field.enum)

    # ── Reports ─────────────────────────────────────────────────

    def summary(self) -> dict[str, Any]:
        model = self._require_model()
        return {
            "version": model.version,
            "entityCount": len(model.entities),
            "relationshipCount": len(model.relationships),
            "enumCount": len(model.enums),
            "entities": {
                name: {
                    "fieldCount": len(ent.fields),
                    "requiredFields": [f.name for f in ent.fields.values() if f.required],
                    "primaryKey": self.get_primary_key(name),
                }
                for name, ent in model.entities.items()
            },
        }

    def validate_data(self, entity: str, data: dict[str, Any]) -> list[str]:
        """Check a record against the entity's field definitions.

        Reports missing required fields, unknown fields, values outside
        their enum, and ``maxLength``/``minLength``/``pattern``/``min``/
        ``max`` constraint violations.
        """
        fields = self.get_entity(entity).fields
        errors: list[str] = []

        for name, field in fields.items():
            if field.required and not field.system and data.get(name) in (None, ""):
                errors.append(f"{name} is required")

        for name, value in data.items():
            field = fields.get(name)
            if field is None:
                errors.append(f"Unknown field: {name}")
                continue
            if value is None:
                continue
            if field.enum:
                allowed = self.get_enum_values(field.enum)
                if allowed and value not in allowed:
                    errors.append(f"{name} must be one of: {', '.join(allowed)}")
            errors.extend(_constraint_errors(name, value, field.constraints))

        return errors


def _constraint_errors(name: str, value: Any, constraints: dict[str, Any]) -> list[str]:
    errors = []
    if isinstance(value, str):
        max_len = constraints.get("maxLength")
        if max_len is not None and len(value) > max_len:
            errors.append(f"{name} must be at most {max_len} characters")
        min_len = constraints.get("minLength")
        if min_len is not None and len(value) < min_len:
            errors.append(f"{name} must be at least {min_len} characters")
        pattern = constraints.get("pattern")
        if pattern and not re.search(pattern, value):
            errors.append(f"{name} format is invalid")
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        low = constraints.get("min")
        if low is not None and value < low:
            errors.append(f"{name} must be at least {low}")
        high = constraints.get("max")
        if high is not None and value > high:
            errors.append(f"{name} must be at most {high}")
    return errors
