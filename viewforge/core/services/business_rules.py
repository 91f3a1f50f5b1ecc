"""
Business rules parser — loads a YAML rule document and answers queries.

Only a structurally broken document is an error. Queries about entities,
fields or states the document does not mention return empty or default
answers and note a gap, so partially written rule sets still drive the
generators while they are being authored.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from viewforge.core.config.loader import ConfigError, load_document
from viewforge.core.models.rules import EntityRules, RuleDocument, StateConfig
from viewforge.core.persistence.gap_log import GapLog

logger = logging.getLogger(__name__)

_DEFAULT_MESSAGES = {
    "required": "{field} is required",
    "unique": "{field} must be unique",
    "pattern": "{field} format is invalid",
}


class RuleSchemaError(Exception):
    """The rule document itself is malformed.

    Attributes:
        errors: Every structural problem found.
    """

    def __init__(self, errors: list[str], source: str = ""):
        self.errors = list(errors)
        where = f" {source}" if source else ""
        super().__init__(f"Invalid rule document{where}: " + "; ".join(self.errors))


def validate_rule_document(data: Any) -> list[str]:
    """Structural check of a raw rule document.

    Returns:
        Every problem found; empty when the document is usable.
    """
    if not isinstance(data, dict):
        return ["Rule document must be a mapping"]

    errors: list[str] = []

    module = data.get("module")
    if not isinstance(module, dict) or not module.get("name"):
        errors.append("Missing module.name")

    rules = data.get("business_rules")
    if rules is None:
        errors.append("No business_rules section found")
        return errors
    if not isinstance(rules, dict) or not rules:
        errors.append("business_rules must be a non-empty mapping of entity blocks")
        return errors

    for entity, block in rules.items():
        if not isinstance(block, dict):
            errors.append(f"{entity} must be a mapping")
            continue
        errors.extend(_validation_errors(entity, block.get("validation")))
        errors.extend(_state_errors(entity, block.get("states")))
        logic = block.get("logic", block.get("businessLogic"))
        if logic is not None and not isinstance(logic, dict):
            errors.append(f"{entity}.logic must be a mapping of trigger to actions")

    return errors


def _validation_errors(entity: str, validation: Any) -> list[str]:
    if validation is None:
        return []
    if not isinstance(validation, dict):
        return [f"{entity}.validation must be a mapping"]

    errors = []
    for key in ("required", "unique"):
        if key in validation and not isinstance(validation[key], list):
            errors.append(f"{entity}.validation.{key} must be an array")

    patterns = validation.get("patterns")
    if patterns is not None:
        if not isinstance(patterns, dict):
            errors.append(f"{entity}.validation.patterns must be a mapping")
        else:
            for field, pattern in patterns.items():
                try:
                    re.compile(str(pattern))
                except re.error as e:
                    errors.append(f"{entity}.validation.patterns.{field} is not a valid regex: {e}")
    return errors


def _state_errors(entity: str, states: Any) -> list[str]:
    if states is None:
        return []
    if not isinstance(states, dict):
        return [f"{entity}.states must be a mapping"]

    errors = []
    for state, cfg in states.items():
        targets = _transitions_of(cfg)
        if targets is None:
            errors.append(f"{entity}.states.{state} must have transitions array")
            continue
        for target in targets:
            if not isinstance(target, str):
                errors.append(f"{entity}.states.{state} transition target must be a state name")
            elif target not in states:
                errors.append(f"{entity}.states.{state} transitions to undeclared state '{target}'")
    return errors


def _transitions_of(cfg: Any) -> list[Any] | None:
    if cfg is None:
        return []  # terminal state written as `Archived:`
    if isinstance(cfg, list):
        return cfg
    if isinstance(cfg, dict):
        targets = cfg.get("transitions") or []
        return targets if isinstance(targets, list) else None
    return None


def _normalize_entity(block: dict[str, Any]) -> dict[str, Any]:
    states = {}
    for state, cfg in (block.get("states") or {}).items():
        if isinstance(cfg, dict):
            states[state] = {**cfg, "transitions": cfg.get("transitions") or []}
        else:
            states[state] = {"transitions": cfg or []}
    return {
        "validation": block.get("validation") or {},
        "stateField": block.get("stateField", block.get("state_field", "status")),
        "states": states,
        "logic": block.get("logic", block.get("businessLogic")) or {},
        "enums": block.get("enums") or {},
    }


class BusinessRulesParser:
    """Query interface over one loaded rule document.

    Args:
        gap_log: Where to note rules the document does not define.
        log: Logger for diagnostics (default: this module's logger).
    """

    def __init__(self, gap_log: GapLog | None = None, log: logging.Logger | None = None):
        self.gap_log = gap_log
        self._log = log or logger
        self.document: RuleDocument | None = None

    # ── Loading ─────────────────────────────────────────────────

    def load_rules(self, path: Path) -> RuleDocument:
        """Load and validate a YAML rule document.

        Raises:
            ConfigError: If the file is missing or not valid YAML.
            RuleSchemaError: If the document structure is invalid.
        """
        data = load_document(path)
        return self.load_rules_data(data, source=str(path))

    def load_rules_text(self, text: str, source: str = "") -> RuleDocument:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in rule document: {e}") from e
        return self.load_rules_data(data, source=source)

    def load_rules_data(self, data: Any, source: str = "") -> RuleDocument:
        errors = validate_rule_document(data)
        if errors:
            self._log.error("Rule document%s has %d structural error(s)",
                            f" {source}" if source else "", len(errors))
            raise RuleSchemaError(errors, source=source)

        try:
            self.document = RuleDocument.model_validate({
                "module": data["module"],
                "business_rules": {
                    entity: _normalize_entity(block)
                    for entity, block in data["business_rules"].items()
                },
            })
        except PydanticValidationError as e:
            problems = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            ]
            raise RuleSchemaError(problems, source=source) from e
        self._log.info(
            "Loaded business rules for module '%s' (%d entities)",
            self.document.module.id or self.document.module.name,
            len(self.document.business_rules),
        )
        return self.document

    # ── Entity lookups ──────────────────────────────────────────

    def entities(self) -> list[str]:
        if self.document is None:
            return []
        return list(self.document.business_rules)

    def _entity(self, entity: str) -> EntityRules | None:
        if self.document is None:
            return None
        return self.document.business_rules.get(entity)

    def get_validation_rules(self, entity: str) -> dict[str, Any]:
        """Validation block for an entity; ``{}`` (and a gap) if undefined."""
        rules = self._entity(entity)
        if rules is None:
            self._gap(
                "MISSING_RULES",
                impact="MEDIUM",
                entity=entity,
                expected="Business rules definition",
                assumption="No validation rules",
                suggested_fix=f"Add a business_rules.{entity} block",
            )
            return {}
        return rules.validation.model_dump()

    def get_required_fields(self, entity: str) -> list[str]:
        return list(self.get_validation_rules(entity).get("required", []))

    def get_unique_fields(self, entity: str) -> list[str]:
        return list(self.get_validation_rules(entity).get("unique", []))

    def get_field_patterns(self, entity: str) -> dict[str, str]:
        return dict(self.get_validation_rules(entity).get("patterns", {}))

    def is_field_required(self, entity: str, field: str) -> bool:
        return field in self.get_required_fields(entity)

    def is_field_unique(self, entity: str, field: str) -> bool:
        return field in self.get_unique_fields(entity)

    # ── States ──────────────────────────────────────────────────

    def get_state_field(self, entity: str) -> str:
        rules = self._entity(entity)
        return rules.state_field if rules else "status"

    def get_state_transitions(self, entity: str) -> dict[str, list[str]]:
        """``{state: [targets]}`` for an entity; ``{}`` if undefined."""
        rules = self._entity(entity)
        return rules.transition_table() if rules else {}

    def get_allowed_transitions(self, entity: str, state: str) -> list[str]:
        """States reachable from ``state``.

        Terminal states return ``[]``. Unknown entities or states also
        return ``[]`` and note a gap.
        """
        table = self.get_state_transitions(entity)
        if state not in table:
            self._gap(
                "MISSING_STATE",
                impact="LOW",
                entity=entity,
                state=state,
                expected="State transition definition",
                assumption="No transitions allowed",
            )
            return []
        return list(table[state])

    def get_state_display(self, entity: str, state: str) -> dict[str, str]:
        rules = self._entity(entity)
        cfg = rules.states.get(state) if rules else None
        if cfg is None:
            cfg = StateConfig()
        return {"color": cfg.color, "icon": cfg.icon, "label": cfg.label or state}

    # ── Logic, enums, messages ──────────────────────────────────

    def get_business_logic(self, entity: str, trigger: str) -> list[str]:
        """Actions to run for a trigger (``onCreate``, ``onStatusChange`` ...)."""
        rules = self._entity(entity)
        if rules is None:
            return []
        return list(rules.logic.get(trigger, []))

    def get_enum_values(self, entity: str, field: str) -> list[str]:
        """Declared values for an enum field.

        Falls back to the declared states when ``field`` is the entity's
        state field and no explicit enum is given.
        """
        rules = self._entity(entity)
        if rules is None:
            return []
        if field in rules.enums:
            return list(rules.enums[field])
        if field == rules.state_field and rules.states:
            return list(rules.states)
        return []

    def get_validation_message(self, entity: str, field: str, violation: str) -> str:
        """Message for a violation, custom if the document defines one."""
        messages = self.get_validation_rules(entity).get("messages", {})
        custom = messages.get(field, {}).get(violation)
        if custom:
            return custom
        template = _DEFAULT_MESSAGES.get(violation, "{field} validation failed")
        return template.format(field=field)

    def check_field_value(self, entity: str, field: str, value: Any) -> list[str]:
        """Messages for every rule ``value`` breaks; empty when it passes."""
        problems = []
        if value in (None, "") and self.is_field_required(entity, field):
            problems.append(self.get_validation_message(entity, field, "required"))
        pattern = self.get_field_patterns(entity).get(field)
        if pattern and value not in (None, "") and not re.search(pattern, str(value)):
            problems.append(self.get_validation_message(entity, field, "pattern"))
        return problems

    # ── Summaries ───────────────────────────────────────────────

    def get_entity_rules(self, entity: str) -> dict[str, Any] | None:
        rules = self._entity(entity)
        if rules is None:
            return None
        validation = rules.validation
        return {
            "validation": validation.model_dump(),
            "states": rules.transition_table(),
            "logic": dict(rules.logic),
            "required": list(validation.required),
            "unique": list(validation.unique),
            "patterns": dict(validation.patterns),
        }

    def get_display_hints(self, entity: str) -> dict[str, Any]:
        """Which rule hints a concept view should show for an entity."""
        rules = self.get_entity_rules(entity)
        if rules is None:
            return {
                "showRequired": False,
                "showUnique": False,
                "showStates": False,
                "showValidation": False,
            }
        return {
            "showRequired": bool(rules["required"]),
            "showUnique": bool(rules["unique"]),
            "showStates": bool(rules["states"]),
            "showValidation": bool(rules["patterns"]),
            "requiredFields": rules["required"],
            "uniqueFields": rules["unique"],
            "states": rules["states"],
            "patterns": rules["patterns"],
        }

    def _gap(self, category: str, **details: Any) -> None:
        if self.gap_log is not None:
            self.gap_log.record(category, **details)
        else:
            self._log.debug("Unlogged gap %s: %s", category, details)
