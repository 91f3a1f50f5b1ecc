"""
Module builder — turns one BUSM entity into a per-phase module definition.

A module definition lists the entity's fields for a phase, the views to
generate, rule excerpts (required fields, enum values, state
transitions) and the navigation entries. ``module_to_view_config`` turns a
module into the view configuration the generators consume.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from viewforge.core.models.module import (
    MenuItem,
    ModuleDefinition,
    ModuleEntities,
    ModuleEntity,
    ModuleField,
    ModuleInfo,
    ModuleRules,
    ModuleView,
    Navigation,
)
from viewforge.core.models.template import GeneratedFile
from viewforge.core.persistence.gap_log import GapLog
from viewforge.core.persistence.output import write_generated_file
from viewforge.core.services.business_rules import BusinessRulesParser
from viewforge.core.services.busm_reader import BusmReader
from viewforge.core.services.field_enrichment import to_kebab_case

logger = logging.getLogger(__name__)

DEFAULT_VIEWS = ("list", "detail", "form")
_MENU_VIEWS = ("list", "dashboard")
_STATE_FIELDS = ("status", "state")

# BUSM field type → view field type
_VIEW_TYPES: dict[str, str] = {
    "string": "string",
    "text": "string",
    "uuid": "string",
    "integer": "number",
    "decimal": "number",
    "number": "number",
    "currency": "currency",
    "percentage": "percentage",
    "boolean": "boolean",
    "date": "date",
    "datetime": "datetime",
    "timestamp": "datetime",
    "enum": "enum",
    "email": "email",
    "phone": "phone",
}

# Layout in the view configuration for each module view type
_VIEW_LAYOUTS = {"list": "table", "table": "table", "detail": "detail", "form": "form"}


def _humanize(name: str) -> str:
    """``accountName`` → ``Account Name``."""
    return " ".join(w.capitalize() for w in to_kebab_case(name).split("-") if w)


def build_module(
    reader: BusmReader,
    entity: str,
    phase: int = 1,
    rules: BusinessRulesParser | None = None,
    views: list[str] | tuple[str, ...] | None = None,
    gap_log: GapLog | None = None,
) -> ModuleDefinition:
    """Build the module definition for ``entity`` at ``phase``.

    Raises:
        EntityNotFoundError: If the BUSM has no such entity.
    """
    busm_entity = reader.get_entity(entity)
    fields = reader.filter_fields_for_phase(entity, phase)
    slug = to_kebab_case(entity)

    referenced = sorted({
        other
        for rel in reader.get_relationships(entity)
        for other in (rel.source, rel.target)
        if other != entity
    })

    module_fields = [
        ModuleField(
            name=f.name,
            type=f.type,
            required=f.required,
            source=f"BUSM.{entity}.{f.name}",
            enum=f.enum,
            constraints=f.constraints or None,
            description=f.description or None,
        )
        for f in fields
    ]

    enums = {
        f.name: reader.get_enum_values(f.enum)
        for f in fields
        if f.enum and reader.get_enum_values(f.enum)
    }

    transitions: dict[str, list[str]] = {}
    if rules is not None and entity in rules.entities():
        transitions = rules.get_state_transitions(entity)
    if not transitions and any(f.name in _STATE_FIELDS and f.enum for f in fields):
        state_field = next(f.name for f in fields if f.name in _STATE_FIELDS and f.enum)
        if gap_log is not None:
            gap_log.record(
                "MISSING_STATE_TRANSITIONS",
                impact="MEDIUM",
                entity=entity,
                field=state_field,
                expected="State transitions for the state enum",
                assumption="All transitions allowed",
                suggested_fix=f"Add business_rules.{entity}.states",
            )

    view_specs = [
        ModuleView(
            type=view_type,
            name=f"{slug}-{view_type}",
            entity=entity,
            title=f"{_humanize(entity)} {view_type.capitalize()}",
        )
        for view_type in (views or DEFAULT_VIEWS)
    ]

    menu = [
        MenuItem(
            label=_humanize(v.name),
            view=v.name,
            icon="dashboard" if v.type == "dashboard" else "list",
        )
        for v in view_specs
        if v.type in _MENU_VIEWS
    ]

    definition = ModuleDefinition(
        module=ModuleInfo(
            id=f"{slug}-management",
            name=f"{_humanize(entity)} Management",
            description=busm_entity.description or f"Manage {entity} records",
            phase=phase,
            entities=ModuleEntities(owned=[entity], referenced=referenced),
        ),
        entity=ModuleEntity(name=entity, source=f"BUSM.{entity}", phase=phase, fields=module_fields),
        views=view_specs,
        business_rules=ModuleRules(
            validation={"required": [f.name for f in fields if f.required]},
            enums=enums,
            state_transitions=transitions,
        ),
        navigation=Navigation(main_menu=menu),
    )

    logger.info(
        "Built module %s: phase %d, %d field(s), %d view(s)",
        definition.module.id, phase, len(module_fields), len(view_specs),
    )
    return definition


def module_to_view_config(module: ModuleDefinition, layout: str = "table") -> dict[str, Any]:
    """Raw view configuration for one layout of a module.

    ``layout`` may be a layout type or a module view type (``list`` maps
    to ``table``). The result still goes through ``parse_configuration``.
    """
    layout_type = _VIEW_LAYOUTS.get(layout, layout)
    entity = module.entity.name
    listing = layout_type in ("table", "list")

    return {
        "version": module.module.version,
        "hierarchy": {
            "application": {"name": module.module.generated_from},
            "module": {"name": module.module.name, "description": module.module.description},
        },
        "scope": {"level": "module"},
        "entity": {"primary": entity, "related": list(module.module.entities.referenced)},
        "fields": [
            {
                "entity": entity,
                "field": f.name,
                "label": _humanize(f.name),
                "type": _VIEW_TYPES.get(f.type, "string"),
            }
            for f in module.entity.fields
        ],
        "layout": {
            "type": layout_type,
            "features": {"sorting": listing, "pagination": listing, "filtering": listing},
        },
    }


def module_filename(definition: ModuleDefinition) -> str:
    return f"{to_kebab_case(definition.entity.name)}-phase{definition.module.phase}.yaml"


def write_module(definition: ModuleDefinition, out_dir: Path) -> Path:
    """Write ``<entity>-phase<N>.yaml`` under ``out_dir``.

    Raises:
        OutputExistsError: If the file already exists.
    """
    content = yaml.safe_dump(
        definition.to_document(), sort_keys=False, allow_unicode=True, default_flow_style=False,
    )
    file = GeneratedFile(
        path=module_filename(definition),
        content=content,
        reason=f"{definition.entity.name} phase {definition.module.phase} module",
    )
    return write_generated_file(out_dir, file)
