"""
Field enrichment — derived naming forms and capability flags per field.

Everything here is a pure function of the field descriptor.
"""

from __future__ import annotations

import re

from viewforge.core.models.view import EnrichedField, FieldDescriptor, ViewConfiguration

SORTABLE_TYPES = frozenset({"string", "number", "date", "enum"})
FILTERABLE_TYPES = frozenset({"string", "enum", "boolean"})

# Field type → TypeScript type for generated component props.
_TS_TYPES: dict[str, str] = {
    "string": "string",
    "uuid": "string",
    "number": "number",
    "boolean": "boolean",
    "date": "string",  # ISO date string
    "datetime": "string",
    "enum": "string",
    "email": "string",
    "phone": "string",
    "currency": "number",
    "percentage": "number",
}

_SEPARATOR = re.compile(r"[-_\s]+(.)?")


def is_sortable(field_type: str) -> bool:
    return field_type in SORTABLE_TYPES


def is_filterable(field_type: str) -> bool:
    return field_type in FILTERABLE_TYPES


def map_to_typescript(field_type: str) -> str:
    """TypeScript type for a field type; unknown types map to ``string``."""
    return _TS_TYPES.get(field_type, "string")


def to_camel_case(text: str) -> str:
    """``work-order_number`` → ``workOrderNumber``."""
    joined = _SEPARATOR.sub(lambda m: (m.group(1) or "").upper(), text)
    return joined[:1].lower() + joined[1:]


def to_pascal_case(text: str) -> str:
    """``service location`` → ``ServiceLocation``."""
    joined = _SEPARATOR.sub(lambda m: (m.group(1) or "").upper(), text)
    return joined[:1].upper() + joined[1:]


def to_kebab_case(text: str) -> str:
    """``ServiceLocation`` → ``service-location``."""
    spaced = re.sub(r"(?<=[a-z0-9])([A-Z])", r"-\1", text.strip())
    return re.sub(r"[_\s]+", "-", spaced).lower()


def enrich_field(field: FieldDescriptor) -> EnrichedField:
    return EnrichedField(
        **field.model_dump(),
        field_camel=to_camel_case(field.field),
        ts_type=map_to_typescript(field.type),
        is_sortable=is_sortable(field.type),
        is_filterable=is_filterable(field.type),
    )


def enrich_fields(fields: list[FieldDescriptor]) -> list[EnrichedField]:
    return [enrich_field(f) for f in fields]


def component_name(config: ViewConfiguration) -> str:
    """Name of the component a view would be generated as.

    Table layouts are lists of records (``AccountList``); the others are
    named after the layout (``AccountDetail``, ``AccountForm``).
    """
    entity = to_pascal_case(config.entity.primary)
    layout = config.layout.type
    return entity + ("List" if layout == "table" else to_pascal_case(layout))
