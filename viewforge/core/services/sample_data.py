"""
Sample data — deterministic preview rows for generated views.

Values are looked up, in order, by ``entity.field`` (entity camel-cased),
by well-known field-name fragments, then by field type. Anything else
gets ``"<label> <n>"``. Row ``n`` always yields the same value.
"""

from __future__ import annotations

from typing import Any

from viewforge.core.models.view import FieldDescriptor
from viewforge.core.services.field_enrichment import to_camel_case

_ACCOUNT_NAMES = [
    "Acme Corporation",
    "Global Industries Inc",
    "TechStart Solutions",
    "Regional Services LLC",
    "Metro Enterprises",
]
_ACCOUNT_TYPES = ["Commercial", "Residential", "Commercial", "Industrial", "Residential"]
_LOCATION_NAMES = ["Main Office", "Warehouse A", "Branch Office", "Production Facility", "Regional HQ"]

_BY_FIELD: dict[str, list[Any]] = {
    # Accounts
    "account.name": _ACCOUNT_NAMES,
    "account.accountName": _ACCOUNT_NAMES,
    "account.accountNumber": ["ACC-001", "ACC-002", "ACC-003", "ACC-004", "ACC-005"],
    "account.status": ["Active", "Active", "Pending", "Active", "On Hold"],
    "account.type": _ACCOUNT_TYPES,
    "account.accountType": _ACCOUNT_TYPES,
    # Service locations
    "serviceLocation.name": _LOCATION_NAMES,
    "serviceLocation.locationName": _LOCATION_NAMES,
    "serviceLocation.address": [
        "123 Main St",
        "456 Industrial Blvd",
        "789 Commerce Way",
        "321 Factory Rd",
        "654 Business Park",
    ],
    "serviceLocation.city": ["Springfield", "Riverside", "Lakewood", "Mountain View", "Centerville"],
    "serviceLocation.state": ["CA", "TX", "NY", "FL", "IL"],
    "serviceLocation.postalCode": ["90210", "75001", "10001", "33101", "60601"],
    "serviceLocation.locationType": ["Office", "Warehouse", "Retail", "Manufacturing", "Distribution"],
    # Work orders
    "workOrder.workOrderNumber": ["WO-2024-001", "WO-2024-002", "WO-2024-003", "WO-2024-004", "WO-2024-005"],
    "workOrder.description": [
        "HVAC Maintenance",
        "Electrical Repair",
        "Plumbing Service",
        "Equipment Installation",
        "Safety Inspection",
    ],
    "workOrder.status": ["Scheduled", "In Progress", "Completed", "Scheduled", "On Hold"],
    "workOrder.priority": ["High", "Medium", "Low", "High", "Medium"],
    "workOrder.scheduledDate": ["2024-01-15", "2024-01-16", "2024-01-17", "2024-01-18", "2024-01-19"],
}

_BY_TYPE: dict[str, list[Any]] = {
    "string": ["Sample Text A", "Sample Text B", "Sample Text C", "Sample Text D", "Sample Text E"],
    "uuid": [f"550e8400-e29b-41d4-a716-44665544000{n}" for n in range(1, 6)],
    "email": [
        "contact@example.com",
        "admin@company.org",
        "support@service.net",
        "info@business.com",
        "hello@enterprise.io",
    ],
    "phone": ["(555) 123-4567", "(555) 234-5678", "(555) 345-6789", "(555) 456-7890", "(555) 567-8901"],
    "date": ["2024-01-15", "2024-01-20", "2024-02-01", "2024-02-15", "2024-03-01"],
    "datetime": [
        "2024-01-15T09:00:00",
        "2024-01-15T14:30:00",
        "2024-01-16T10:15:00",
        "2024-01-16T16:45:00",
        "2024-01-17T11:00:00",
    ],
    "boolean": [True, False, True, True, False],
    "number": [100, 250, 175, 500, 325],
    "currency": ["$1,234.56", "$2,345.67", "$3,456.78", "$4,567.89", "$5,678.90"],
    "percentage": ["75%", "80%", "92%", "65%", "88%"],
}

# Field-name fragments checked before falling back to the type pool.
_NAME_HINTS = ("email", "phone", "date")


def _pick(pool: list[Any], row_index: int) -> Any:
    return pool[row_index % len(pool)]


def generate_field_value(field: FieldDescriptor, row_index: int) -> Any:
    """Sample value for one field in row ``row_index``."""
    key = f"{to_camel_case(field.entity)}.{field.field}"
    if key in _BY_FIELD:
        return _pick(_BY_FIELD[key], row_index)

    lowered = field.field.lower()
    for hint in _NAME_HINTS:
        if hint in lowered:
            return _pick(_BY_TYPE[hint], row_index)

    if field.type in _BY_TYPE:
        return _pick(_BY_TYPE[field.type], row_index)

    return f"{field.label} {row_index + 1}"


def generate_sample_rows(fields: list[FieldDescriptor], count: int = 5) -> list[dict[str, Any]]:
    """``count`` rows, each keyed by field ``display_path``."""
    return [
        {f.display_path: generate_field_value(f, i) for f in fields}
        for i in range(count)
    ]
