"""
Generators — produce view markup from a parsed view configuration.

Each layout has a ``LayoutGenerator`` subclass; ``get_generator`` picks
the one for a layout type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from viewforge.core.models.settings import FormattingPolicy
from viewforge.core.services.generators.base import DEFAULT_ROW_COUNT, LayoutGenerator
from viewforge.core.services.generators.detail import DetailGenerator
from viewforge.core.services.generators.form import FormGenerator
from viewforge.core.services.generators.list_view import ListGenerator
from viewforge.core.services.generators.table import TableGenerator

if TYPE_CHECKING:
    from viewforge.core.services.business_rules import BusinessRulesParser

_GENERATORS: dict[str, type[LayoutGenerator]] = {
    "table": TableGenerator,
    "list": ListGenerator,
    "detail": DetailGenerator,
    "form": FormGenerator,
}


def supported_layouts() -> list[str]:
    """Layout types with a generator available."""
    return sorted(_GENERATORS.keys())


def get_generator(
    layout_type: str,
    *,
    policy: FormattingPolicy | None = None,
    row_count: int = DEFAULT_ROW_COUNT,
    rules: BusinessRulesParser | None = None,
) -> LayoutGenerator:
    """Instantiate the generator for a layout type.

    Raises:
        KeyError: If no generator handles ``layout_type``.
    """
    try:
        cls = _GENERATORS[layout_type]
    except KeyError:
        raise KeyError(
            f"No generator for layout '{layout_type}' "
            f"(supported: {', '.join(supported_layouts())})"
        ) from None

    if cls is FormGenerator:
        return FormGenerator(policy=policy, row_count=row_count, rules=rules)
    return cls(policy=policy, row_count=row_count)


__all__ = [
    "DetailGenerator",
    "FormGenerator",
    "LayoutGenerator",
    "ListGenerator",
    "TableGenerator",
    "get_generator",
    "supported_layouts",
]
