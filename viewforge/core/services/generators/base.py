"""
Layout generator contract.

A layout generator turns a parsed ViewConfiguration into markup for one
visual layout. Generators hold no state between calls: the same
configuration and rows always produce byte-identical output.
"""

from __future__ import annotations

import html
from abc import ABC, abstractmethod
from typing import Any

from viewforge.core.models.settings import FormattingPolicy
from viewforge.core.models.view import FieldDescriptor, ViewConfiguration
from viewforge.core.services.sample_data import generate_sample_rows

DEFAULT_ROW_COUNT = 5


class LayoutGenerator(ABC):
    """Base class for table, list, detail and form generators.

    To add a layout:
        1. Subclass LayoutGenerator
        2. Set ``layout`` and ``default_boolean_style``
        3. Implement ``render``
        4. Register it in ``generators.get_generator``
    """

    layout: str = ""
    default_boolean_style: str = "words"

    def __init__(
        self,
        policy: FormattingPolicy | None = None,
        row_count: int = DEFAULT_ROW_COUNT,
    ):
        self.policy = policy or FormattingPolicy(boolean_style=self.default_boolean_style)
        self.row_count = row_count

    def generate(
        self,
        config: ViewConfiguration,
        rows: list[dict[str, Any]] | None = None,
    ) -> str:
        """Render the view.

        Args:
            config: Parsed view configuration.
            rows: Data rows keyed by field display path. Defaults to
                ``row_count`` synthesized sample rows.
        """
        if rows is None:
            rows = generate_sample_rows(config.fields, self.row_count)
        return "\n".join(self.render(config, rows)) + "\n"

    @abstractmethod
    def render(self, config: ViewConfiguration, rows: list[dict[str, Any]]) -> list[str]:
        """Return the markup as a list of lines."""

    # ── Shared helpers ──────────────────────────────────────────

    def format_value(self, value: Any) -> str:
        """Display text for a value, HTML-escaped."""
        return html.escape(self.policy.render(value))

    @staticmethod
    def field_attrs(field: FieldDescriptor) -> str:
        return (
            f'data-entity="{html.escape(field.entity)}" '
            f'data-field="{html.escape(field.field)}" '
            f'data-type="{html.escape(field.type)}"'
        )

    @staticmethod
    def open_container(config: ViewConfiguration) -> list[str]:
        primary = html.escape(config.entity.primary)
        return [
            f"<!-- {config.layout.type.capitalize()} View: {primary} -->",
            f'<div class="view-container" data-entity="{primary}" '
            f'data-layout="{config.layout.type}">',
        ]
