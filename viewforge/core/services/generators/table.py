"""
Table layout — one header cell per field, one row per record.
"""

from __future__ import annotations

import html
from typing import Any

from viewforge.core.models.view import ViewConfiguration
from viewforge.core.services.field_enrichment import is_sortable
from viewforge.core.services.generators.base import LayoutGenerator


class TableGenerator(LayoutGenerator):
    layout = "table"
    default_boolean_style = "glyph"

    def render(self, config: ViewConfiguration, rows: list[dict[str, Any]]) -> list[str]:
        primary = html.escape(config.entity.primary)
        sorting = config.layout.features.sorting

        lines = self.open_container(config)
        lines.append("  <table>")
        lines.append(f"    <caption>{primary} Table View</caption>")
        lines.append("    <thead>")
        lines.append("      <tr>")
        for field in config.fields:
            sortable = ' data-sortable="true"' if sorting and is_sortable(field.type) else ""
            lines.append(
                f"        <th {self.field_attrs(field)}{sortable}>{html.escape(field.label)}</th>"
            )
        lines.append("      </tr>")
        lines.append("    </thead>")
        lines.append("    <tbody>")
        for index, row in enumerate(rows, start=1):
            lines.append(f'      <tr data-row="{index}">')
            for field in config.fields:
                lines.append(f"        <td>{self.format_value(row.get(field.display_path))}</td>")
            lines.append("      </tr>")
        lines.append("    </tbody>")
        lines.append("  </table>")
        lines.append("</div>")
        return lines
