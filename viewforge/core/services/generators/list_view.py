"""
List layout — one item per record, fields as a definition list.
"""

from __future__ import annotations

import html
from typing import Any

from viewforge.core.models.view import ViewConfiguration
from viewforge.core.services.generators.base import LayoutGenerator


class ListGenerator(LayoutGenerator):
    layout = "list"

    def render(self, config: ViewConfiguration, rows: list[dict[str, Any]]) -> list[str]:
        lines = self.open_container(config)
        lines.append(f"  <h2>{html.escape(config.entity.primary)} List View</h2>")
        lines.append('  <ul class="entity-list">')
        for index, row in enumerate(rows, start=1):
            lines.append(f'    <li class="entity-item" data-row="{index}">')
            lines.append("      <dl>")
            for field in config.fields:
                value = self.format_value(row.get(field.display_path))
                lines.append(f"        <dt>{html.escape(field.label)}</dt>")
                lines.append(f"        <dd {self.field_attrs(field)}>{value}</dd>")
            lines.append("      </dl>")
            lines.append("    </li>")
        lines.append("  </ul>")
        lines.append("</div>")
        return lines
