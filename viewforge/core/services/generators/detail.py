"""
Detail layout — a single record, fields grouped by owning entity.

Fields of the primary entity come first in their own fieldset; each
related entity gets a ``related-entity`` fieldset.
"""

from __future__ import annotations

import html
from typing import Any

from viewforge.core.models.view import ViewConfiguration
from viewforge.core.services.generators.base import LayoutGenerator


class DetailGenerator(LayoutGenerator):
    layout = "detail"

    def render(self, config: ViewConfiguration, rows: list[dict[str, Any]]) -> list[str]:
        record = rows[0] if rows else {}
        primary = config.entity.primary

        lines = self.open_container(config)
        lines.append(f"  <h2>{html.escape(primary)} Detail View</h2>")

        groups = config.fields_by_entity()
        for entity_name in sorted(groups, key=lambda name: name != primary):
            fields = groups[entity_name]
            related = entity_name != primary
            title = f"Related: {entity_name}" if related else entity_name
            css = ' class="related-entity"' if related else ""
            lines.append(f"  <fieldset{css}>")
            lines.append(f"    <legend>{html.escape(title)}</legend>")
            lines.append("    <dl>")
            for field in fields:
                value = self.format_value(record.get(field.display_path))
                lines.append(f"      <dt>{html.escape(field.label)}</dt>")
                lines.append(f"      <dd {self.field_attrs(field)}>{value}</dd>")
            lines.append("    </dl>")
            lines.append("  </fieldset>")

        lines.append("</div>")
        return lines
