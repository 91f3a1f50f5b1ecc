"""
Form layout — one labelled input per field, prefilled from the first row.

When a BusinessRulesParser is supplied, required fields get the
``required`` attribute and a marker, pattern rules become ``pattern``
attributes, and enum fields list the values the rules declare. Without
rules, enum options are taken from the preview rows.
"""

from __future__ import annotations

import html
from typing import TYPE_CHECKING, Any

from viewforge.core.models.settings import FormattingPolicy
from viewforge.core.models.view import FieldDescriptor, ViewConfiguration
from viewforge.core.services.generators.base import DEFAULT_ROW_COUNT, LayoutGenerator

if TYPE_CHECKING:
    from viewforge.core.services.business_rules import BusinessRulesParser

_INPUT_TYPES: dict[str, str] = {
    "email": "email",
    "phone": "tel",
    "date": "date",
    "datetime": "datetime-local",
    "number": "number",
    "currency": "number",
    "percentage": "number",
    "boolean": "checkbox",
}


class FormGenerator(LayoutGenerator):
    layout = "form"

    def __init__(
        self,
        policy: FormattingPolicy | None = None,
        row_count: int = DEFAULT_ROW_COUNT,
        rules: BusinessRulesParser | None = None,
    ):
        super().__init__(policy=policy, row_count=row_count)
        self.rules = rules

    def render(self, config: ViewConfiguration, rows: list[dict[str, Any]]) -> list[str]:
        record = rows[0] if rows else {}
        primary = config.entity.primary

        lines = self.open_container(config)
        lines.append(f"  <h2>{html.escape(primary)} Form</h2>")
        lines.append(f'  <form data-entity="{html.escape(primary)}" novalidate>')
        for field in config.fields:
            lines.extend(self._render_field(field, record.get(field.display_path), rows))
        lines.append('    <div class="form-actions">')
        lines.append('      <button type="submit">Save</button>')
        lines.append('      <button type="reset">Cancel</button>')
        lines.append("    </div>")
        lines.append("  </form>")
        lines.append("</div>")
        return lines

    def _render_field(
        self,
        field: FieldDescriptor,
        value: Any,
        rows: list[dict[str, Any]],
    ) -> list[str]:
        input_id = html.escape(field.display_path.replace(".", "-"))
        required = self._is_required(field)
        marker = ' <span class="required">*</span>' if required else ""
        req_attr = " required" if required else ""

        lines = ['    <div class="form-field">']
        lines.append(f'      <label for="{input_id}">{html.escape(field.label)}{marker}</label>')

        if field.type == "enum":
            lines.append(f'      <select id="{input_id}" {self.field_attrs(field)}{req_attr}>')
            for option in self._enum_options(field, rows):
                selected = " selected" if option == value else ""
                text = html.escape(str(option))
                lines.append(f'        <option value="{text}"{selected}>{text}</option>')
            lines.append("      </select>")
        elif field.type == "boolean":
            checked = " checked" if value else ""
            lines.append(
                f'      <input id="{input_id}" type="checkbox" {self.field_attrs(field)}{checked}>'
            )
            lines.append(f'      <span class="hint">{self.format_value(bool(value))}</span>')
        else:
            input_type = _INPUT_TYPES.get(field.type, "text")
            pattern = self._pattern(field)
            pattern_attr = f' pattern="{html.escape(pattern)}"' if pattern else ""
            shown = "" if value is None else html.escape(str(value))
            lines.append(
                f'      <input id="{input_id}" type="{input_type}" {self.field_attrs(field)} '
                f'value="{shown}" placeholder="{self.format_value(None)}"{pattern_attr}{req_attr}>'
            )

        lines.append("    </div>")
        return lines

    def _is_required(self, field: FieldDescriptor) -> bool:
        return bool(self.rules and self.rules.is_field_required(field.entity, field.field))

    def _pattern(self, field: FieldDescriptor) -> str | None:
        if self.rules is None:
            return None
        return self.rules.get_field_patterns(field.entity).get(field.field)

    def _enum_options(self, field: FieldDescriptor, rows: list[dict[str, Any]]) -> list[Any]:
        if self.rules is not None:
            declared = self.rules.get_enum_values(field.entity, field.field)
            if declared:
                return declared
        seen: list[Any] = []
        for row in rows:
            candidate = row.get(field.display_path)
            if candidate is not None and candidate not in seen:
                seen.append(candidate)
        return seen
