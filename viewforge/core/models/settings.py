"""
Settings model — optional viewforge.yml at the workspace root.

Every key has a default, so an absent file is equivalent to::

    output_dir: generated
    gap_log: .state/gaps.ndjson
    sample_rows: 5
    formatting:
      null_placeholder: "—"
      boolean_style:
        table: glyph
        list: words
        detail: words
        form: words
    api:
      page_size: 20
      max_page_size: 100
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

BooleanStyle = Literal["glyph", "words"]

EM_DASH = "—"


def _default_boolean_styles() -> dict[str, BooleanStyle]:
    return {"table": "glyph", "list": "words", "detail": "words", "form": "words"}


class FormattingPolicy(BaseModel):
    """How a generator renders values that are not plain text."""

    null_placeholder: str = EM_DASH
    boolean_style: BooleanStyle = "words"

    def render(self, value: object) -> str:
        if value is None:
            return self.null_placeholder
        if isinstance(value, bool):
            if self.boolean_style == "glyph":
                return "✓" if value else "✗"
            return "Yes" if value else "No"
        return str(value)


class FormattingSettings(BaseModel):
    null_placeholder: str = EM_DASH
    boolean_style: dict[str, BooleanStyle] = Field(default_factory=_default_boolean_styles)

    def policy_for(self, layout: str) -> FormattingPolicy:
        """Resolve the policy a given layout generator should use."""
        return FormattingPolicy(
            null_placeholder=self.null_placeholder,
            boolean_style=self.boolean_style.get(layout, "words"),
        )


class ApiSettings(BaseModel):
    page_size: int = Field(default=20, ge=1)
    max_page_size: int = Field(default=100, ge=1)


class Settings(BaseModel):
    output_dir: str = "generated"
    gap_log: str = ".state/gaps.ndjson"
    sample_rows: int = Field(default=5, ge=1, le=100)
    formatting: FormattingSettings = Field(default_factory=FormattingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
