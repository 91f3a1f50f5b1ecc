"""
Gap records — recognized-but-missing business detail.

A gap is noted whenever the pipeline has to assume something the inputs
should have said (no rules for an entity, no transitions for a state,
a transition into a state the enum does not declare). Gaps never stop a
run; they are collected so the missing detail can be followed up.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

GapImpact = Literal["LOW", "MEDIUM", "HIGH", "CRITICAL"]

IMPACT_ORDER: dict[str, int] = {"LOW": 0, "MEDIUM": 1, "HIGH": 2, "CRITICAL": 3}


class GapRecord(BaseModel):
    """A single gap. Immutable once created."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int = 0
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    category: str
    entity: str | None = None
    field: str | None = None
    state: str | None = None
    expected: str | None = None
    assumption: str | None = None
    suggested_fix: str | None = None
    impact: GapImpact = "LOW"

    @property
    def location(self) -> str:
        """``Entity.field`` (or just the entity) this gap refers to."""
        if self.entity and self.field:
            return f"{self.entity}.{self.field}"
        return self.entity or self.field or ""

    def summary(self) -> str:
        where = f" ({self.location})" if self.location else ""
        detail = self.expected or self.assumption or ""
        return f"[{self.category}]{where} {detail}".rstrip()
