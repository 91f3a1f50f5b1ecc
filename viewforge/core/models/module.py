"""
Module definition — the per-phase artifact derived from the BUSM.

Written once per (entity, phase) pair as YAML and consumed by the view
generators downstream.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ModuleEntities(_CamelModel):
    owned: list[str] = Field(default_factory=list)
    referenced: list[str] = Field(default_factory=list)


class ModuleInfo(_CamelModel):
    id: str
    name: str
    version: str = "1.0.0"
    description: str = ""
    phase: int = 1
    generated_from: str = "BUSM"
    entities: ModuleEntities = Field(default_factory=ModuleEntities)


class ModuleField(_CamelModel):
    name: str
    type: str
    required: bool = False
    source: str = ""
    enum: str | None = None
    constraints: dict[str, Any] | None = None
    description: str | None = None


class ModuleEntity(_CamelModel):
    name: str
    source: str
    phase: int
    fields: list[ModuleField] = Field(default_factory=list)


class ModuleView(_CamelModel):
    type: str
    name: str
    entity: str
    title: str = ""


class MenuItem(_CamelModel):
    label: str
    view: str
    icon: str = "list"


class Navigation(_CamelModel):
    main_menu: list[MenuItem] = Field(default_factory=list)


class ModuleRules(_CamelModel):
    validation: dict[str, list[str]] = Field(default_factory=dict)
    enums: dict[str, list[str]] = Field(default_factory=dict)
    state_transitions: dict[str, list[str]] = Field(default_factory=dict)


class ModuleDefinition(_CamelModel):
    module: ModuleInfo
    entity: ModuleEntity
    views: list[ModuleView] = Field(default_factory=list)
    business_rules: ModuleRules = Field(default_factory=ModuleRules)
    navigation: Navigation = Field(default_factory=Navigation)

    def to_document(self) -> dict[str, Any]:
        """camelCase mapping suitable for YAML output."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
