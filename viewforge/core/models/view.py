"""
View configuration models — the canonical shape of a view definition.

Raw view definitions are authored in camelCase JSON/YAML (``isRelated``,
``subModule``, ``userStory``). Every model here accepts both camelCase and
snake_case keys and dumps camelCase, so a parsed configuration can be fed
straight back into the parser.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

LAYOUT_TYPES = ("table", "list", "detail", "form")
SCOPE_LEVELS = ("app", "module", "submodule", "story")

LayoutType = Literal["table", "list", "detail", "form"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NamedNode(_CamelModel):
    """A node in the application hierarchy (application, module, sub-module)."""

    name: str
    description: str = ""


class UserStory(_CamelModel):
    """The user story a view belongs to."""

    code: str
    title: str = ""


def _unknown_app() -> NamedNode:
    return NamedNode(name="Unknown App")


def _unknown_module() -> NamedNode:
    return NamedNode(name="Unknown Module")


class Hierarchy(_CamelModel):
    """Where the view sits: application → module → sub-module → story."""

    application: NamedNode = Field(default_factory=_unknown_app)
    module: NamedNode = Field(default_factory=_unknown_module)
    sub_module: NamedNode | None = None
    user_story: UserStory | None = None

    def path(self) -> str:
        """Human-readable path like ``App > Module > Sub > US-001``."""
        parts = [self.application.name, self.module.name]
        if self.sub_module:
            parts.append(self.sub_module.name)
        if self.user_story:
            parts.append(self.user_story.code)
        return " > ".join(parts)


class Scope(_CamelModel):
    level: str = "module"
    path: str = ""


class EntityRef(_CamelModel):
    """The primary entity of a view and any related entities it pulls from."""

    primary: str
    related: list[str] = Field(default_factory=list)


class FieldDescriptor(_CamelModel):
    """One field displayed by a view.

    ``display_path`` is derived: ``entity.field`` for fields of a related
    entity, the bare field name otherwise. Any supplied value is replaced.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    entity: str
    field: str
    label: str
    type: str = "string"
    is_related: bool = False
    display_path: str = ""

    @model_validator(mode="before")
    @classmethod
    def _derive_display_path(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = {k: v for k, v in data.items() if k not in ("displayPath", "display_path")}
        name = data.get("field") or ""
        is_related = data.get("isRelated", data.get("is_related", False))
        data["displayPath"] = f"{data.get('entity')}.{name}" if is_related else name
        return data


class EnrichedField(FieldDescriptor):
    """A field descriptor with derived naming forms and capability flags."""

    field_camel: str = ""
    ts_type: str = "string"
    is_sortable: bool = False
    is_filterable: bool = False


class LayoutFeatures(_CamelModel):
    sorting: bool = False
    pagination: bool = False
    filtering: bool = False


class Layout(_CamelModel):
    type: LayoutType = "table"
    features: LayoutFeatures = Field(default_factory=LayoutFeatures)


class ViewConfiguration(_CamelModel):
    """A fully normalized view definition, ready for a layout generator."""

    version: str = "1.0"
    hierarchy: Hierarchy = Field(default_factory=Hierarchy)
    scope: Scope = Field(default_factory=Scope)
    entity: EntityRef
    fields: list[FieldDescriptor] = Field(min_length=1)
    layout: Layout = Field(default_factory=Layout)

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, (int, float)) else value

    def fields_by_entity(self) -> dict[str, list[FieldDescriptor]]:
        """Group fields by owning entity, preserving first-seen order."""
        groups: dict[str, list[FieldDescriptor]] = {}
        for f in self.fields:
            groups.setdefault(f.entity, []).append(f)
        return groups

    def to_raw(self) -> dict:
        """Serialize back to the camelCase authoring format."""
        return self.model_dump(by_alias=True, mode="json")
