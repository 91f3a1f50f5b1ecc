"""
BUSM models — the enterprise business model that every module derives from.

The BUSM is a JSON document::

    {
      "version": "1.0.0",
      "entities": {
        "Account": {
          "primaryKey": "id",
          "fields": {
            "accountName": {"type": "string", "required": true},
            "creditLimit": {"type": "decimal", "phase": 2}
          }
        }
      },
      "relationships": {
        "Account.contacts": {"name": "contacts", "type": "one-to-many",
                             "from": "Account", "to": "Contact",
                             "foreignKey": "accountId"}
      },
      "enums": {"AccountStatus": {"values": ["Active", "Inactive"]}}
    }
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BusmField(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    name: str = ""
    type: str = "string"
    required: bool = False
    enum: str | None = None
    phase: int | None = None
    essential: bool = False
    complexity: str | None = None
    primary_key: bool = False
    foreign_key: str | None = None
    system: bool = False
    description: str = ""
    constraints: dict[str, Any] = Field(default_factory=dict)
    validation: list[dict[str, Any]] = Field(default_factory=list)


class BusmEntity(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    name: str = ""
    primary_key: str | None = None
    description: str = ""
    fields: dict[str, BusmField] = Field(default_factory=dict)


class BusmRelationship(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    type: str = "one-to-many"
    source: str = Field(alias="from")
    target: str = Field(alias="to")
    foreign_key: str | None = Field(default=None, alias="foreignKey")


class BusmEnum(BaseModel):
    values: list[str] = Field(default_factory=list)
    description: str = ""


class BusmModel(BaseModel):
    version: str = "unknown"
    entities: dict[str, BusmEntity] = Field(default_factory=dict)
    relationships: dict[str, BusmRelationship] = Field(default_factory=dict)
    enums: dict[str, BusmEnum] = Field(default_factory=dict)
