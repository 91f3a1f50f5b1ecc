"""
Business rule models — per-entity validation, states and triggers.

Loaded from a YAML rule document::

    module:
      id: account-management
      name: Account Management
    business_rules:
      Account:
        validation:
          required: [accountName, accountType]
          unique: [accountNumber]
          patterns:
            email: "^[^@]+@[^@]+$"
          messages:
            accountName:
              required: "Every account needs a name"
        states:
          Pending: [Active, Inactive]
          Active:
            transitions: [Inactive]
            color: green
          Inactive: []
        logic:
          onCreate: [assignAccountNumber]
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ValidationRules(BaseModel):
    required: list[str] = Field(default_factory=list)
    unique: list[str] = Field(default_factory=list)
    patterns: dict[str, str] = Field(default_factory=dict)
    messages: dict[str, dict[str, str]] = Field(default_factory=dict)


class StateConfig(BaseModel):
    """A state with display hints. The list form of a state is shorthand
    for ``StateConfig(transitions=[...])``."""

    transitions: list[str] = Field(default_factory=list)
    color: str = "gray"
    icon: str = "circle"
    label: str = ""


class EntityRules(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    validation: ValidationRules = Field(default_factory=ValidationRules)
    state_field: str = Field(default="status", alias="stateField")
    states: dict[str, StateConfig] = Field(default_factory=dict)
    logic: dict[str, list[str]] = Field(default_factory=dict)
    enums: dict[str, list[str]] = Field(default_factory=dict)

    def transition_table(self) -> dict[str, list[str]]:
        """``{state: [targets]}`` with display hints stripped."""
        return {name: list(cfg.transitions) for name, cfg in self.states.items()}


class RuleModule(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = ""
    name: str


class RuleDocument(BaseModel):
    module: RuleModule
    business_rules: dict[str, EntityRules]
