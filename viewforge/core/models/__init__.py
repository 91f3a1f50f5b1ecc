"""
Domain models — Pydantic types for the generation pipeline.

All models are re-exported here for convenient access:

    from viewforge.core.models import ViewConfiguration, FieldDescriptor, GapRecord
"""

from viewforge.core.models.busm import (
    BusmEntity,
    BusmEnum,
    BusmField,
    BusmModel,
    BusmRelationship,
)
from viewforge.core.models.gap import GapRecord
from viewforge.core.models.module import ModuleDefinition
from viewforge.core.models.rules import (
    EntityRules,
    RuleDocument,
    StateConfig,
    ValidationRules,
)
from viewforge.core.models.settings import FormattingPolicy, Settings
from viewforge.core.models.template import GeneratedFile
from viewforge.core.models.view import (
    EnrichedField,
    EntityRef,
    FieldDescriptor,
    Hierarchy,
    Layout,
    LayoutFeatures,
    ViewConfiguration,
)

__all__ = [
    # busm.py
    "BusmEntity",
    "BusmEnum",
    "BusmField",
    "BusmModel",
    "BusmRelationship",
    # view.py
    "EnrichedField",
    "EntityRef",
    # rules.py
    "EntityRules",
    "FieldDescriptor",
    # settings.py
    "FormattingPolicy",
    # gap.py
    "GapRecord",
    # template.py
    "GeneratedFile",
    "Hierarchy",
    "Layout",
    "LayoutFeatures",
    # module.py
    "ModuleDefinition",
    "RuleDocument",
    "Settings",
    "StateConfig",
    "ValidationRules",
    "ViewConfiguration",
]
