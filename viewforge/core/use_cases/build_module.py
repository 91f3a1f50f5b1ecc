"""
Module build use case — BUSM entity to module YAML on disk.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from viewforge.core.config.loader import ConfigError
from viewforge.core.models.module import ModuleDefinition
from viewforge.core.persistence.gap_log import GapLog
from viewforge.core.persistence.output import OutputExistsError
from viewforge.core.services.business_rules import BusinessRulesParser, RuleSchemaError
from viewforge.core.services.busm_reader import BusmReader, EntityNotFoundError
from viewforge.core.services.module_builder import build_module, write_module


@dataclass
class ModuleBuildResult:
    ok: bool = False
    module: ModuleDefinition | None = None
    output_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    gaps: int = 0

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "module_id": self.module.module.id if self.module else None,
            "phase": self.module.module.phase if self.module else None,
            "field_count": len(self.module.entity.fields) if self.module else 0,
            "output_path": str(self.output_path) if self.output_path else None,
            "errors": self.errors,
            "gaps": self.gaps,
        }


def build_module_file(
    busm_path: Path,
    entity: str,
    out_dir: Path,
    *,
    phase: int = 1,
    rules_path: Path | None = None,
    gap_log: GapLog | None = None,
) -> ModuleBuildResult:
    """Load the BUSM (and rules), build the module and write it once."""
    result = ModuleBuildResult()
    gap_log = gap_log if gap_log is not None else GapLog()
    gaps_before = len(gap_log)

    reader = BusmReader()
    try:
        reader.load_busm(busm_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    rules = None
    if rules_path is not None:
        rules = BusinessRulesParser(gap_log=gap_log)
        try:
            rules.load_rules(rules_path)
        except ConfigError as e:
            result.errors.append(str(e))
            return result
        except RuleSchemaError as e:
            result.errors.extend(e.errors)
            return result

    try:
        result.module = build_module(reader, entity, phase, rules=rules, gap_log=gap_log)
    except EntityNotFoundError as e:
        result.errors.append(str(e))
        return result

    try:
        result.output_path = write_module(result.module, out_dir)
    except OutputExistsError as e:
        result.errors.append(str(e))
        return result

    result.ok = True
    result.gaps = len(gap_log) - gaps_before
    return result
