"""
Rule audit — cross-checks a rule document against the BUSM.
"""

from __future__ import annotations

import logging

from viewforge.core.models.gap import GapRecord
from viewforge.core.persistence.gap_log import GapLog
from viewforge.core.services.business_rules import BusinessRulesParser
from viewforge.core.services.busm_reader import BusmReader

logger = logging.getLogger(__name__)


def state_domain(rules: BusinessRulesParser, busm: BusmReader | None, entity: str) -> list[str]:
    """Allowed values of an entity's state field.

    The rule document's own ``enums`` entry wins; otherwise the BUSM enum
    bound to the state field is used. Empty when neither defines one.
    """
    state_field = rules.get_state_field(entity)
    rule_entity = rules.document.business_rules.get(entity) if rules.document else None
    if rule_entity is not None and state_field in rule_entity.enums:
        return list(rule_entity.enums[state_field])
    if busm is not None and busm.model is not None and busm.has_entity(entity):
        return busm.get_field_enum(entity, state_field)
    return []


def audit_transition_domains(
    rules: BusinessRulesParser,
    busm: BusmReader | None = None,
    gap_log: GapLog | None = None,
) -> list[GapRecord]:
    """Report transitions that lead out of the state field's enum domain.

    Each offending (state, target) pair becomes an
    ``INVALID_TRANSITION_TARGET`` gap with HIGH impact. Entities without a
    known domain are skipped.
    """
    log = gap_log if gap_log is not None else GapLog()
    found: list[GapRecord] = []

    for entity in rules.entities():
        domain = state_domain(rules, busm, entity)
        if not domain:
            logger.debug("No state domain for %s, skipping transition audit", entity)
            continue
        state_field = rules.get_state_field(entity)
        for state, targets in rules.get_state_transitions(entity).items():
            for target in targets:
                if target in domain:
                    continue
                found.append(log.record(
                    "INVALID_TRANSITION_TARGET",
                    impact="HIGH",
                    entity=entity,
                    field=state_field,
                    state=state,
                    expected=f"Transition target within {state_field} values",
                    assumption=f"'{state}' -> '{target}' kept as written",
                    suggested_fix=f"Add '{target}' to the {state_field} enum or drop the transition",
                ))

    return found
