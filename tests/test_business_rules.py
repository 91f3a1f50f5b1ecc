"""
Tests for the business rules parser.
"""

import textwrap
from pathlib import Path

import pytest

from viewforge.core.config.loader import ConfigError
from viewforge.core.persistence.gap_log import GapLog
from viewforge.core.services.business_rules import (
    BusinessRulesParser,
    RuleSchemaError,
    validate_rule_document,
)


def _doc(**entities):
    return {"module": {"id": "m", "name": "M"}, "business_rules": entities}


class TestLoading:
    def test_load_fixture(self, rules):
        assert rules.document is not None
        assert rules.document.module.id == "account-management"
        assert rules.entities() == ["Account", "Contact"]

    def test_load_text(self):
        parser = BusinessRulesParser()
        parser.load_rules_text(textwrap.dedent("""\
            module:
              name: Orders
            business_rules:
              Order:
                states:
                  Open: [Closed]
                  Closed: []
        """))
        assert parser.get_state_transitions("Order") == {"Open": ["Closed"], "Closed": []}

    def test_invalid_yaml(self):
        with pytest.raises(ConfigError):
            BusinessRulesParser().load_rules_text("module: [unclosed")

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            BusinessRulesParser().load_rules(tmp_path / "nope.yaml")

    def test_business_logic_alias(self):
        parser = BusinessRulesParser()
        parser.load_rules_data(_doc(Order={"businessLogic": {"onCreate": ["stamp"]}}))
        assert parser.get_business_logic("Order", "onCreate") == ["stamp"]

    def test_null_state_is_terminal(self):
        parser = BusinessRulesParser()
        parser.load_rules_data(_doc(Order={"states": {"Open": ["Archived"], "Archived": None}}))
        assert parser.get_allowed_transitions("Order", "Archived") == []

    def test_null_transitions_in_mapping(self):
        parser = BusinessRulesParser()
        parser.load_rules_data(_doc(A={"states": {"Active": {"transitions": None, "color": "red"}}}))
        assert parser.get_allowed_transitions("A", "Active") == []
        assert parser.get_state_display("A", "Active")["color"] == "red"


class TestStructuralErrors:
    def test_missing_business_rules(self):
        assert validate_rule_document({"module": {"name": "M"}}) == ["No business_rules section found"]

    def test_missing_module_name(self):
        errors = validate_rule_document({"module": {}, "business_rules": {"A": {}}})
        assert errors == ["Missing module.name"]

    def test_empty_business_rules(self):
        errors = validate_rule_document(_doc())
        assert errors == ["business_rules must be a non-empty mapping of entity blocks"]

    def test_validation_lists(self):
        errors = validate_rule_document(_doc(A={"validation": {"required": "name", "unique": 3}}))
        assert errors == [
            "A.validation.required must be an array",
            "A.validation.unique must be an array",
        ]

    def test_bad_regex(self):
        errors = validate_rule_document(_doc(A={"validation": {"patterns": {"code": "(["}}}))
        assert len(errors) == 1
        assert errors[0].startswith("A.validation.patterns.code is not a valid regex")

    def test_state_without_transitions(self):
        errors = validate_rule_document(_doc(A={"states": {"Open": {"transitions": "Closed"}}}))
        assert errors == ["A.states.Open must have transitions array"]

    def test_undeclared_target(self):
        errors = validate_rule_document(_doc(A={"states": {"Open": ["Gone"]}}))
        assert errors == ["A.states.Open transitions to undeclared state 'Gone'"]

    def test_nested_target_list(self):
        doc = _doc(A={"states": {"Active": [["Inactive"]], "Inactive": None}})
        assert validate_rule_document(doc) == ["A.states.Active transition target must be a state name"]
        with pytest.raises(RuleSchemaError) as exc:
            BusinessRulesParser().load_rules_data(doc)
        assert exc.value.errors == ["A.states.Active transition target must be a state name"]

    def test_load_raises_with_all_errors(self):
        doc = _doc(A={"validation": {"required": "x"}, "states": {"Open": ["Gone"]}}, B=[1])
        with pytest.raises(RuleSchemaError) as exc:
            BusinessRulesParser().load_rules_data(doc)
        assert len(exc.value.errors) == 3
        assert "B must be a mapping" in exc.value.errors

    def test_wrong_value_types_become_schema_errors(self):
        with pytest.raises(RuleSchemaError):
            BusinessRulesParser().load_rules_data(_doc(A={"enums": {"kind": "not-a-list"}}))


class TestValidationQueries:
    def test_required(self, rules):
        assert rules.is_field_required("Account", "accountName") is True
        assert rules.is_field_required("Account", "accountNumber") is False
        assert rules.get_required_fields("Contact") == ["firstName", "lastName"]

    def test_unique(self, rules):
        assert rules.is_field_unique("Account", "accountNumber") is True
        assert rules.get_unique_fields("Contact") == []

    def test_patterns(self, rules):
        assert rules.get_field_patterns("Account") == {"accountNumber": r"^ACC-\d{3}$"}

    def test_unknown_entity_is_empty_and_noted(self, rules, gap_log: GapLog):
        assert rules.get_validation_rules("Invoice") == {}
        assert rules.is_field_required("Invoice", "total") is False
        assert len(gap_log) == 2
        gap = gap_log.records[0]
        assert gap.category == "MISSING_RULES"
        assert gap.impact == "MEDIUM"
        assert gap.entity == "Invoice"

    def test_messages(self, rules):
        assert rules.get_validation_message("Account", "accountName", "required") == (
            "Every account needs a name"
        )
        assert rules.get_validation_message("Account", "accountType", "required") == (
            "accountType is required"
        )
        assert rules.get_validation_message("Account", "accountNumber", "unique") == (
            "accountNumber must be unique"
        )
        assert rules.get_validation_message("Account", "x", "pattern") == "x format is invalid"
        assert rules.get_validation_message("Account", "x", "range") == "x validation failed"

    def test_check_field_value(self, rules):
        assert rules.check_field_value("Account", "accountName", "") == ["Every account needs a name"]
        assert rules.check_field_value("Account", "accountNumber", "XYZ") == [
            "accountNumber format is invalid"
        ]
        assert rules.check_field_value("Account", "accountNumber", "ACC-123") == []


class TestStateQueries:
    def test_transitions(self, rules):
        assert rules.get_state_transitions("Account") == {
            "Active": ["Inactive", "Suspended"],
            "Inactive": ["Active"],
            "Suspended": ["Active"],
        }
        assert rules.get_allowed_transitions("Account", "Inactive") == ["Active"]

    def test_unknown_state_is_empty_and_noted(self, rules, gap_log: GapLog):
        assert rules.get_allowed_transitions("Account", "Deleted") == []
        assert gap_log.records[-1].category == "MISSING_STATE"
        assert gap_log.records[-1].impact == "LOW"
        assert gap_log.records[-1].state == "Deleted"

    def test_unknown_entity_transitions(self, rules):
        assert rules.get_state_transitions("Invoice") == {}

    def test_state_display(self, rules):
        assert rules.get_state_display("Account", "Active") == {
            "color": "green", "icon": "check", "label": "Active account",
        }
        assert rules.get_state_display("Account", "Inactive") == {
            "color": "gray", "icon": "circle", "label": "Inactive",
        }

    def test_enum_values(self, rules):
        assert rules.get_enum_values("Account", "accountType") == ["Commercial", "Residential"]
        assert rules.get_enum_values("Account", "status") == ["Active", "Inactive", "Suspended"]
        assert rules.get_enum_values("Contact", "status") == []
        assert rules.get_enum_values("Invoice", "status") == []


class TestSummaries:
    def test_business_logic(self, rules):
        assert rules.get_business_logic("Account", "onCreate") == ["assignAccountNumber", "notifySales"]
        assert rules.get_business_logic("Account", "onDelete") == []

    def test_entity_rules(self, rules):
        summary = rules.get_entity_rules("Account")
        assert summary["required"] == ["accountName", "accountType"]
        assert summary["states"]["Suspended"] == ["Active"]
        assert rules.get_entity_rules("Invoice") is None

    def test_display_hints(self, rules):
        hints = rules.get_display_hints("Contact")
        assert hints["showRequired"] is True
        assert hints["showStates"] is False
        assert rules.get_display_hints("Invoice") == {
            "showRequired": False,
            "showUnique": False,
            "showStates": False,
            "showValidation": False,
        }
