"""
Tests for field enrichment and sample data.
"""

from viewforge.core.models.view import FieldDescriptor
from viewforge.core.services.field_enrichment import (
    component_name,
    enrich_field,
    enrich_fields,
    is_filterable,
    is_sortable,
    map_to_typescript,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
)
from viewforge.core.services.sample_data import generate_field_value, generate_sample_rows
from viewforge.core.services.view_parser import parse_configuration


class TestCapabilities:
    def test_sortable_types(self):
        for t in ("string", "number", "date", "enum"):
            assert is_sortable(t)
        assert not is_sortable("boolean")
        assert not is_sortable("email")

    def test_filterable_types(self):
        for t in ("string", "enum", "boolean"):
            assert is_filterable(t)
        assert not is_filterable("number")
        assert not is_filterable("date")

    def test_typescript_mapping(self):
        assert map_to_typescript("number") == "number"
        assert map_to_typescript("currency") == "number"
        assert map_to_typescript("boolean") == "boolean"
        assert map_to_typescript("date") == "string"
        assert map_to_typescript("something-else") == "string"


class TestNaming:
    def test_camel(self):
        assert to_camel_case("work-order_number") == "workOrderNumber"
        assert to_camel_case("accountName") == "accountName"
        assert to_camel_case("Account") == "account"

    def test_pascal(self):
        assert to_pascal_case("service location") == "ServiceLocation"
        assert to_pascal_case("account") == "Account"

    def test_kebab(self):
        assert to_kebab_case("ServiceLocation") == "service-location"
        assert to_kebab_case("accountName") == "account-name"
        assert to_kebab_case("work_order") == "work-order"


class TestEnrichField:
    def test_flags_and_names(self):
        f = FieldDescriptor(entity="Account", field="account_name", label="Name", type="string")
        e = enrich_field(f)
        assert e.field_camel == "accountName"
        assert e.ts_type == "string"
        assert e.is_sortable is True
        assert e.is_filterable is True
        assert e.display_path == "account_name"

    def test_related_keeps_display_path(self):
        f = FieldDescriptor(entity="ServiceLocation", field="city", label="City", is_related=True)
        assert enrich_field(f).display_path == "ServiceLocation.city"

    def test_enrich_fields_preserves_order(self, account_view):
        config = parse_configuration(account_view)
        enriched = enrich_fields(config.fields)
        assert [e.field for e in enriched] == [f.field for f in config.fields]
        preferred = next(e for e in enriched if e.field == "isPreferred")
        assert preferred.is_sortable is False
        assert preferred.is_filterable is True
        assert preferred.ts_type == "boolean"


class TestComponentName:
    def test_table_is_list_component(self, account_view):
        assert component_name(parse_configuration(account_view)) == "AccountList"

    def test_other_layouts_named_after_layout(self, account_view):
        account_view["layout"]["type"] = "detail"
        assert component_name(parse_configuration(account_view)) == "AccountDetail"


class TestSampleData:
    def test_known_entity_field(self):
        f = FieldDescriptor(entity="Account", field="status", label="Status", type="enum")
        assert generate_field_value(f, 0) == "Active"
        assert generate_field_value(f, 2) == "Pending"

    def test_wraps_around(self):
        f = FieldDescriptor(entity="Account", field="accountNumber", label="#")
        assert generate_field_value(f, 5) == generate_field_value(f, 0) == "ACC-001"

    def test_name_hint_before_type(self):
        f = FieldDescriptor(entity="Contact", field="workEmail", label="Email", type="string")
        assert generate_field_value(f, 0) == "contact@example.com"

    def test_type_pool(self):
        f = FieldDescriptor(entity="Thing", field="flag", label="Flag", type="boolean")
        assert [generate_field_value(f, i) for i in range(3)] == [True, False, True]

    def test_fallback_uses_label(self):
        f = FieldDescriptor(entity="Thing", field="widget", label="Widget", type="mystery")
        assert generate_field_value(f, 1) == "Widget 2"

    def test_rows_keyed_by_display_path(self, account_view):
        config = parse_configuration(account_view)
        rows = generate_sample_rows(config.fields, 3)
        assert len(rows) == 3
        assert set(rows[0]) == {f.display_path for f in config.fields}
        assert rows[0]["ServiceLocation.city"] == "Springfield"

    def test_deterministic(self, account_view):
        config = parse_configuration(account_view)
        assert generate_sample_rows(config.fields) == generate_sample_rows(config.fields)
