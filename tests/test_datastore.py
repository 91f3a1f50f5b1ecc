"""
Tests for the in-memory data store and store error translation.
"""

import uuid

import pytest

from viewforge.core.datastore.errors import (
    DatabaseError,
    NotFoundError,
    ValidationError,
    translate_store_error,
)
from viewforge.core.datastore.store import (
    FOREIGN_KEY_VIOLATION,
    INVALID_TEXT_REPRESENTATION,
    NO_ROWS,
    NOT_NULL_VIOLATION,
    UNIQUE_VIOLATION,
    DataStoreError,
    MemoryStore,
    is_uuid,
)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def account(store: MemoryStore) -> dict:
    return store.insert("accounts", {"account_number": "ACC-001", "account_name": "Acme"})


def _code(excinfo) -> str:
    return excinfo.value.code


class TestInsert:
    def test_defaults_and_metadata(self, account: dict):
        assert is_uuid(account["id"])
        assert account["account_type"] == "Commercial"
        assert account["status"] == "Active"
        assert account["created_at"] == account["updated_at"]

    def test_unique(self, store: MemoryStore, account: dict):
        with pytest.raises(DataStoreError) as exc:
            store.insert("accounts", {"account_number": "ACC-001", "account_name": "Other"})
        assert _code(exc) == UNIQUE_VIOLATION

    def test_not_null(self, store: MemoryStore):
        with pytest.raises(DataStoreError) as exc:
            store.insert("accounts", {"account_number": "ACC-002"})
        assert _code(exc) == NOT_NULL_VIOLATION

    def test_foreign_key(self, store: MemoryStore):
        with pytest.raises(DataStoreError) as exc:
            store.insert("contacts", {
                "account_id": str(uuid.uuid4()), "first_name": "A", "last_name": "B",
            })
        assert _code(exc) == FOREIGN_KEY_VIOLATION

    def test_malformed_reference(self, store: MemoryStore):
        with pytest.raises(DataStoreError) as exc:
            store.insert("contacts", {"account_id": "abc", "first_name": "A", "last_name": "B"})
        assert _code(exc) == INVALID_TEXT_REPRESENTATION

    def test_unknown_table(self, store: MemoryStore):
        with pytest.raises(DataStoreError) as exc:
            store.insert("invoices", {})
        assert _code(exc) == "42P01"

    def test_returned_rows_are_copies(self, store: MemoryStore, account: dict):
        account["account_name"] = "Changed"
        assert store.get("accounts", account["id"])["account_name"] == "Acme"


class TestSelect:
    @pytest.fixture
    def accounts(self, store: MemoryStore) -> MemoryStore:
        for n, name, status in [(1, "Beta", "Active"), (2, "alpha", "Inactive"), (3, "Gamma", "Active")]:
            store.insert("accounts", {"account_number": f"ACC-{n}", "account_name": name, "status": status})
        return store

    def test_filter(self, accounts: MemoryStore):
        rows, total = accounts.select("accounts", filters={"status": "Active", "account_type": None})
        assert total == 2
        assert {r["account_name"] for r in rows} == {"Beta", "Gamma"}

    def test_search_is_case_insensitive(self, accounts: MemoryStore):
        rows, _ = accounts.select("accounts", search="ALP", search_columns=("account_name",))
        assert [r["account_name"] for r in rows] == ["alpha"]

    def test_order_and_page(self, accounts: MemoryStore):
        rows, total = accounts.select(
            "accounts", order_by="account_number", descending=True, offset=1, limit=1,
        )
        assert total == 3
        assert [r["account_number"] for r in rows] == ["ACC-2"]

    def test_none_sorts_last(self, store: MemoryStore):
        store.insert("accounts", {"account_number": "A", "account_name": "x", "billing_city": None})
        store.insert("accounts", {"account_number": "B", "account_name": "y", "billing_city": "Oslo"})
        for descending in (False, True):
            rows, _ = store.select("accounts", order_by="billing_city", descending=descending)
            assert rows[-1]["billing_city"] is None

    def test_id_filter_must_be_uuid(self, store: MemoryStore):
        with pytest.raises(DataStoreError) as exc:
            store.select("contacts", filters={"account_id": "nope"})
        assert _code(exc) == INVALID_TEXT_REPRESENTATION


class TestUpdateDelete:
    def test_update(self, store: MemoryStore, account: dict):
        updated = store.update("accounts", account["id"], {"status": "Inactive"})
        assert updated["status"] == "Inactive"
        assert updated["id"] == account["id"]
        assert updated["created_at"] == account["created_at"]

    def test_update_unique(self, store: MemoryStore, account: dict):
        other = store.insert("accounts", {"account_number": "ACC-002", "account_name": "B"})
        with pytest.raises(DataStoreError) as exc:
            store.update("accounts", other["id"], {"account_number": "ACC-001"})
        assert _code(exc) == UNIQUE_VIOLATION

    def test_missing_row(self, store: MemoryStore):
        missing = str(uuid.uuid4())
        for call in (
            lambda: store.get("accounts", missing),
            lambda: store.update("accounts", missing, {"status": "Inactive"}),
            lambda: store.delete("accounts", missing),
        ):
            with pytest.raises(DataStoreError) as exc:
                call()
            assert _code(exc) == NO_ROWS

    def test_cascade(self, store: MemoryStore, account: dict):
        store.insert("contacts", {"account_id": account["id"], "first_name": "A", "last_name": "B"})
        store.insert("work_orders", {
            "work_order_number": "WO-1", "account_id": account["id"], "title": "Fix",
        })
        store.delete("accounts", account["id"])
        assert store.select("contacts")[1] == 0
        assert store.select("work_orders")[1] == 0
        assert store.select("accounts")[1] == 0


class TestTranslateStoreError:
    @pytest.mark.parametrize("code, message", [
        (UNIQUE_VIOLATION, "This record already exists"),
        (FOREIGN_KEY_VIOLATION, "Related record not found"),
        (NOT_NULL_VIOLATION, "Required field is missing"),
        (INVALID_TEXT_REPRESENTATION, "Invalid data format"),
    ])
    def test_bad_request(self, code, message):
        error = translate_store_error(DataStoreError(code, "backend text", "secret detail"))
        assert isinstance(error, ValidationError)
        assert error.status_code == 400
        assert error.to_dict() == {"error": message}

    def test_not_found(self):
        error = translate_store_error(DataStoreError(NO_ROWS, "0 rows"), "Account")
        assert isinstance(error, NotFoundError)
        assert error.message == "Account not found"

    def test_anything_else(self):
        error = translate_store_error(DataStoreError("XX000", "internal boom"))
        assert isinstance(error, DatabaseError)
        assert error.to_dict() == {"error": "Database operation failed"}

    def test_detail_is_logged(self, caplog):
        with caplog.at_level("ERROR"):
            translate_store_error(DataStoreError(UNIQUE_VIOLATION, "dup", "accounts.account_number=X"))
        assert "accounts.account_number=X" in caplog.text
