"""
Data store — table access used by the HTTP API.

``DataStore`` is the interface the routes depend on. ``MemoryStore`` is an
in-process implementation that enforces the same constraints as the
relational schema (unique, not-null and foreign keys) and reports
violations with the same Postgres / PostgREST error codes, so error
translation behaves the same against either backend.
"""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

# Postgres / PostgREST error codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"
INVALID_TEXT_REPRESENTATION = "22P02"
NO_ROWS = "PGRST116"


class DataStoreError(Exception):
    """A store operation failed.

    Attributes:
        code: Postgres SQLSTATE or PostgREST code.
        details: Backend detail (logged, never sent to clients).
    """

    def __init__(self, code: str, message: str, details: str = ""):
        self.code = code
        self.details = details
        super().__init__(message)


@dataclass(frozen=True)
class ForeignKey:
    column: str
    table: str
    on_delete: str = "restrict"  # or "cascade"


@dataclass(frozen=True)
class TableSchema:
    name: str
    not_null: tuple[str, ...] = ()
    unique: tuple[str, ...] = ()
    foreign_keys: tuple[ForeignKey, ...] = ()
    defaults: dict[str, Any] = field(default_factory=dict)


SCHEMAS: dict[str, TableSchema] = {
    "accounts": TableSchema(
        name="accounts",
        not_null=("account_number", "account_name"),
        unique=("account_number",),
        defaults={"account_type": "Commercial", "status": "Active"},
    ),
    "contacts": TableSchema(
        name="contacts",
        not_null=("account_id", "first_name", "last_name"),
        foreign_keys=(ForeignKey("account_id", "accounts", on_delete="cascade"),),
        defaults={"is_primary_contact": False},
    ),
    "work_orders": TableSchema(
        name="work_orders",
        not_null=("work_order_number", "account_id", "title"),
        unique=("work_order_number",),
        foreign_keys=(ForeignKey("account_id", "accounts", on_delete="cascade"),),
        defaults={"type": "Service", "priority": "Medium", "status": "Scheduled"},
    ),
}


def is_uuid(value: Any) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


class DataStore(ABC):
    """Table-level operations used by the API routes."""

    @abstractmethod
    def select(
        self,
        table: str,
        *,
        filters: dict[str, Any] | None = None,
        search: str | None = None,
        search_columns: tuple[str, ...] = (),
        order_by: str | None = None,
        descending: bool = False,
        offset: int = 0,
        limit: int | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """Matching rows for one page and the total match count."""

    @abstractmethod
    def get(self, table: str, row_id: str) -> dict[str, Any]:
        """One row by id. Raises DataStoreError(PGRST116) if absent."""

    @abstractmethod
    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert and return the stored row (with id and timestamps)."""

    @abstractmethod
    def update(self, table: str, row_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        """Apply changes and return the updated row."""

    @abstractmethod
    def delete(self, table: str, row_id: str) -> None:
        """Delete a row, cascading where the schema says so."""


class MemoryStore(DataStore):
    """Thread-safe in-memory store over ``SCHEMAS``."""

    def __init__(self, schemas: dict[str, TableSchema] | None = None):
        self._schemas = schemas or SCHEMAS
        self._tables: dict[str, dict[str, dict[str, Any]]] = {name: {} for name in self._schemas}
        self._lock = threading.RLock()

    # ── Queries ─────────────────────────────────────────────────

    def select(
        self,
        table: str,
        *,
        filters: dict[str, Any] | None = None,
        search: str | None = None,
        search_columns: tuple[str, ...] = (),
        order_by: str | None = None,
        descending: bool = False,
        offset: int = 0,
        limit: int | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        with self._lock:
            rows = list(self._table(table).values())

        for column, value in (filters or {}).items():
            if value is None:
                continue
            if column == "id" or column.endswith("_id"):
                self._check_uuid(value)
            rows = [r for r in rows if r.get(column) == value]

        if search:
            needle = search.lower()
            rows = [
                r for r in rows
                if any(needle in str(r.get(c) or "").lower() for c in search_columns)
            ]

        if order_by:
            # None sorts last in either direction
            present = [r for r in rows if r.get(order_by) is not None]
            missing = [r for r in rows if r.get(order_by) is None]
            present.sort(key=lambda r: r[order_by], reverse=descending)
            rows = present + missing

        total = len(rows)
        end = None if limit is None else offset + limit
        return [copy.deepcopy(r) for r in rows[offset:end]], total

    def get(self, table: str, row_id: str) -> dict[str, Any]:
        self._check_uuid(row_id)
        with self._lock:
            row = self._table(table).get(str(row_id))
            if row is None:
                raise DataStoreError(NO_ROWS, "The result contains 0 rows", f"{table}.id={row_id}")
            return copy.deepcopy(row)

    # ── Writes ──────────────────────────────────────────────────

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        schema = self._schema(table)
        now = _now()
        record = {**schema.defaults, **row}
        record["id"] = str(uuid.uuid4())
        record["created_at"] = now
        record["updated_at"] = now

        with self._lock:
            self._check_row(schema, record)
            self._table(table)[record["id"]] = record
        logger.debug("Inserted %s %s", table, record["id"])
        return copy.deepcopy(record)

    def update(self, table: str, row_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        schema = self._schema(table)
        self._check_uuid(row_id)
        with self._lock:
            current = self._table(table).get(str(row_id))
            if current is None:
                raise DataStoreError(NO_ROWS, "The result contains 0 rows", f"{table}.id={row_id}")
            merged = {**current, **changes, "id": current["id"], "updated_at": _now()}
            self._check_row(schema, merged)
            self._table(table)[current["id"]] = merged
        logger.debug("Updated %s %s (%s)", table, row_id, ", ".join(sorted(changes)))
        return copy.deepcopy(merged)

    def delete(self, table: str, row_id: str) -> None:
        self._check_uuid(row_id)
        with self._lock:
            if str(row_id) not in self._table(table):
                raise DataStoreError(NO_ROWS, "The result contains 0 rows", f"{table}.id={row_id}")
            self._delete_cascade(table, str(row_id))

    def _delete_cascade(self, table: str, row_id: str) -> None:
        for child_name, child in self._schemas.items():
            for fk in child.foreign_keys:
                if fk.table != table:
                    continue
                children = [r["id"] for r in self._tables[child_name].values()
                            if r.get(fk.column) == row_id]
                if children and fk.on_delete != "cascade":
                    raise DataStoreError(
                        FOREIGN_KEY_VIOLATION,
                        "update or delete violates foreign key constraint",
                        f"{child_name}.{fk.column} references {table}.id={row_id}",
                    )
                for child_id in children:
                    self._delete_cascade(child_name, child_id)
        del self._tables[table][row_id]
        logger.debug("Deleted %s %s", table, row_id)

    # ── Constraint checks ───────────────────────────────────────

    def _check_row(self, schema: TableSchema, row: dict[str, Any]) -> None:
        for column in schema.not_null:
            if row.get(column) is None:
                raise DataStoreError(
                    NOT_NULL_VIOLATION,
                    "null value violates not-null constraint",
                    f'column "{column}" of relation "{schema.name}"',
                )

        for fk in schema.foreign_keys:
            value = row.get(fk.column)
            if value is None:
                continue
            self._check_uuid(value)
            if str(value) not in self._tables[fk.table]:
                raise DataStoreError(
                    FOREIGN_KEY_VIOLATION,
                    "insert or update violates foreign key constraint",
                    f"{schema.name}.{fk.column}={value} not present in {fk.table}",
                )

        for column in schema.unique:
            value = row.get(column)
            if value is None:
                continue
            for other in self._tables[schema.name].values():
                if other["id"] != row["id"] and other.get(column) == value:
                    raise DataStoreError(
                        UNIQUE_VIOLATION,
                        "duplicate key value violates unique constraint",
                        f"{schema.name}.{column}={value}",
                    )

    @staticmethod
    def _check_uuid(value: Any) -> None:
        if not is_uuid(value):
            raise DataStoreError(
                INVALID_TEXT_REPRESENTATION,
                "invalid input syntax for type uuid",
                repr(value),
            )

    def _schema(self, table: str) -> TableSchema:
        try:
            return self._schemas[table]
        except KeyError:
            raise DataStoreError("42P01", f'relation "{table}" does not exist') from None

    def _table(self, table: str) -> dict[str, dict[str, Any]]:
        self._schema(table)
        return self._tables[table]


def _now() -> str:
    return datetime.now(UTC).isoformat()
