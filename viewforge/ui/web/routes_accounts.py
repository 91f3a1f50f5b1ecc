"""
Account routes.

GET    /api/accounts        → paginated list (status, accountType, search)
POST   /api/accounts        → create
GET    /api/accounts/<id>   → one account with its contacts
PATCH  /api/accounts/<id>   → partial update
DELETE /api/accounts/<id>   → delete (contacts go with it)
"""

from __future__ import annotations

import logging

from flask import Blueprint, request

from viewforge.core.datastore.errors import ValidationError, translate_store_error
from viewforge.core.datastore.store import DataStoreError
from viewforge.core.models.records import AccountCreate, AccountUpdate
from viewforge.ui.web.helpers import get_store, page_params, parse_body, success

logger = logging.getLogger(__name__)

accounts_bp = Blueprint("accounts", __name__)

_SORTABLE = (
    "created_at",
    "updated_at",
    "account_name",
    "account_number",
    "account_type",
    "status",
)


@accounts_bp.route("/accounts")
def api_accounts_list():  # type: ignore[no-untyped-def]
    page = page_params(_SORTABLE)
    filters = {
        "status": request.args.get("status") or None,
        "account_type": request.args.get("accountType") or None,
    }
    store = get_store()
    try:
        rows, total = store.select(
            "accounts",
            filters=filters,
            search=request.args.get("search") or None,
            search_columns=("account_name",),
            order_by=page.sort_by,
            descending=page.descending,
            offset=page.offset,
            limit=page.page_size,
        )
        for row in rows:
            _, row["contactCount"] = store.select(
                "contacts", filters={"account_id": row["id"]}, limit=0,
            )
    except DataStoreError as e:
        raise translate_store_error(e, "Account") from e

    return success(rows, page.metadata(total))


@accounts_bp.route("/accounts", methods=["POST"])
def api_accounts_create():  # type: ignore[no-untyped-def]
    body = parse_body(AccountCreate)
    try:
        account = get_store().insert("accounts", body.model_dump(mode="json"))
    except DataStoreError as e:
        raise translate_store_error(e, "Account") from e

    logger.info("Created account %s (%s)", account["id"], account["account_number"])
    return success(account, status=201)


@accounts_bp.route("/accounts/<account_id>")
def api_account_get(account_id: str):  # type: ignore[no-untyped-def]
    store = get_store()
    try:
        account = store.get("accounts", account_id)
        contacts, _ = store.select(
            "contacts", filters={"account_id": account_id}, order_by="last_name", descending=False,
        )
    except DataStoreError as e:
        raise translate_store_error(e, "Account") from e

    account["contacts"] = contacts
    return success(account)


@accounts_bp.route("/accounts/<account_id>", methods=["PATCH"])
def api_account_update(account_id: str):  # type: ignore[no-untyped-def]
    changes = parse_body(AccountUpdate).changes()
    if not changes:
        raise ValidationError("Validation failed", {"body": ["No fields to update"]})
    try:
        account = get_store().update("accounts", account_id, changes)
    except DataStoreError as e:
        raise translate_store_error(e, "Account") from e
    return success(account)


@accounts_bp.route("/accounts/<account_id>", methods=["DELETE"])
def api_account_delete(account_id: str):  # type: ignore[no-untyped-def]
    try:
        get_store().delete("accounts", account_id)
    except DataStoreError as e:
        raise translate_store_error(e, "Account") from e

    logger.info("Deleted account %s", account_id)
    return "", 204
