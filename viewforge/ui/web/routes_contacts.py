"""
Contact routes.

GET    /api/accounts/<account_id>/contacts  → contacts ordered by last name
POST   /api/accounts/<account_id>/contacts  → create a contact
GET    /api/contacts/<id>                   → one contact
PATCH  /api/contacts/<id>                   → partial update
DELETE /api/contacts/<id>                   → delete

An account has at most one primary contact: marking a contact primary
clears the flag on the account's other contacts.
"""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify

from viewforge.core.datastore.errors import ValidationError, translate_store_error
from viewforge.core.datastore.store import DataStore, DataStoreError, is_uuid
from viewforge.core.models.records import ContactCreate, ContactUpdate
from viewforge.ui.web.helpers import get_store, parse_body

logger = logging.getLogger(__name__)

contacts_bp = Blueprint("contacts", __name__)


def _check_account_id(account_id: str) -> None:
    if not is_uuid(account_id):
        raise ValidationError("Invalid account ID format")


def _clear_primary(store: DataStore, account_id: str, keep: str | None = None) -> None:
    current, _ = store.select(
        "contacts", filters={"account_id": account_id, "is_primary_contact": True},
    )
    for contact in current:
        if contact["id"] != keep:
            store.update("contacts", contact["id"], {"is_primary_contact": False})


@contacts_bp.route("/accounts/<account_id>/contacts")
def api_contacts_list(account_id: str):  # type: ignore[no-untyped-def]
    _check_account_id(account_id)
    try:
        contacts, _ = get_store().select(
            "contacts", filters={"account_id": account_id}, order_by="last_name",
        )
    except DataStoreError as e:
        raise translate_store_error(e, "Contact") from e
    return jsonify({"contacts": contacts})


@contacts_bp.route("/accounts/<account_id>/contacts", methods=["POST"])
def api_contacts_create(account_id: str):  # type: ignore[no-untyped-def]
    _check_account_id(account_id)
    body = parse_body(ContactCreate)
    store = get_store()
    try:
        store.get("accounts", account_id)
        contact = store.insert("contacts", {"account_id": account_id, **body.model_dump(mode="json")})
        if body.is_primary_contact:
            _clear_primary(store, account_id, keep=contact["id"])
    except DataStoreError as e:
        raise translate_store_error(e, "Account") from e

    logger.info("Created contact %s for account %s", contact["id"], account_id)
    return jsonify({"contact": contact}), 201


@contacts_bp.route("/contacts/<contact_id>")
def api_contact_get(contact_id: str):  # type: ignore[no-untyped-def]
    try:
        contact = get_store().get("contacts", contact_id)
    except DataStoreError as e:
        raise translate_store_error(e, "Contact") from e
    return jsonify({"contact": contact})


@contacts_bp.route("/contacts/<contact_id>", methods=["PATCH"])
def api_contact_update(contact_id: str):  # type: ignore[no-untyped-def]
    changes = parse_body(ContactUpdate).changes()
    if not changes:
        raise ValidationError("Validation failed", {"body": ["No fields to update"]})

    store = get_store()
    try:
        contact = store.update("contacts", contact_id, changes)
        if changes.get("is_primary_contact"):
            _clear_primary(store, contact["account_id"], keep=contact_id)
    except DataStoreError as e:
        raise translate_store_error(e, "Contact") from e
    return jsonify({"contact": contact})


@contacts_bp.route("/contacts/<contact_id>", methods=["DELETE"])
def api_contact_delete(contact_id: str):  # type: ignore[no-untyped-def]
    try:
        get_store().delete("contacts", contact_id)
    except DataStoreError as e:
        raise translate_store_error(e, "Contact") from e

    logger.info("Deleted contact %s", contact_id)
    return "", 204
