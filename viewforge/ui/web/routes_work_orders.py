"""
Work order routes.

GET   /api/work-orders       → paginated list (status, priority, accountId, search)
POST  /api/work-orders       → create
GET   /api/work-orders/<id>  → one work order
PATCH /api/work-orders/<id>  → partial update; status moves must follow
                               the work-order transition table
"""

from __future__ import annotations

import logging

from flask import Blueprint, request

from viewforge.core.datastore.errors import ValidationError, translate_store_error
from viewforge.core.datastore.store import DataStoreError
from viewforge.core.models.records import WORK_ORDER_TRANSITIONS, WorkOrderCreate, WorkOrderUpdate
from viewforge.ui.web.helpers import get_store, page_params, parse_body, success

logger = logging.getLogger(__name__)

work_orders_bp = Blueprint("work_orders", __name__)

_SORTABLE = ("created_at", "updated_at", "work_order_number", "scheduled_date", "priority", "status")


@work_orders_bp.route("/work-orders")
def api_work_orders_list():  # type: ignore[no-untyped-def]
    page = page_params(_SORTABLE)
    filters = {
        "status": request.args.get("status") or None,
        "priority": request.args.get("priority") or None,
        "account_id": request.args.get("accountId") or None,
    }
    try:
        rows, total = get_store().select(
            "work_orders",
            filters=filters,
            search=request.args.get("search") or None,
            search_columns=("work_order_number", "title"),
            order_by=page.sort_by,
            descending=page.descending,
            offset=page.offset,
            limit=page.page_size,
        )
    except DataStoreError as e:
        raise translate_store_error(e, "Work order") from e
    return success(rows, page.metadata(total))


@work_orders_bp.route("/work-orders", methods=["POST"])
def api_work_orders_create():  # type: ignore[no-untyped-def]
    body = parse_body(WorkOrderCreate)
    try:
        order = get_store().insert("work_orders", body.model_dump(mode="json"))
    except DataStoreError as e:
        raise translate_store_error(e, "Work order") from e

    logger.info("Created work order %s (%s)", order["id"], order["work_order_number"])
    return success(order, status=201)


@work_orders_bp.route("/work-orders/<order_id>")
def api_work_order_get(order_id: str):  # type: ignore[no-untyped-def]
    try:
        order = get_store().get("work_orders", order_id)
    except DataStoreError as e:
        raise translate_store_error(e, "Work order") from e
    return success(order)


@work_orders_bp.route("/work-orders/<order_id>", methods=["PATCH"])
def api_work_order_update(order_id: str):  # type: ignore[no-untyped-def]
    changes = parse_body(WorkOrderUpdate).changes()
    if not changes:
        raise ValidationError("Validation failed", {"body": ["No fields to update"]})

    store = get_store()
    try:
        current = store.get("work_orders", order_id)
        new_status = changes.get("status")
        if new_status and new_status != current["status"]:
            allowed = WORK_ORDER_TRANSITIONS.get(current["status"], [])
            if new_status not in allowed:
                raise ValidationError(
                    "Validation failed",
                    {"status": [
                        f"Cannot change status from '{current['status']}' to '{new_status}'"
                    ]},
                )
        order = store.update("work_orders", order_id, changes)
    except DataStoreError as e:
        raise translate_store_error(e, "Work order") from e

    return success(order)
