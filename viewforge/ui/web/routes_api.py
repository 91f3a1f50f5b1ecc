"""
General API routes.

GET  /api/health        → service status
POST /api/views/render  → markup for a view configuration in the body
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from flask import Blueprint, jsonify, request

from viewforge import __version__
from viewforge.core.config.schema import ConfigurationError
from viewforge.core.datastore.errors import ValidationError
from viewforge.core.services.field_enrichment import component_name
from viewforge.core.services.view_parser import parse_configuration
from viewforge.core.use_cases.generate import render_view
from viewforge.ui.web.helpers import get_settings, get_store

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.route("/health")
def api_health():  # type: ignore[no-untyped-def]
    """Liveness check with the store backend in use."""
    return jsonify({
        "status": "healthy",
        "version": __version__,
        "store": type(get_store()).__name__,
        "timestamp": datetime.now(UTC).isoformat(),
    })


@api_bp.route("/views/render", methods=["POST"])
def api_view_render():  # type: ignore[no-untyped-def]
    """Render a view configuration with sample data.

    The body is a view configuration; ``?layout=`` overrides its layout.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Validation failed", {"body": ["Request body must be a JSON object"]})

    layout = request.args.get("layout")
    if layout:
        current = payload.get("layout")
        base = current if isinstance(current, dict) else {}
        payload = {**payload, "layout": {**base, "type": layout}}

    try:
        config = parse_configuration(payload, source="request")
    except ConfigurationError as e:
        raise ValidationError("Invalid view configuration", {"config": e.violations}) from e

    markup = render_view(config, get_settings())
    return jsonify({
        "component": component_name(config),
        "layout": config.layout.type,
        "markup": markup,
    })
