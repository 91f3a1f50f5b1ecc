"""
Web API server — Flask app factory.

Serves the CRUD API for accounts, contacts and work orders plus a view
preview endpoint. Every route lives under ``/api`` and answers in JSON.
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from viewforge.core.datastore.errors import ApiError, translate_store_error
from viewforge.core.datastore.store import DataStore, DataStoreError, MemoryStore
from viewforge.core.models.settings import Settings

logger = logging.getLogger(__name__)


def create_app(store: DataStore | None = None, settings: Settings | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        store: Data store backing the API (default: a fresh MemoryStore).
        settings: viewforge settings (default: built-in defaults).
    """
    app = Flask(__name__)
    app.config["DATA_STORE"] = store if store is not None else MemoryStore()
    app.config["VIEWFORGE_SETTINGS"] = settings or Settings()
    app.json.sort_keys = False

    from viewforge.ui.web.routes_accounts import accounts_bp
    from viewforge.ui.web.routes_api import api_bp
    from viewforge.ui.web.routes_contacts import contacts_bp
    from viewforge.ui.web.routes_work_orders import work_orders_bp

    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(accounts_bp, url_prefix="/api")
    app.register_blueprint(contacts_bp, url_prefix="/api")
    app.register_blueprint(work_orders_bp, url_prefix="/api")

    @app.errorhandler(ApiError)
    def _api_error(error: ApiError):  # type: ignore[no-untyped-def]
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(DataStoreError)
    def _store_error(error: DataStoreError):  # type: ignore[no-untyped-def]
        api_error = translate_store_error(error)
        return jsonify(api_error.to_dict()), api_error.status_code

    @app.errorhandler(HTTPException)
    def _http_error(error: HTTPException):  # type: ignore[no-untyped-def]
        return jsonify({"error": error.description or error.name}), error.code

    logger.info("Web API app created (store=%s)", type(app.config["DATA_STORE"]).__name__)
    return app


def run_server(
    app: Flask,
    host: str = "127.0.0.1",
    port: int = 8000,
    debug: bool = False,
) -> None:
    """Run the Flask development server."""
    logger.info("Starting web API on %s:%d", host, port)
    app.run(host=host, port=port, debug=debug, use_reloader=False)
