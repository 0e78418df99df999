"""Application factory for the irishtax backend."""

from __future__ import annotations

import logging

from flask import Flask, jsonify

from .http import register_error_handlers
from .routes import register_routes
from .routes.config import get_configuration_metadata

_LOGGER = logging.getLogger(__name__)


def create_app() -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__)

    register_routes(app)
    register_error_handlers(app)

    @app.get("/health")
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        payload = {"status": "ok", **get_configuration_metadata()}
        return jsonify(payload)

    _LOGGER.debug("Registered routes: %s", sorted(rule.rule for rule in app.url_map.iter_rules()))
    return app
