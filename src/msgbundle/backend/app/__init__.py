"""Application factory for the msgbundle HTTP service."""

import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest

from msgbundle.backend.config.settings import load_settings

from .http import problem_response, resource_unavailable
from .localization import ResourceNotFoundError
from .routes import register_routes
from .routes.config import get_configuration_metadata

_LOGGER = logging.getLogger(__name__)


def create_app() -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__)
    settings = load_settings()

    if not settings.allowed_origins:
        _LOGGER.warning("No allowed origins configured; cross-origin requests will be rejected.")

    CORS(
        app,
        resources={r"/api/*": {"origins": sorted(settings.allowed_origins)}},
        supports_credentials=False,
        methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Accept-Language"],
    )

    register_routes(app)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        payload = {"status": "ok", **get_configuration_metadata()}
        return jsonify(payload)

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        """Return consistent JSON responses for malformed requests."""

        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(ResourceNotFoundError)
    def handle_missing_resource(error: ResourceNotFoundError):
        """Surface unopenable bundles as a server-side configuration fault."""

        _LOGGER.error("Resource bundle unavailable: %s", error)
        return resource_unavailable(error).to_response()

    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        """Report invalid locale tags and similar input problems."""

        return problem_response(
            "validation_error", status=400, message=str(error)
        ).to_response()

    return app
