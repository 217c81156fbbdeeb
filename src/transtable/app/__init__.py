"""Application factory for the transtable HTTP API."""

from __future__ import annotations

import logging
import os
from http import HTTPStatus
from typing import Any, Mapping

from flask import Flask, jsonify
from werkzeug.exceptions import BadRequest, RequestEntityTooLarge

from transtable.config.schema import ConfigurationError
from transtable.errors import TranslationError
from transtable.version import get_project_version

from .http import problem_from_error, problem_response
from .routes import register_routes

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 16 * 1024 * 1024


def _parse_positive_int(value: str | None, *, env: str) -> int | None:
    if value is None or not value.strip():
        return None
    try:
        parsed = int(value)
    except ValueError:
        logger.warning("Ignoring invalid value for %s: %s", env, value)
        return None
    if parsed <= 0:
        logger.warning("Ignoring non-positive value for %s: %s", env, value)
        return None
    return parsed


def create_app(config: Mapping[str, Any] | None = None) -> Flask:
    """Create and configure the Flask application instance.

    ``TRANSTABLE_MANIFEST`` and ``TRANSTABLE_MAX_UPLOAD_BYTES`` are read from
    the environment; explicit ``config`` values take precedence.
    """

    app = Flask(__name__)

    max_upload = _parse_positive_int(
        os.getenv("TRANSTABLE_MAX_UPLOAD_BYTES"), env="TRANSTABLE_MAX_UPLOAD_BYTES"
    )
    app.config.update(
        TRANSTABLE_MANIFEST=os.getenv("TRANSTABLE_MANIFEST") or None,
        MAX_CONTENT_LENGTH=max_upload or DEFAULT_MAX_UPLOAD_BYTES,
    )
    if config:
        app.config.update(config)

    register_routes(app)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        payload = {
            "status": "ok",
            "version": get_project_version(),
            "manifest_configured": bool(app.config.get("TRANSTABLE_MANIFEST")),
        }
        return jsonify(payload)

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        """Return consistent JSON responses for malformed requests."""

        message = error.description or "Invalid request"
        return problem_response("bad_request", status=HTTPStatus.BAD_REQUEST, message=message).to_response()

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error: RequestEntityTooLarge):
        return problem_response(
            "payload_too_large",
            status=HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
            message="Uploaded file exceeds the configured size limit",
        ).to_response()

    @app.errorhandler(TranslationError)
    @app.errorhandler(ConfigurationError)
    def handle_pipeline_error(error: Exception):
        """Surface import/export failures with their locating context."""

        problem = problem_from_error(error)
        if problem.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error("Translation pipeline failed: %s", error)
        return problem.to_response()

    return app
