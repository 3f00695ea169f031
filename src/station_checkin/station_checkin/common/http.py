from __future__ import annotations

import logging
from typing import Any

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def json_body() -> dict[str, Any]:
    """Request JSON as a dict; anything else (missing, list, bad JSON) is ``{}``."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def error_response(exc: DomainError):
    return jsonify({"error": exc.code, "reason": exc.reason}), exc.http_status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return error_response(exc)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        logger.exception("unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "server_error"}), 500
