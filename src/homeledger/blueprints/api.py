"""Request plumbing shared by every ``/api`` blueprint.

Covers CORS headers, request ids, JSON error bodies and the small parsing
helpers the routes use for query strings and JSON payloads.
"""

from __future__ import annotations

import uuid
from typing import Any

from flask import Flask, current_app, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..config import BaseConfig
from ..errors import HttpError, ValidationError
from ..logging_config import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADERS = ("X-Request-Id", "X-Vercel-Id")


def get_request_id() -> str:
    """Return the id of the current request, assigning one on first use."""

    request_id = g.get("request_id")
    if request_id:
        return request_id
    for header in REQUEST_ID_HEADERS:
        value = (request.headers.get(header) or "").strip()
        if value:
            request_id = value
            break
    else:
        request_id = str(uuid.uuid4())
    g.request_id = request_id
    return request_id


def _config() -> BaseConfig:
    return current_app.config["HOMELEDGER_CONFIG"]


def error_response(status: int, code: str, message: str, **extra: Any):
    body: dict[str, Any] = {"error": message, "code": code, "requestId": get_request_id()}
    body.update(extra)
    return jsonify(body), status


def register_api_hooks(app: Flask) -> None:
    """Attach CORS, preflight, request-id and error handling to the app."""

    @app.before_request
    def _preflight():
        get_request_id()
        if request.method == "OPTIONS":
            return "", 204
        return None

    @app.after_request
    def _cors(response):
        config = _config()
        response.headers["Access-Control-Allow-Origin"] = config.CORS_ORIGIN
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
        response.headers["Access-Control-Max-Age"] = "86400"
        response.headers["X-Request-Id"] = get_request_id()
        return response

    @app.errorhandler(HttpError)
    def _handle_http_error(exc: HttpError):
        log = logger.error if exc.status >= 500 else logger.warning
        log(
            "API error",
            extra={
                "request_id": get_request_id(),
                "code": exc.code,
                "status": exc.status,
                "path": request.path,
                "method": request.method,
            },
        )
        extra: dict[str, Any] = {}
        if isinstance(exc, ValidationError) and exc.fields:
            extra["fields"] = exc.fields
        message = exc.message
        if exc.status >= 500 and _config().is_production:
            message = "Internal server error"
        return error_response(exc.status, exc.code, message, **extra)

    @app.errorhandler(HTTPException)
    def _handle_werkzeug_error(exc: HTTPException):
        code = (exc.name or "HTTP_ERROR").upper().replace(" ", "_")
        return error_response(exc.code or 500, code, exc.description or exc.name)

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception(
            "Unhandled error",
            extra={"request_id": get_request_id(), "path": request.path, "method": request.method},
        )
        message = "Internal server error" if _config().is_production else str(exc)
        return error_response(500, "INTERNAL_ERROR", message)


def json_body() -> dict[str, Any]:
    """Return the request JSON object or raise a 400."""

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object", code="INVALID_JSON")
    return payload


def parse_uuid(value: Any, *, field: str) -> uuid.UUID:
    """Parse an id from a query string or payload value."""

    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except (TypeError, ValueError, AttributeError):
        raise ValidationError(f"{field} must be a valid UUID", code="INVALID_ID") from None


def require_id_arg(name: str = "id") -> uuid.UUID:
    """Return the ``?id=`` query parameter as a UUID, 400 when absent."""

    raw = (request.args.get(name) or "").strip()
    if not raw:
        raise ValidationError(f"Missing {name}", code="MISSING_ID")
    return parse_uuid(raw, field=name)


__all__ = [
    "error_response",
    "get_request_id",
    "json_body",
    "parse_uuid",
    "register_api_hooks",
    "require_id_arg",
]
