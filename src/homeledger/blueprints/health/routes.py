"""Health routes; no authentication required."""

from __future__ import annotations

from flask import jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ...errors import HttpError
from ...extensions import get_engine
from ...logging_config import get_logger
from ...models._base import utcnow
from . import bp

logger = get_logger(__name__)


@bp.get("/ping")
def ping():
    return jsonify({"ok": True, "timestamp": utcnow().isoformat()})


@bp.get("/db-health")
def db_health():
    """Run ``SELECT 1`` against the configured database."""

    try:
        with get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Database health check failed", extra={"error": str(exc)})
        raise HttpError("Database unavailable", code="DB_UNAVAILABLE", status=503) from exc
    return jsonify({"ok": True, "database": get_engine().dialect.name})
