"""Bearer-token authentication backed by Firebase Admin.

``verify_auth`` turns the ``Authorization`` header of the current request into
the id of a ``users`` row. In ``firebase`` mode the ID token is verified with
the Admin SDK; in ``shared`` mode any non-empty token maps onto a single
shared dataset, which is how single-household deployments run without
service-account credentials.
"""

from __future__ import annotations

import threading
import uuid
from typing import Any

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from flask import current_app, g, request
from sqlmodel import Session, select

from .config import BaseConfig
from .constants import SHARED_FIREBASE_UID
from .errors import AuthenticationError, ConfigurationError, HttpError
from .extensions import session_scope
from .logging_config import get_logger
from .models import User

logger = get_logger(__name__)

_firebase_app: firebase_admin.App | None = None
_firebase_lock = threading.Lock()


def get_firebase_app(config: BaseConfig) -> firebase_admin.App:
    """Initialize the Firebase Admin app once per process."""

    global _firebase_app
    if _firebase_app is not None:
        return _firebase_app

    with _firebase_lock:
        if _firebase_app is not None:
            return _firebase_app
        cert = config.firebase_credentials()
        if cert is None:
            raise ConfigurationError(
                "Missing Firebase Admin credentials. Set FIREBASE_PROJECT_ID, "
                "FIREBASE_CLIENT_EMAIL and FIREBASE_PRIVATE_KEY.",
                code="FIREBASE_NOT_CONFIGURED",
            )
        try:
            _firebase_app = firebase_admin.get_app()
        except ValueError:
            _firebase_app = firebase_admin.initialize_app(credentials.Certificate(cert))
            logger.info("Firebase Admin SDK initialized", extra={"project_id": cert["project_id"]})
    return _firebase_app


def extract_bearer_token(header: str | None) -> str:
    """Return the token part of ``Authorization: Bearer <token>``."""

    if not header or not header.startswith("Bearer "):
        raise AuthenticationError(
            "Authorization header with Bearer token is required", code="MISSING_TOKEN"
        )
    token = header[len("Bearer "):].strip()
    if not token:
        raise AuthenticationError("Token is empty", code="INVALID_TOKEN")
    return token


def decode_firebase_token(token: str, config: BaseConfig) -> dict[str, Any]:
    """Verify a Firebase ID token and return its claims."""

    app = get_firebase_app(config)
    try:
        return firebase_auth.verify_id_token(token, app=app)
    except firebase_auth.ExpiredIdTokenError:
        raise AuthenticationError("Token has expired", code="TOKEN_EXPIRED") from None
    except (firebase_auth.InvalidIdTokenError, ValueError):
        raise AuthenticationError("Invalid token", code="INVALID_TOKEN") from None


def resolve_shared_user_id(session: Session, config: BaseConfig) -> uuid.UUID:
    """Pick the user that owns the shared dataset, creating it on first use."""

    if config.SHARED_USER_ID:
        try:
            return uuid.UUID(config.SHARED_USER_ID)
        except ValueError:
            raise ConfigurationError(
                "SHARED_USER_ID must be a UUID", code="SHARED_USER_INVALID"
            ) from None

    existing = session.exec(select(User).order_by(User.created_at).limit(1)).first()
    if existing is not None:
        return existing.id

    user = User(firebase_uid=SHARED_FIREBASE_UID, email="shared@local", display_name="Shared User")
    session.add(user)
    session.flush()
    logger.info("Shared user created", extra={"user_id": str(user.id)})
    return user.id


def user_id_for_token(session: Session, token: str, config: BaseConfig) -> uuid.UUID:
    if config.AUTH_MODE == "shared":
        return resolve_shared_user_id(session, config)

    claims = decode_firebase_token(token, config)
    user = session.exec(select(User).where(User.firebase_uid == claims["uid"])).first()
    if user is None:
        raise AuthenticationError("User not found", code="USER_NOT_FOUND")
    return user.id


def verify_auth() -> uuid.UUID:
    """Authenticate the current request and return the database user id."""

    config: BaseConfig = current_app.config["HOMELEDGER_CONFIG"]
    try:
        token = extract_bearer_token(request.headers.get("Authorization"))
        with session_scope() as session:
            return user_id_for_token(session, token, config)
    except AuthenticationError as exc:
        logger.warning("Authentication rejected", extra={"code": exc.code, "path": request.path})
        raise
    except HttpError:
        raise
    except Exception as exc:
        logger.exception("Unexpected error during authentication")
        raise HttpError("Authentication failed", code="AUTH_ERROR") from exc


def require_auth() -> None:
    """``before_request`` hook storing the authenticated user id on ``g``."""

    g.user_id = verify_auth()


def current_user_id() -> uuid.UUID:
    return g.user_id
