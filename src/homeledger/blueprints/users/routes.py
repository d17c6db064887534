"""User routes.

Signup cannot go through ``require_auth``: in ``firebase`` mode the token's
uid has no ``users`` row yet, which is exactly what signup creates.
"""

from __future__ import annotations

from flask import current_app, jsonify, request

from ... import auth
from ...config import BaseConfig
from ...extensions import session_scope
from ...services import users as user_service
from ..serializers import serialize_user
from . import bp


def _optional_str(payload: dict, key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@bp.post("")
def signup():
    """Create the account for the bearer token (201) or return the existing one (200)."""

    config: BaseConfig = current_app.config["HOMELEDGER_CONFIG"]
    token = auth.extract_bearer_token(request.headers.get("Authorization"))
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}

    if config.AUTH_MODE == "shared":
        with session_scope() as session:
            user = user_service.get_user(session, auth.resolve_shared_user_id(session, config))
            user_service.seed_defaults(session, user)
            body = serialize_user(user)
        return jsonify(body), 200

    claims = auth.decode_firebase_token(token, config)
    with session_scope() as session:
        user, created = user_service.signup(
            session,
            firebase_uid=claims["uid"],
            email=claims.get("email") or _optional_str(payload, "email"),
            display_name=_optional_str(payload, "displayName") or claims.get("name"),
            photo_url=_optional_str(payload, "photoURL") or claims.get("picture"),
        )
        body = serialize_user(user)
    return jsonify(body), 201 if created else 200


@bp.get("/me")
def me():
    user_id = auth.verify_auth()
    with session_scope() as session:
        body = serialize_user(user_service.get_user(session, user_id))
    return jsonify(body)
