"""Asset and balance-history routes."""

from __future__ import annotations

from flask import current_app, jsonify, request

from ...auth import current_user_id
from ...errors import ValidationError
from ...extensions import session_scope
from ...models._base import ZERO
from ...services import assets as asset_service
from ..api import json_body, parse_uuid, require_id_arg
from ..serializers import serialize_asset, serialize_history
from . import bp
from .forms import AssetForm


def _bound_form(*, partial: bool) -> AssetForm:
    form = AssetForm.from_mapping(json_body(), partial=partial)
    if not form.validate():
        raise ValidationError("Invalid asset payload", fields=form.errors)
    return form


@bp.get("/assets")
def list_assets():
    with session_scope() as session:
        payload = [
            serialize_asset(asset)
            for asset in asset_service.list_assets(session, user_id=current_user_id())
        ]
    return jsonify(payload)


@bp.post("/assets")
def create_asset():
    """Create an asset; ``balance`` defaults to ``initialBalance``."""

    form = _bound_form(partial=False)
    with session_scope() as session:
        asset = asset_service.create_asset(
            session,
            user_id=current_user_id(),
            name=form.name,
            type=form.type,
            initial_balance=form.initial_balance if form.initial_balance is not None else ZERO,
            balance=form.balance,
        )
        payload = serialize_asset(asset)
    return jsonify(payload), 201


@bp.put("/assets")
def update_asset():
    asset_id = require_id_arg()
    form = _bound_form(partial=True)
    with session_scope() as session:
        asset = asset_service.update_asset(
            session,
            asset_id,
            user_id=current_user_id(),
            name=form.name,
            type=form.type,
            initial_balance=form.initial_balance,
            balance=form.balance,
        )
        payload = serialize_asset(asset)
    return jsonify(payload)


@bp.delete("/assets")
def delete_asset():
    asset_id = require_id_arg()
    with session_scope() as session:
        asset_service.delete_asset(session, asset_id, user_id=current_user_id())
    return jsonify({"success": True})


@bp.get("/asset-balance-history")
def asset_balance_history():
    """Latest balance changes for ``?assetId=``, newest first."""

    raw = (request.args.get("assetId") or "").strip()
    if not raw:
        raise ValidationError("Missing assetId", code="MISSING_ID")
    asset_id = parse_uuid(raw, field="assetId")
    limit = current_app.config["HOMELEDGER_CONFIG"].HISTORY_PAGE_SIZE

    with session_scope() as session:
        user_id = current_user_id()
        asset_service.get_asset(session, asset_id, user_id=user_id)
        payload = [
            serialize_history(entry)
            for entry in asset_service.balance_history(
                session, asset_id, user_id=user_id, limit=limit
            )
        ]
    return jsonify(payload)
