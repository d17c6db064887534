"""Card monthly payment routes."""

from __future__ import annotations

from typing import Any

from flask import jsonify, request

from ...auth import current_user_id
from ...errors import ValidationError
from ...extensions import session_scope
from ...services import card_payments as payment_service
from ..api import json_body, parse_uuid, require_id_arg
from ..serializers import serialize_card_payment
from ..transactions.forms import parse_amount
from . import bp


def _payment_fields(payload: dict[str, Any], *, partial: bool) -> dict[str, Any]:
    errors: dict[str, list[str]] = {}
    fields: dict[str, Any] = {}

    for key in ("cardId", "month", "expectedAmount"):
        if not partial and payload.get(key) in (None, ""):
            errors.setdefault(key, []).append(f"{key} is required.")

    if payload.get("cardId") not in (None, ""):
        fields["card_id"] = parse_uuid(payload["cardId"], field="cardId")
    if payload.get("month") not in (None, ""):
        fields["month"] = str(payload["month"]).strip()
    if payload.get("expectedAmount") not in (None, ""):
        try:
            amount = parse_amount(payload["expectedAmount"])
        except ValueError:
            errors.setdefault("expectedAmount", []).append("Enter a valid number.")
        else:
            if amount < 0:
                errors.setdefault("expectedAmount", []).append("expectedAmount cannot be negative.")
            fields["expected_amount"] = amount
    if "memo" in payload:
        fields["memo"] = str(payload.get("memo") or "").strip()[:255]

    if errors:
        raise ValidationError("Invalid card payment payload", fields=errors)
    return fields


@bp.get("")
def list_payments():
    month = (request.args.get("month") or "").strip()
    if not month:
        raise ValidationError("month is required", code="MISSING_MONTH")
    with session_scope() as session:
        payload = [
            serialize_card_payment(payment)
            for payment in payment_service.list_payments(
                session, user_id=current_user_id(), month=month
            )
        ]
    return jsonify(payload)


@bp.post("")
def create_payment():
    fields = _payment_fields(json_body(), partial=False)
    fields["memo"] = fields.get("memo") or None
    with session_scope() as session:
        payment = payment_service.create_payment(session, user_id=current_user_id(), **fields)
        payload = serialize_card_payment(payment)
    return jsonify(payload), 201


@bp.put("")
def update_payment():
    payment_id = require_id_arg()
    fields = _payment_fields(json_body(), partial=True)
    with session_scope() as session:
        payment = payment_service.update_payment(
            session, payment_id, user_id=current_user_id(), **fields
        )
        payload = serialize_card_payment(payment)
    return jsonify(payload)


@bp.delete("")
def delete_payment():
    payment_id = require_id_arg()
    with session_scope() as session:
        payment_service.delete_payment(session, payment_id, user_id=current_user_id())
    return jsonify({"success": True})
