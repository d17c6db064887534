"""Transaction routes."""

from __future__ import annotations

from flask import jsonify, request

from ...auth import current_user_id
from ...errors import ValidationError
from ...extensions import session_scope
from ...services import transactions as transaction_service
from ..api import json_body, require_id_arg
from ..serializers import serialize_transaction
from . import bp
from .forms import TransactionForm, parse_date


def _bound_form(*, partial: bool) -> TransactionForm:
    form = TransactionForm.from_mapping(json_body(), partial=partial)
    if not form.validate():
        raise ValidationError("Invalid transaction payload", fields=form.errors)
    return form


def _date_arg(name: str):
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    try:
        return parse_date(raw)
    except ValueError:
        raise ValidationError(f"{name} must use the yyyy-MM-dd format", code="INVALID_DATE") from None


@bp.get("")
def list_transactions():
    """List transactions, optionally for one month or a date range."""

    month = (request.args.get("month") or "").strip()
    if month:
        start_date, end_date = transaction_service.month_bounds(month)
    else:
        start_date, end_date = _date_arg("startDate"), _date_arg("endDate")

    with session_scope() as session:
        rows = transaction_service.list_transactions(
            session, user_id=current_user_id(), start_date=start_date, end_date=end_date
        )
        payload = [serialize_transaction(row) for row in rows]
    return jsonify(payload)


@bp.post("")
def create_transaction():
    """Create a transaction and move the affected asset balances."""

    form = _bound_form(partial=False)
    with session_scope() as session:
        txn = transaction_service.create_transaction(
            session, user_id=current_user_id(), values=form.changes()
        )
        payload = serialize_transaction(txn)
    return jsonify(payload), 201


@bp.put("")
def update_transaction():
    """Partially update a transaction, re-posting balances when money fields change."""

    transaction_id = require_id_arg()
    form = _bound_form(partial=True)
    with session_scope() as session:
        txn = transaction_service.update_transaction(
            session, transaction_id, user_id=current_user_id(), values=form.changes()
        )
        payload = serialize_transaction(txn)
    return jsonify(payload)


@bp.delete("")
def delete_transaction():
    """Restore balances and delete the transaction."""

    transaction_id = require_id_arg()
    with session_scope() as session:
        transaction_service.delete_transaction(session, transaction_id, user_id=current_user_id())
    return jsonify({"success": True})
