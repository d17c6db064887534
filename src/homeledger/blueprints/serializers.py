"""camelCase JSON projections of the ledger tables."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from ..models import (
    Asset,
    AssetBalanceHistory,
    CardMonthlyPayment,
    Transaction,
    User,
)


def _id(value: uuid.UUID | None) -> str | None:
    return str(value) if value is not None else None


def _money(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def serialize_transaction(txn: Transaction) -> dict[str, Any]:
    return {
        "id": _id(txn.id),
        "date": _iso(txn.occurred_on),
        "type": txn.type,
        "amount": _money(txn.amount),
        "assetId": _id(txn.asset_id),
        "toAssetId": _id(txn.to_asset_id),
        "categoryId": _id(txn.category_id),
        "cardId": _id(txn.card_id),
        "memo": txn.memo,
        "balanceApplied": txn.balance_applied,
        "createdAt": _iso(txn.created_at),
        "updatedAt": _iso(txn.updated_at),
    }


def serialize_asset(asset: Asset) -> dict[str, Any]:
    return {
        "id": _id(asset.id),
        "name": asset.name,
        "type": asset.type,
        "balance": _money(asset.balance),
        "initialBalance": _money(asset.initial_balance),
        "createdAt": _iso(asset.created_at),
        "updatedAt": _iso(asset.updated_at),
    }


def serialize_history(entry: AssetBalanceHistory) -> dict[str, Any]:
    return {
        "id": _id(entry.id),
        "assetId": _id(entry.asset_id),
        "transactionId": _id(entry.transaction_id),
        "reason": entry.reason,
        "previousBalance": _money(entry.previous_balance),
        "newBalance": _money(entry.new_balance),
        "changeAmount": _money(entry.change_amount),
        "changedAt": _iso(entry.changed_at),
    }


def serialize_user(user: User) -> dict[str, Any]:
    return {
        "id": _id(user.id),
        "firebaseUid": user.firebase_uid,
        "email": user.email,
        "displayName": user.display_name,
        "photoURL": user.photo_url,
        "createdAt": _iso(user.created_at),
        "updatedAt": _iso(user.updated_at),
    }


def serialize_card_payment(payment: CardMonthlyPayment) -> dict[str, Any]:
    return {
        "id": _id(payment.id),
        "cardId": _id(payment.card_id),
        "month": payment.month,
        "expectedAmount": _money(payment.expected_amount),
        "memo": payment.memo,
        "createdAt": _iso(payment.created_at),
        "updatedAt": _iso(payment.updated_at),
    }
