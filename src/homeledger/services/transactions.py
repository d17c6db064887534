"""Transaction persistence with balance bookkeeping.

Each public function runs on the caller's session; the routes open one
``session_scope`` per request so the row write and every balance change it
causes commit atomically.
"""

from __future__ import annotations

import uuid
from calendar import monthrange
from datetime import date, datetime
from typing import Any, Mapping

from sqlmodel import Session, select

from ..constants import BalanceChangeReason, CardType, TransactionType
from ..errors import DanglingAssetReference, NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models import Asset, Category, CreditCard, Transaction
from ..models._base import utcnow
from .balances import (
    apply_transaction,
    post_legs,
    reverse_transaction,
    reversed_legs,
    transaction_legs,
)

logger = get_logger(__name__)

# Changing any of these moves money, so an update must reverse and re-post.
BALANCE_FIELDS = frozenset({"type", "amount", "asset_id", "to_asset_id", "card_id"})


def month_bounds(month: str) -> tuple[date, date]:
    """Return the first and last day of a ``yyyy-MM`` month."""

    try:
        start = datetime.strptime(month, "%Y-%m").date()
    except ValueError:
        raise ValidationError("month must use the yyyy-MM format", code="INVALID_MONTH") from None
    last_day = monthrange(start.year, start.month)[1]
    return start, start.replace(day=last_day)


def list_transactions(
    session: Session,
    *,
    user_id: uuid.UUID,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[Transaction]:
    """Return the user's transactions, newest date first."""

    statement = select(Transaction).where(Transaction.user_id == user_id)
    if start_date is not None:
        statement = statement.where(Transaction.occurred_on >= start_date)
    if end_date is not None:
        statement = statement.where(Transaction.occurred_on <= end_date)
    statement = statement.order_by(
        Transaction.occurred_on.desc(), Transaction.created_at.desc()  # type: ignore[union-attr]
    )
    return list(session.exec(statement).all())


def get_transaction(session: Session, transaction_id: uuid.UUID, *, user_id: uuid.UUID) -> Transaction:
    txn = session.exec(
        select(Transaction)
        .where(Transaction.id == transaction_id)
        .where(Transaction.user_id == user_id)
    ).first()
    if txn is None:
        raise NotFoundError(f"Transaction {transaction_id} not found", code="TRANSACTION_NOT_FOUND")
    return txn


def _get_card(session: Session, card_id: uuid.UUID, user_id: uuid.UUID) -> CreditCard:
    card = session.exec(
        select(CreditCard).where(CreditCard.id == card_id).where(CreditCard.user_id == user_id)
    ).first()
    if card is None:
        raise NotFoundError(f"Card {card_id} not found", code="CARD_NOT_FOUND")
    return card


def _ensure_category(session: Session, category_id: uuid.UUID, user_id: uuid.UUID) -> None:
    found = session.exec(
        select(Category.id).where(Category.id == category_id).where(Category.user_id == user_id)
    ).first()
    if found is None:
        raise NotFoundError(f"Category {category_id} not found", code="CATEGORY_NOT_FOUND")


def _ensure_asset(session: Session, asset_id: uuid.UUID, user_id: uuid.UUID) -> None:
    found = session.exec(
        select(Asset.id).where(Asset.id == asset_id).where(Asset.user_id == user_id)
    ).first()
    if found is None:
        raise DanglingAssetReference(asset_id)


def resolve_effective_asset(session: Session, txn: Transaction) -> None:
    """Apply card redirection and decide whether the row moves asset balances.

    * DEBIT card: the linked asset replaces whatever asset the client sent.
    * CREDIT card: the asset is kept as given and no balance changes; the spend
      is settled through the card bill instead.

    Raises ``ValidationError`` when no asset is left for a transaction that
    needs one, and ``DanglingAssetReference`` when a referenced asset is gone.
    """

    card = _get_card(session, txn.card_id, txn.user_id) if txn.card_id is not None else None
    is_credit = card is not None and card.card_type == CardType.CREDIT.value
    if card is not None and card.card_type == CardType.DEBIT.value:
        txn.asset_id = card.linked_asset_id

    if txn.asset_id is None and not (is_credit and txn.type == TransactionType.EXPENSE.value):
        raise ValidationError("assetId is required", code="ASSET_REQUIRED")
    if txn.type == TransactionType.TRANSFER.value and txn.to_asset_id is None:
        raise ValidationError("toAssetId is required for transfers", code="TO_ASSET_REQUIRED")
    if txn.type != TransactionType.TRANSFER.value:
        txn.to_asset_id = None

    for asset_id in (txn.asset_id, txn.to_asset_id):
        if asset_id is not None:
            _ensure_asset(session, asset_id, txn.user_id)

    txn.balance_applied = not is_credit


def create_transaction(
    session: Session, *, user_id: uuid.UUID, values: Mapping[str, Any]
) -> Transaction:
    """Insert a transaction and post its balance effect."""

    txn = Transaction(user_id=user_id, **values)
    _ensure_category(session, txn.category_id, user_id)
    resolve_effective_asset(session, txn)

    session.add(txn)
    session.flush()
    apply_transaction(session, txn, reason=BalanceChangeReason.TRANSACTION_CREATE)

    logger.info(
        "Transaction created",
        extra={
            "transaction_id": str(txn.id),
            "type": txn.type,
            "amount": str(txn.amount),
            "asset_id": str(txn.asset_id) if txn.asset_id else None,
            "balance_applied": txn.balance_applied,
        },
    )
    return txn


def update_transaction(
    session: Session,
    transaction_id: uuid.UUID,
    *,
    user_id: uuid.UUID,
    values: Mapping[str, Any],
) -> Transaction:
    """Apply a partial update; money-moving edits reverse the old effect and post the new one."""

    txn = get_transaction(session, transaction_id, user_id=user_id)
    changed = {key for key, value in values.items() if getattr(txn, key) != value}
    reposts = bool(changed & BALANCE_FIELDS)
    # Captured before the edit; the reversal must undo what was actually posted.
    old_legs = list(transaction_legs(txn)) if reposts else []

    for key, value in values.items():
        setattr(txn, key, value)

    if "category_id" in changed:
        _ensure_category(session, txn.category_id, user_id)
    if reposts:
        resolve_effective_asset(session, txn)
        # One lock pass over the old and the new assets, then reverse and reapply.
        post_legs(
            session,
            reversed_legs(old_legs) + list(transaction_legs(txn)),
            user_id=user_id,
            reason=BalanceChangeReason.TRANSACTION_UPDATE,
            transaction_id=txn.id,
        )

    txn.updated_at = utcnow()
    session.add(txn)
    session.flush()

    logger.info(
        "Transaction updated",
        extra={
            "transaction_id": str(txn.id),
            "fields": sorted(changed),
            "reposted": reposts,
        },
    )
    return txn


def delete_transaction(session: Session, transaction_id: uuid.UUID, *, user_id: uuid.UUID) -> None:
    """Restore the balances the transaction moved, then remove it."""

    txn = get_transaction(session, transaction_id, user_id=user_id)
    reverse_transaction(session, txn, reason=BalanceChangeReason.TRANSACTION_DELETE)
    session.delete(txn)
    session.flush()

    logger.info("Transaction deleted", extra={"transaction_id": str(transaction_id)})


__all__ = [
    "BALANCE_FIELDS",
    "create_transaction",
    "delete_transaction",
    "get_transaction",
    "list_transactions",
    "month_bounds",
    "resolve_effective_asset",
    "update_transaction",
]
