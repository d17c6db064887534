"""Balance mutator: keeps asset balances in step with the transaction ledger.

Every create, delete or balance-relevant update of a transaction moves asset
balances through the primitives below. They run on the caller's session so the
transaction row and the balance changes commit (or roll back) together.

Sign conventions for a transaction of ``amount`` (always positive):

* ``INCOME``   source asset ``+amount``
* ``EXPENSE``  source asset ``-amount``
* ``TRANSFER`` source asset ``-amount``, destination asset ``+amount``

Reversal applies the exact negation, as a relative correction.
"""

from __future__ import annotations

import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Iterator

from sqlmodel import Session, select

from ..constants import BalanceChangeReason, TransactionType
from ..errors import DanglingAssetReference
from ..logging_config import get_logger
from ..models import Asset, AssetBalanceHistory, Transaction
from ..models._base import utcnow

logger = get_logger(__name__)

_CENT = Decimal("0.01")
_SIGNS = {
    TransactionType.INCOME: 1,
    TransactionType.EXPENSE: -1,
    TransactionType.TRANSFER: -1,
}


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Quantize to cents; floats go through ``str`` to avoid binary artefacts."""

    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)


def balance_delta(txn_type: TransactionType | str, amount: Decimal) -> Decimal:
    """Signed change on the source asset for a transaction of ``txn_type``."""

    return to_money(amount) * _SIGNS[TransactionType(txn_type)]


def inverse_delta(txn_type: TransactionType | str, amount: Decimal) -> Decimal:
    return -balance_delta(txn_type, amount)


def transaction_legs(txn: Transaction) -> Iterator[tuple[uuid.UUID, Decimal]]:
    """Yield ``(asset_id, change)`` pairs the transaction applies when posted."""

    if not txn.balance_applied or txn.asset_id is None:
        return
    yield txn.asset_id, balance_delta(txn.type, txn.amount)
    if txn.type == TransactionType.TRANSFER.value and txn.to_asset_id is not None:
        yield txn.to_asset_id, to_money(txn.amount)


def lock_statement(asset_ids: Iterable[uuid.UUID], user_id: uuid.UUID):
    """``SELECT ... FOR UPDATE`` over the given assets, in primary-key order.

    Every writer locks in the same order, so two requests touching the same
    pair of assets (a transfer A->B racing B->A) queue instead of deadlocking.
    """

    return (
        select(Asset)
        .where(Asset.id.in_(sorted(set(asset_ids))))  # type: ignore[union-attr]
        .where(Asset.user_id == user_id)
        .order_by(Asset.id)
        .with_for_update()
    )


def lock_assets(
    session: Session, asset_ids: Iterable[uuid.UUID], *, user_id: uuid.UUID
) -> dict[uuid.UUID, Asset]:
    """Lock all assets an operation touches, in one statement, before any balance moves.

    SQLite ignores the lock clause; its writer lock covers the same case.

    Raises:
        DanglingAssetReference: one of the assets does not exist for ``user_id``.
    """

    wanted = sorted(set(asset_ids))
    if not wanted:
        return {}
    assets = {asset.id: asset for asset in session.exec(lock_statement(wanted, user_id)).all()}
    for asset_id in wanted:
        if asset_id not in assets:
            raise DanglingAssetReference(asset_id)
    return assets


def _move(
    session: Session,
    asset: Asset,
    *,
    change: Decimal,
    reason: BalanceChangeReason,
    transaction_id: uuid.UUID | None,
) -> None:
    previous = to_money(asset.balance)
    change = to_money(change)
    asset.balance = previous + change
    asset.updated_at = utcnow()
    session.add(asset)
    session.add(
        AssetBalanceHistory(
            asset_id=asset.id,
            user_id=asset.user_id,
            transaction_id=transaction_id,
            reason=reason.value,
            previous_balance=previous,
            new_balance=asset.balance,
            change_amount=change,
        )
    )
    logger.info(
        "Asset balance adjusted",
        extra={
            "asset_id": str(asset.id),
            "transaction_id": str(transaction_id) if transaction_id else None,
            "reason": reason.value,
            "change": str(change),
            "new_balance": str(asset.balance),
        },
    )


def post_legs(
    session: Session,
    legs: Iterable[tuple[uuid.UUID, Decimal]],
    *,
    user_id: uuid.UUID,
    reason: BalanceChangeReason,
    transaction_id: uuid.UUID | None = None,
) -> None:
    """Apply ``(asset_id, change)`` pairs after locking every asset they name."""

    legs = list(legs)
    assets = lock_assets(session, (asset_id for asset_id, _ in legs), user_id=user_id)
    for asset_id, change in legs:
        _move(
            session,
            assets[asset_id],
            change=change,
            reason=reason,
            transaction_id=transaction_id,
        )
    session.flush()


def adjust_balance(
    session: Session,
    *,
    asset_id: uuid.UUID,
    user_id: uuid.UUID,
    change: Decimal,
    reason: BalanceChangeReason,
    transaction_id: uuid.UUID | None = None,
) -> Asset:
    """Add ``change`` to one asset balance and record the move in the history table."""

    post_legs(
        session,
        [(asset_id, change)],
        user_id=user_id,
        reason=reason,
        transaction_id=transaction_id,
    )
    return session.get(Asset, asset_id)


def apply_transaction(
    session: Session,
    txn: Transaction,
    *,
    reason: BalanceChangeReason = BalanceChangeReason.TRANSACTION_CREATE,
) -> None:
    """Post the transaction's effect onto its asset(s)."""

    post_legs(
        session, transaction_legs(txn), user_id=txn.user_id, reason=reason, transaction_id=txn.id
    )


def reverse_transaction(
    session: Session,
    txn: Transaction,
    *,
    reason: BalanceChangeReason = BalanceChangeReason.TRANSACTION_DELETE,
) -> None:
    """Undo exactly what :func:`apply_transaction` posted for the same stored row."""

    post_legs(
        session,
        reversed_legs(transaction_legs(txn)),
        user_id=txn.user_id,
        reason=reason,
        transaction_id=txn.id,
    )


def reversed_legs(
    legs: Iterable[tuple[uuid.UUID, Decimal]],
) -> list[tuple[uuid.UUID, Decimal]]:
    return [(asset_id, -change) for asset_id, change in legs]


__all__ = [
    "adjust_balance",
    "apply_transaction",
    "balance_delta",
    "inverse_delta",
    "lock_assets",
    "lock_statement",
    "post_legs",
    "reverse_transaction",
    "reversed_legs",
    "to_money",
    "transaction_legs",
]
