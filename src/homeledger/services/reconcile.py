"""Recompute asset balances from the ledger and optionally repair drift."""

from __future__ import annotations

import uuid
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal

from sqlmodel import Session, select

from ..constants import BalanceChangeReason
from ..logging_config import get_logger
from ..models import Asset, AssetBalanceHistory, Transaction
from ..models._base import ZERO
from .balances import adjust_balance, to_money, transaction_legs

logger = get_logger(__name__)


@dataclass(frozen=True)
class AssetDrift:
    asset_id: uuid.UUID
    user_id: uuid.UUID
    name: str
    balance: Decimal
    expected: Decimal

    @property
    def drift(self) -> Decimal:
        return self.balance - self.expected


def _manual_adjustments(session: Session, asset_ids: list[uuid.UUID]) -> dict[uuid.UUID, Decimal]:
    totals: dict[uuid.UUID, Decimal] = defaultdict(lambda: ZERO)
    if not asset_ids:
        return totals
    rows = session.exec(
        select(AssetBalanceHistory)
        .where(AssetBalanceHistory.asset_id.in_(asset_ids))  # type: ignore[union-attr]
        .where(AssetBalanceHistory.reason == BalanceChangeReason.MANUAL_ADJUSTMENT.value)
    ).all()
    for row in rows:
        totals[row.asset_id] += to_money(row.change_amount)
    return totals


def compute_drift(session: Session, *, user_id: uuid.UUID | None = None) -> list[AssetDrift]:
    """Compare every asset balance with what its ledger implies.

    expected = initial balance + manual adjustments + effects of applied transactions
    """

    asset_query = select(Asset).order_by(Asset.created_at)
    txn_query = select(Transaction).where(Transaction.balance_applied == True)  # noqa: E712
    if user_id is not None:
        asset_query = asset_query.where(Asset.user_id == user_id)
        txn_query = txn_query.where(Transaction.user_id == user_id)

    assets = list(session.exec(asset_query).all())
    effects: dict[uuid.UUID, Decimal] = defaultdict(lambda: ZERO)
    for txn in session.exec(txn_query).all():
        for asset_id, change in transaction_legs(txn):
            effects[asset_id] += change
    manual = _manual_adjustments(session, [asset.id for asset in assets])

    return [
        AssetDrift(
            asset_id=asset.id,
            user_id=asset.user_id,
            name=asset.name,
            balance=to_money(asset.balance),
            expected=to_money(asset.initial_balance) + manual[asset.id] + effects[asset.id],
        )
        for asset in assets
    ]


def reconcile(
    session: Session, *, user_id: uuid.UUID | None = None, repair: bool = False
) -> list[AssetDrift]:
    """Return the assets whose balance drifted; with ``repair`` bring them back in line."""

    drifted = [item for item in compute_drift(session, user_id=user_id) if item.drift]
    for item in drifted:
        logger.warning(
            "Asset balance drift detected",
            extra={
                "asset_id": str(item.asset_id),
                "balance": str(item.balance),
                "expected": str(item.expected),
                "repair": repair,
            },
        )
        if repair:
            adjust_balance(
                session,
                asset_id=item.asset_id,
                user_id=item.user_id,
                change=-item.drift,
                reason=BalanceChangeReason.RECONCILE,
            )
    return drifted


__all__ = ["AssetDrift", "compute_drift", "reconcile"]
