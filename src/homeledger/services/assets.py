"""Asset management on top of the balance mutator."""

from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import or_
from sqlmodel import Session, select

from ..constants import BalanceChangeReason
from ..errors import ConflictError, NotFoundError
from ..logging_config import get_logger
from ..models import Asset, AssetBalanceHistory, CreditCard, Transaction
from ..models._base import ZERO, utcnow
from .balances import adjust_balance, to_money

logger = get_logger(__name__)


def list_assets(session: Session, *, user_id: uuid.UUID) -> list[Asset]:
    statement = select(Asset).where(Asset.user_id == user_id).order_by(Asset.created_at)
    return list(session.exec(statement).all())


def get_asset(session: Session, asset_id: uuid.UUID, *, user_id: uuid.UUID) -> Asset:
    asset = session.exec(
        select(Asset).where(Asset.id == asset_id).where(Asset.user_id == user_id)
    ).first()
    if asset is None:
        raise NotFoundError(f"Asset {asset_id} not found", code="ASSET_NOT_FOUND")
    return asset


def create_asset(
    session: Session,
    *,
    user_id: uuid.UUID,
    name: str,
    type: str,
    initial_balance: Decimal = ZERO,
    balance: Decimal | None = None,
) -> Asset:
    """Create an asset; a starting balance away from the initial one is a manual adjustment."""

    initial_balance = to_money(initial_balance)
    asset = Asset(
        user_id=user_id,
        name=name,
        type=type,
        balance=initial_balance,
        initial_balance=initial_balance,
    )
    session.add(asset)
    session.flush()

    if balance is not None and to_money(balance) != initial_balance:
        adjust_balance(
            session,
            asset_id=asset.id,
            user_id=user_id,
            change=to_money(balance) - initial_balance,
            reason=BalanceChangeReason.MANUAL_ADJUSTMENT,
        )

    logger.info("Asset created", extra={"asset_id": str(asset.id), "type": asset.type})
    return asset


def update_asset(
    session: Session,
    asset_id: uuid.UUID,
    *,
    user_id: uuid.UUID,
    name: str | None = None,
    type: str | None = None,
    initial_balance: Decimal | None = None,
    balance: Decimal | None = None,
) -> Asset:
    """Edit an asset.

    A new ``initial_balance`` shifts the running balance by the same difference,
    so earlier transactions keep their effect. An explicit ``balance`` is
    recorded as a manual adjustment from whatever the balance is after that.
    """

    asset = get_asset(session, asset_id, user_id=user_id)
    if name is not None:
        asset.name = name
    if type is not None:
        asset.type = type

    if initial_balance is not None:
        difference = to_money(initial_balance) - to_money(asset.initial_balance)
        if difference:
            adjust_balance(
                session,
                asset_id=asset.id,
                user_id=user_id,
                change=difference,
                reason=BalanceChangeReason.INITIAL_BALANCE_CHANGE,
            )
            asset.initial_balance = to_money(initial_balance)

    if balance is not None:
        change = to_money(balance) - to_money(asset.balance)
        if change:
            adjust_balance(
                session,
                asset_id=asset.id,
                user_id=user_id,
                change=change,
                reason=BalanceChangeReason.MANUAL_ADJUSTMENT,
            )

    asset.updated_at = utcnow()
    session.add(asset)
    session.flush()
    return asset


def delete_asset(session: Session, asset_id: uuid.UUID, *, user_id: uuid.UUID) -> None:
    """Delete an asset that no transaction or card still points at."""

    asset = get_asset(session, asset_id, user_id=user_id)

    referencing_txn = session.exec(
        select(Transaction.id)
        .where(Transaction.user_id == user_id)
        .where(or_(Transaction.asset_id == asset_id, Transaction.to_asset_id == asset_id))
        .limit(1)
    ).first()
    linked_card = session.exec(
        select(CreditCard.id).where(CreditCard.linked_asset_id == asset_id).limit(1)
    ).first()
    if referencing_txn is not None or linked_card is not None:
        raise ConflictError(
            "Asset is still referenced by transactions or cards", code="ASSET_IN_USE"
        )

    history = session.exec(
        select(AssetBalanceHistory).where(AssetBalanceHistory.asset_id == asset_id)
    ).all()
    for entry in history:
        session.delete(entry)
    session.flush()
    session.delete(asset)
    session.flush()
    logger.info("Asset deleted", extra={"asset_id": str(asset_id)})


def balance_history(
    session: Session, asset_id: uuid.UUID, *, user_id: uuid.UUID, limit: int = 10
) -> list[AssetBalanceHistory]:
    """Most recent balance changes for an asset, newest first."""

    statement = (
        select(AssetBalanceHistory)
        .where(AssetBalanceHistory.asset_id == asset_id)
        .where(AssetBalanceHistory.user_id == user_id)
        .order_by(AssetBalanceHistory.changed_at.desc())  # type: ignore[union-attr]
        .limit(limit)
    )
    return list(session.exec(statement).all())


__all__ = [
    "balance_history",
    "create_asset",
    "delete_asset",
    "get_asset",
    "list_assets",
    "update_asset",
]
