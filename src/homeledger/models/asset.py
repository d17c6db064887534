"""Assets (bank accounts, cash) and their balance audit trail."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._base import MONEY_DIGITS, MONEY_PLACES, ZERO, utcnow


class Asset(SQLModel, table=True):
    """A tracked money container with an incrementally maintained balance."""

    __tablename__: ClassVar[str] = "assets"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=128)
    type: str = Field(default="BANK", nullable=False, max_length=16)
    balance: Decimal = Field(
        default=ZERO, nullable=False, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES
    )
    initial_balance: Decimal = Field(
        default=ZERO, nullable=False, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES
    )
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)


class AssetBalanceHistory(SQLModel, table=True):
    """One row per change applied to ``Asset.balance``."""

    __tablename__: ClassVar[str] = "asset_balance_history"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    asset_id: uuid.UUID = Field(foreign_key="assets.id", nullable=False, index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    # Not a foreign key: history outlives the deleted transaction it describes.
    transaction_id: Optional[uuid.UUID] = Field(default=None, index=True)
    reason: str = Field(nullable=False, max_length=32)
    previous_balance: Decimal = Field(
        nullable=False, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES
    )
    new_balance: Decimal = Field(nullable=False, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES)
    change_amount: Decimal = Field(
        nullable=False, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES
    )
    changed_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
