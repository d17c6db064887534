"""SQLModel definitions for ledger transactions."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._base import MONEY_DIGITS, MONEY_PLACES, utcnow


class Transaction(SQLModel, table=True):
    """A single income, expense or transfer entered by the user."""

    __tablename__: ClassVar[str] = "transactions"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    occurred_on: date = Field(nullable=False, index=True)
    type: str = Field(nullable=False, max_length=16)
    amount: Decimal = Field(
        nullable=False,
        max_digits=MONEY_DIGITS,
        decimal_places=MONEY_PLACES,
        description="Always positive; the sign comes from the type",
    )
    asset_id: Optional[uuid.UUID] = Field(default=None, foreign_key="assets.id", index=True)
    to_asset_id: Optional[uuid.UUID] = Field(default=None, foreign_key="assets.id")
    category_id: uuid.UUID = Field(foreign_key="categories.id", nullable=False)
    card_id: Optional[uuid.UUID] = Field(default=None, foreign_key="credit_cards.id")
    memo: Optional[str] = Field(default=None, max_length=255)
    # False for credit-card spend, which settles outside the asset balances.
    balance_applied: bool = Field(default=True, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
