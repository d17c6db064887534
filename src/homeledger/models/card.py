"""Credit/debit cards and their expected monthly settlement amounts."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._base import MONEY_DIGITS, MONEY_PLACES, utcnow


class CreditCard(SQLModel, table=True):
    """A payment card linked to the asset it settles from."""

    __tablename__: ClassVar[str] = "credit_cards"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=128)
    card_type: str = Field(default="CREDIT", nullable=False, max_length=16)
    billing_day: int = Field(default=1, nullable=False)
    start_offset: int = Field(default=-1, nullable=False)
    start_day: int = Field(default=1, nullable=False)
    end_offset: int = Field(default=-1, nullable=False)
    end_day: int = Field(default=31, nullable=False)
    linked_asset_id: uuid.UUID = Field(foreign_key="assets.id", nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)


class CardMonthlyPayment(SQLModel, table=True):
    """Expected card bill for a month; reconciled manually, never posted to balances."""

    __tablename__: ClassVar[str] = "card_monthly_payments"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    card_id: uuid.UUID = Field(foreign_key="credit_cards.id", nullable=False, index=True)
    month: str = Field(nullable=False, index=True, max_length=7)
    expected_amount: Decimal = Field(
        nullable=False, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES
    )
    memo: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
