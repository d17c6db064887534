"""Ledger category definitions."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._base import utcnow


class Category(SQLModel, table=True):
    """Income or expense category a transaction is filed under."""

    __tablename__: ClassVar[str] = "categories"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=64)
    kind: str = Field(default="EXPENSE", nullable=False, max_length=16)
    icon: Optional[str] = Field(default=None, max_length=16)
    color: Optional[str] = Field(default=None, max_length=7)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
