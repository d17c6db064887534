"""User model keyed by the Firebase account that owns the ledger."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._base import utcnow


class User(SQLModel, table=True):
    """Application user mapped from a verified Firebase identity."""

    __tablename__: ClassVar[str] = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    firebase_uid: str = Field(nullable=False, unique=True, index=True, max_length=128)
    email: str = Field(default="", nullable=False, max_length=255)
    display_name: Optional[str] = Field(default=None, max_length=255)
    photo_url: Optional[str] = Field(default=None, max_length=1024)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
