"""Signup and the per-account seed data."""

from __future__ import annotations

import uuid

from sqlmodel import Session, select

from ..constants import DEFAULT_CASH_ASSET_NAME, DEFAULT_CATEGORIES, AssetType
from ..errors import NotFoundError
from ..logging_config import get_logger
from ..models import Asset, Category, User

logger = get_logger(__name__)


def get_user(session: Session, user_id: uuid.UUID) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")
    return user


def seed_defaults(session: Session, user: User) -> bool:
    """Give a fresh account its default categories and a cash asset.

    Returns False when the account already has categories.
    """

    has_categories = session.exec(
        select(Category.id).where(Category.user_id == user.id).limit(1)
    ).first()
    if has_categories is not None:
        return False

    for spec in DEFAULT_CATEGORIES:
        session.add(Category(user_id=user.id, **spec))
    session.add(Asset(user_id=user.id, name=DEFAULT_CASH_ASSET_NAME, type=AssetType.CASH.value))
    session.flush()
    logger.info(
        "Seeded default data",
        extra={"user_id": str(user.id), "categories": len(DEFAULT_CATEGORIES)},
    )
    return True


def signup(
    session: Session,
    *,
    firebase_uid: str,
    email: str | None = None,
    display_name: str | None = None,
    photo_url: str | None = None,
) -> tuple[User, bool]:
    """Return ``(user, created)`` for a Firebase identity, creating it on first sight."""

    user = session.exec(select(User).where(User.firebase_uid == firebase_uid)).first()
    if user is not None:
        return user, False

    user = User(
        firebase_uid=firebase_uid,
        email=email or "",
        display_name=display_name,
        photo_url=photo_url,
    )
    session.add(user)
    session.flush()
    seed_defaults(session, user)
    logger.info("User created", extra={"user_id": str(user.id)})
    return user, True


__all__ = ["get_user", "seed_defaults", "signup"]
