"""Expected monthly card bills.

These rows record what a card bill should be for a month. They never move
asset balances; credit-card spending is settled by whatever transaction the
user books when the bill is actually paid.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from sqlmodel import Session, select

from ..errors import NotFoundError
from ..logging_config import get_logger
from ..models import CardMonthlyPayment, CreditCard
from ..models._base import utcnow
from .balances import to_money
from .transactions import month_bounds

logger = get_logger(__name__)


def _ensure_card(session: Session, card_id: uuid.UUID, user_id: uuid.UUID) -> None:
    found = session.exec(
        select(CreditCard.id).where(CreditCard.id == card_id).where(CreditCard.user_id == user_id)
    ).first()
    if found is None:
        raise NotFoundError(f"Card {card_id} not found", code="CARD_NOT_FOUND")


def list_payments(session: Session, *, user_id: uuid.UUID, month: str) -> list[CardMonthlyPayment]:
    month_bounds(month)
    statement = (
        select(CardMonthlyPayment)
        .where(CardMonthlyPayment.user_id == user_id)
        .where(CardMonthlyPayment.month == month)
        .order_by(CardMonthlyPayment.created_at)
    )
    return list(session.exec(statement).all())


def get_payment(session: Session, payment_id: uuid.UUID, *, user_id: uuid.UUID) -> CardMonthlyPayment:
    payment = session.exec(
        select(CardMonthlyPayment)
        .where(CardMonthlyPayment.id == payment_id)
        .where(CardMonthlyPayment.user_id == user_id)
    ).first()
    if payment is None:
        raise NotFoundError(
            f"Card payment {payment_id} not found", code="CARD_PAYMENT_NOT_FOUND"
        )
    return payment


def create_payment(
    session: Session,
    *,
    user_id: uuid.UUID,
    card_id: uuid.UUID,
    month: str,
    expected_amount: Decimal,
    memo: str | None = None,
) -> CardMonthlyPayment:
    month_bounds(month)
    _ensure_card(session, card_id, user_id)
    payment = CardMonthlyPayment(
        user_id=user_id,
        card_id=card_id,
        month=month,
        expected_amount=to_money(expected_amount),
        memo=memo,
    )
    session.add(payment)
    session.flush()
    logger.info(
        "Card payment recorded",
        extra={"payment_id": str(payment.id), "card_id": str(card_id), "month": month},
    )
    return payment


def update_payment(
    session: Session,
    payment_id: uuid.UUID,
    *,
    user_id: uuid.UUID,
    card_id: uuid.UUID | None = None,
    month: str | None = None,
    expected_amount: Decimal | None = None,
    memo: str | None = None,
) -> CardMonthlyPayment:
    payment = get_payment(session, payment_id, user_id=user_id)
    if card_id is not None:
        _ensure_card(session, card_id, user_id)
        payment.card_id = card_id
    if month is not None:
        month_bounds(month)
        payment.month = month
    if expected_amount is not None:
        payment.expected_amount = to_money(expected_amount)
    if memo is not None:
        payment.memo = memo or None
    payment.updated_at = utcnow()
    session.add(payment)
    session.flush()
    return payment


def delete_payment(session: Session, payment_id: uuid.UUID, *, user_id: uuid.UUID) -> None:
    payment = get_payment(session, payment_id, user_id=user_id)
    session.delete(payment)
    session.flush()
    logger.info("Card payment deleted", extra={"payment_id": str(payment_id)})


__all__ = [
    "create_payment",
    "delete_payment",
    "get_payment",
    "list_payments",
    "update_payment",
]
