"""Transaction payload validation."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ...constants import TransactionType
from ...models._base import MONEY_LIMIT
from ...services.balances import to_money

_MISSING = object()

# JSON key -> model attribute
_FIELD_MAP = {
    "date": "occurred_on",
    "type": "type",
    "amount": "amount",
    "assetId": "asset_id",
    "toAssetId": "to_asset_id",
    "categoryId": "category_id",
    "cardId": "card_id",
    "memo": "memo",
}
_REQUIRED = ("date", "type", "amount", "categoryId")
_OPTIONAL_IDS = ("assetId", "toAssetId", "cardId")


def parse_date(raw: Any) -> date:
    """Accept ``yyyy-MM-dd`` or a full ISO timestamp."""

    if isinstance(raw, date) and not isinstance(raw, datetime):
        return raw
    text = str(raw).strip()
    if len(text) == 10:
        return datetime.strptime(text, "%Y-%m-%d").date()
    return datetime.fromisoformat(text.replace("Z", "+00:00")).date()


def parse_amount(raw: Any) -> Decimal:
    if isinstance(raw, bool):
        raise ValueError("boolean is not an amount")
    try:
        value = to_money(raw if not isinstance(raw, str) else raw.strip())
    except (InvalidOperation, TypeError):
        raise ValueError(f"{raw!r} is not a number") from None
    if not value.is_finite():
        raise ValueError("amount must be finite")
    if abs(value) >= MONEY_LIMIT:
        raise ValueError(f"{raw!r} exceeds the largest storable amount")
    return value


@dataclass(slots=True)
class TransactionForm:
    """Binds a JSON payload for create (all required fields) or update (partial)."""

    partial: bool = False
    occurred_on: Optional[date] = None
    type: Optional[str] = None
    amount: Optional[Decimal] = None
    asset_id: Optional[uuid.UUID] = None
    to_asset_id: Optional[uuid.UUID] = None
    category_id: Optional[uuid.UUID] = None
    card_id: Optional[uuid.UUID] = None
    memo: Optional[str] = None
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, partial: bool = False) -> TransactionForm:
        form = cls(partial=partial)
        form.raw_data = {key: data[key] for key in _FIELD_MAP if key in data}
        return form

    def validate(self) -> bool:
        """Validate bound data and populate typed attributes."""

        self.errors.clear()
        raw = self.raw_data

        if not self.partial:
            for key in _REQUIRED:
                if _is_blank(raw.get(key)):
                    self._add_error(key, f"{key} is required.")

        value = raw.get("date", _MISSING)
        if value is not _MISSING and not _is_blank(value):
            try:
                self.occurred_on = parse_date(value)
            except (TypeError, ValueError):
                self._add_error("date", "Enter a valid date (yyyy-MM-dd).")
        elif self.partial and value is not _MISSING:
            self._add_error("date", "date cannot be empty.")

        value = raw.get("type", _MISSING)
        if value is not _MISSING and not _is_blank(value):
            normalized = str(value).strip().upper()
            if normalized not in TransactionType.__members__:
                self._add_error("type", "type must be INCOME, EXPENSE or TRANSFER.")
            else:
                self.type = normalized
        elif self.partial and value is not _MISSING:
            self._add_error("type", "type cannot be empty.")

        value = raw.get("amount", _MISSING)
        if value is not _MISSING and not _is_blank(value):
            try:
                amount = parse_amount(value)
            except ValueError:
                self._add_error("amount", "Enter a valid number for the amount.")
            else:
                if amount <= 0:
                    self._add_error("amount", "amount must be greater than zero.")
                else:
                    self.amount = amount
        elif self.partial and value is not _MISSING:
            self._add_error("amount", "amount cannot be empty.")

        value = raw.get("categoryId", _MISSING)
        if value is not _MISSING and not _is_blank(value):
            self.category_id = self._parse_id("categoryId", value)
        elif self.partial and value is not _MISSING:
            self._add_error("categoryId", "categoryId cannot be empty.")

        for key in _OPTIONAL_IDS:
            value = raw.get(key, _MISSING)
            if value is _MISSING or _is_blank(value):
                continue
            setattr(self, _FIELD_MAP[key], self._parse_id(key, value))

        memo = raw.get("memo")
        if memo is not None:
            memo = str(memo).strip()
            if len(memo) > 255:
                self._add_error("memo", "memo must be 255 characters or fewer.")
            self.memo = memo or None

        return not self.errors

    def changes(self) -> dict[str, Any]:
        """Model attributes supplied by the client, with blanks mapped to None."""

        return {_FIELD_MAP[key]: getattr(self, _FIELD_MAP[key]) for key in self.raw_data}

    def _parse_id(self, key: str, value: Any) -> Optional[uuid.UUID]:
        try:
            return uuid.UUID(str(value).strip())
        except ValueError:
            self._add_error(key, f"{key} must be a valid UUID.")
            return None

    def _add_error(self, field_name: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field_name, []).append(message)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
