"""Asset payload validation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from ...constants import AssetType
from ..transactions.forms import parse_amount


@dataclass(slots=True)
class AssetForm:
    """Represents asset input prior to validation."""

    partial: bool = False
    name: Optional[str] = None
    type: Optional[str] = None
    balance: Optional[Decimal] = None
    initial_balance: Optional[Decimal] = None
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, partial: bool = False) -> AssetForm:
        form = cls(partial=partial)
        form.raw_data = {
            key: data[key] for key in ("name", "type", "balance", "initialBalance") if key in data
        }
        return form

    def validate(self) -> bool:
        self.errors.clear()

        name = self.raw_data.get("name")
        if name is not None:
            name = str(name).strip()
        if name:
            if len(name) > 128:
                self._add_error("name", "Name must be 128 characters or fewer.")
            self.name = name
        elif not self.partial or "name" in self.raw_data:
            self._add_error("name", "Name is required.")

        asset_type = self.raw_data.get("type")
        if asset_type not in (None, ""):
            normalized = str(asset_type).strip().upper()
            if normalized not in AssetType.__members__:
                self._add_error("type", "type must be BANK or CASH.")
            else:
                self.type = normalized
        elif not self.partial or "type" in self.raw_data:
            self._add_error("type", "type is required.")

        for key, attr in (("balance", "balance"), ("initialBalance", "initial_balance")):
            value = self.raw_data.get(key)
            if value in (None, ""):
                continue
            try:
                setattr(self, attr, parse_amount(value))
            except ValueError:
                self._add_error(key, f"Enter a valid number for {key}.")

        return not self.errors

    def _add_error(self, field_name: str, message: str) -> None:
        self.errors.setdefault(field_name, []).append(message)
