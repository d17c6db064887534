"""Column helpers shared by the ledger tables."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

MONEY_DIGITS = 15
MONEY_PLACES = 2
# Largest absolute value a Numeric(15, 2) column holds is just under this.
MONEY_LIMIT = Decimal(10) ** (MONEY_DIGITS - MONEY_PLACES)
ZERO = Decimal("0")


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp used for every created/updated/changed column."""

    return datetime.now(timezone.utc)
