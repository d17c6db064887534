"""Enumerations and seed data shared across the ledger."""

from __future__ import annotations

from enum import Enum


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"


class CardType(str, Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class AssetType(str, Enum):
    BANK = "BANK"
    CASH = "CASH"


class CategoryKind(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class BalanceChangeReason(str, Enum):
    """Why an asset balance moved; stored on every history row."""

    TRANSACTION_CREATE = "TRANSACTION_CREATE"
    TRANSACTION_DELETE = "TRANSACTION_DELETE"
    TRANSACTION_UPDATE = "TRANSACTION_UPDATE"
    MANUAL_ADJUSTMENT = "MANUAL_ADJUSTMENT"
    INITIAL_BALANCE_CHANGE = "INITIAL_BALANCE_CHANGE"
    RECONCILE = "RECONCILE"


# Categories created for every new account at signup.
DEFAULT_CATEGORIES: tuple[dict[str, str], ...] = (
    {"name": "Salary", "kind": "INCOME", "icon": "💰", "color": "#10b981"},
    {"name": "Side Income", "kind": "INCOME", "icon": "💵", "color": "#34d399"},
    {"name": "Other Income", "kind": "INCOME", "icon": "🎁", "color": "#6ee7b7"},
    {"name": "Food", "kind": "EXPENSE", "icon": "🍴", "color": "#ef4444"},
    {"name": "Transport", "kind": "EXPENSE", "icon": "🚗", "color": "#f97316"},
    {"name": "Entertainment", "kind": "EXPENSE", "icon": "🎬", "color": "#8b5cf6"},
    {"name": "Shopping", "kind": "EXPENSE", "icon": "🛍️", "color": "#ec4899"},
    {"name": "Medical", "kind": "EXPENSE", "icon": "🏥", "color": "#06b6d4"},
    {"name": "Other Expense", "kind": "EXPENSE", "icon": "📝", "color": "#64748b"},
)

DEFAULT_CASH_ASSET_NAME = "Cash"
SHARED_FIREBASE_UID = "shared"
