"""SQLModel table exports."""

from .asset import Asset, AssetBalanceHistory
from .card import CardMonthlyPayment, CreditCard
from .category import Category
from .transaction import Transaction
from .user import User

__all__ = [
    "Asset",
    "AssetBalanceHistory",
    "CardMonthlyPayment",
    "Category",
    "CreditCard",
    "Transaction",
    "User",
]
