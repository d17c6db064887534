"""Business rules behind the API blueprints."""

from . import assets, balances, card_payments, reconcile, transactions, users

__all__ = ["assets", "balances", "card_payments", "reconcile", "transactions", "users"]
