"""SQLAlchemy models."""

from carteira.models.account import Account
from carteira.models.account_history import AccountHistory
from carteira.models.user import User

__all__ = [
    "User",
    "Account",
    "AccountHistory",
]
