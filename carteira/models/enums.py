"""Enums for model fields."""

from enum import StrEnum


class AccountStatus(StrEnum):
    """Lifecycle status of a shared subscription account."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    EXPIRED = "EXPIRED"


class HistoryAction(StrEnum):
    """Kinds of account mutations recorded in the history log."""

    ACCOUNT_CREATED = "ACCOUNT_CREATED"
    ACCOUNT_UPDATED = "ACCOUNT_UPDATED"
    ACCOUNT_DELETED = "ACCOUNT_DELETED"
