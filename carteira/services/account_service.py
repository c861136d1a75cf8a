"""Account service: owner-scoped queries and audited mutations."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from carteira.models.account import Account
from carteira.models.account_history import AccountHistory
from carteira.models.enums import AccountStatus, HistoryAction
from carteira.schemas.account import AccountCreate, AccountResponse, AccountUpdate

logger = logging.getLogger(__name__)


class InvalidValidityWindowError(ValueError):
    """Raised when an update would leave expiration on or before start."""


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes read back from the store as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _snapshot(account: Account) -> dict[str, Any]:
    return AccountResponse.model_validate(account).model_dump(mode="json")


class AccountService:
    """Service for account-related operations.

    Every mutation is committed together with its history row, or not at all.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_account(self, account_id: str) -> Account | None:
        """Get an account by id, regardless of owner."""
        return self.db.query(Account).filter(Account.id == account_id).first()

    def list_accounts(self, owner_id: str, status: AccountStatus | None = None) -> list[Account]:
        """List accounts owned by a user, optionally filtered by status."""
        query = self.db.query(Account).filter(Account.owner_id == owner_id)
        if status is not None:
            query = query.filter(Account.status == status)
        return query.order_by(Account.created_at, Account.id).all()

    def get_history(self, account_id: str) -> list[AccountHistory]:
        """Get history entries for an account, newest first."""
        return (
            self.db.query(AccountHistory)
            .filter(AccountHistory.account_id == account_id)
            .order_by(AccountHistory.id.desc())
            .all()
        )

    def create_account(self, owner_id: str, data: AccountCreate) -> Account:
        """Create an account owned by ``owner_id`` and record the creation."""
        account = Account(
            service_name=data.service_name,
            start_date=data.start_date,
            expiration_date=data.expiration_date,
            max_users=data.max_users,
            price=data.price,
            status=data.status,
            owner_id=owner_id,
        )
        try:
            self.db.add(account)
            self.db.flush()
            self.db.refresh(account)
            self._record(
                account.id,
                owner_id,
                HistoryAction.ACCOUNT_CREATED,
                {"account": _snapshot(account)},
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Failed to create account for user {owner_id}")
            raise

        self.db.refresh(account)
        logger.info(f"Account {account.id} created by user {owner_id}")
        return account

    def update_account(self, account: Account, user_id: str, data: AccountUpdate) -> Account:
        """Apply a partial update and record the before/after state."""
        changes = data.changes()

        start = _as_utc(changes.get("start_date") or account.start_date)
        expiration = _as_utc(changes.get("expiration_date") or account.expiration_date)
        if expiration <= start:
            raise InvalidValidityWindowError("expiration_date must be after start_date")

        before = _snapshot(account)
        try:
            for field, value in changes.items():
                setattr(account, field, value)
            self.db.flush()
            self.db.refresh(account)
            self._record(
                account.id,
                user_id,
                HistoryAction.ACCOUNT_UPDATED,
                {"before": before, "after": _snapshot(account)},
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Failed to update account {account.id}")
            raise

        self.db.refresh(account)
        logger.info(f"Account {account.id} updated by user {user_id}: {sorted(changes)}")
        return account

    def delete_account(self, account: Account, user_id: str) -> None:
        """Delete an account and record its final state."""
        account_id = account.id
        snapshot = _snapshot(account)
        try:
            self.db.delete(account)
            self._record(
                account_id,
                user_id,
                HistoryAction.ACCOUNT_DELETED,
                {"account": snapshot},
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Failed to delete account {account_id}")
            raise

        logger.info(f"Account {account_id} deleted by user {user_id}")

    def _record(
        self, account_id: str, user_id: str, action: HistoryAction, details: dict[str, Any]
    ) -> None:
        self.db.add(
            AccountHistory(account_id=account_id, user_id=user_id, action=action, details=details)
        )
        self.db.flush()
