"""Account history model for the mutation audit log."""

from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Integer, String, func

from carteira.database import Base
from carteira.models.enums import HistoryAction


class AccountHistory(Base):
    """Append-only record of account mutations.

    ``account_id`` is not a foreign key: rows for a deleted account are kept.
    """

    __tablename__ = "account_history"

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(String(36), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    action = Column(Enum(HistoryAction, name="history_action"), nullable=False)
    details = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
