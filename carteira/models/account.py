"""Account model."""

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from carteira.database import Base
from carteira.models.enums import AccountStatus
from carteira.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class Account(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A shared paid subscription owned by a single user."""

    __tablename__ = "accounts"

    service_name = Column(String(255), nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    expiration_date = Column(DateTime(timezone=True), nullable=False)
    max_users = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    status = Column(
        Enum(AccountStatus, name="account_status"),
        nullable=False,
        default=AccountStatus.ACTIVE,
        index=True,
    )
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    owner = relationship("User", backref="accounts")
