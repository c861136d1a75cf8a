"""Account schemas."""

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import (
    AliasChoices,
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from carteira.models.enums import AccountStatus, HistoryAction


def _to_utc(value: datetime | None) -> datetime | None:
    """Convert to UTC. SQLite stores datetimes without their offset."""
    return value.astimezone(UTC) if value is not None else None


class AccountCreate(BaseModel):
    """Create a new shared subscription account."""

    service_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        validation_alias=AliasChoices("service_name", "serviceName"),
    )
    start_date: AwareDatetime = Field(
        ..., validation_alias=AliasChoices("start_date", "startDate")
    )
    expiration_date: AwareDatetime = Field(
        ..., validation_alias=AliasChoices("expiration_date", "expirationDate")
    )
    max_users: int = Field(..., ge=1, validation_alias=AliasChoices("max_users", "maxUsers"))
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    status: AccountStatus = AccountStatus.ACTIVE

    @field_validator("start_date", "expiration_date")
    @classmethod
    def normalize_to_utc(cls, value: datetime | None) -> datetime | None:
        return _to_utc(value)

    @model_validator(mode="after")
    def check_validity_window(self) -> "AccountCreate":
        """Expiration must come after the start date."""
        if self.expiration_date <= self.start_date:
            raise ValueError("expiration_date must be after start_date")
        return self


class AccountUpdate(BaseModel):
    """Partially update an account.

    ``owner_id`` is accepted only so that handlers can reject it explicitly.
    """

    service_name: str | None = Field(
        None,
        min_length=1,
        max_length=255,
        validation_alias=AliasChoices("service_name", "serviceName"),
    )
    start_date: AwareDatetime | None = Field(
        None, validation_alias=AliasChoices("start_date", "startDate")
    )
    expiration_date: AwareDatetime | None = Field(
        None, validation_alias=AliasChoices("expiration_date", "expirationDate")
    )
    max_users: int | None = Field(
        None, ge=1, validation_alias=AliasChoices("max_users", "maxUsers")
    )
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    status: AccountStatus | None = None
    owner_id: str | None = Field(None, validation_alias=AliasChoices("owner_id", "ownerId"))

    @field_validator("start_date", "expiration_date")
    @classmethod
    def normalize_to_utc(cls, value: datetime | None) -> datetime | None:
        return _to_utc(value)

    @model_validator(mode="after")
    def check_fields(self) -> "AccountUpdate":
        """At least one field must be provided, and none of them may be null."""
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        nulls = sorted(f for f in self.model_fields_set - {"owner_id"} if getattr(self, f) is None)
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self

    def changes(self) -> dict:
        """Fields explicitly set by the caller, excluding the owner."""
        return self.model_dump(exclude_unset=True, exclude={"owner_id"})


class AccountResponse(BaseModel):
    """Account response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    service_name: str
    start_date: datetime
    expiration_date: datetime
    max_users: int
    price: Decimal
    status: AccountStatus
    owner_id: str
    created_at: datetime
    updated_at: datetime


class AccountHistoryResponse(BaseModel):
    """Account history entry response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    account_id: str
    user_id: str
    action: HistoryAction
    details: dict
    created_at: datetime
