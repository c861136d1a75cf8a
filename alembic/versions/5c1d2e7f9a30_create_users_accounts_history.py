"""Create users, accounts and account history

Revision ID: 5c1d2e7f9a30
Revises:
Create Date: 2026-10-19 10:12:41.118204

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c1d2e7f9a30"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ACCOUNT_STATUS = sa.Enum("ACTIVE", "INACTIVE", "EXPIRED", name="account_status")
HISTORY_ACTION = sa.Enum(
    "ACCOUNT_CREATED", "ACCOUNT_UPDATED", "ACCOUNT_DELETED", name="history_action"
)


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name, sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("service_name", sa.String(length=255), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expiration_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("max_users", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("status", ACCOUNT_STATUS, nullable=False),
        sa.Column("owner_id", sa.String(length=36), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_accounts_owner_id"), "accounts", ["owner_id"], unique=False)
    op.create_index(op.f("ix_accounts_status"), "accounts", ["status"], unique=False)

    op.create_table(
        "account_history",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("account_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("action", HISTORY_ACTION, nullable=False),
        sa.Column("details", sa.JSON(), nullable=False),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_account_history_id"), "account_history", ["id"], unique=False)
    op.create_index(
        op.f("ix_account_history_account_id"), "account_history", ["account_id"], unique=False
    )
    op.create_index(
        op.f("ix_account_history_user_id"), "account_history", ["user_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_account_history_user_id"), table_name="account_history")
    op.drop_index(op.f("ix_account_history_account_id"), table_name="account_history")
    op.drop_index(op.f("ix_account_history_id"), table_name="account_history")
    op.drop_table("account_history")
    op.drop_index(op.f("ix_accounts_status"), table_name="accounts")
    op.drop_index(op.f("ix_accounts_owner_id"), table_name="accounts")
    op.drop_table("accounts")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
    HISTORY_ACTION.drop(op.get_bind(), checkfirst=True)
    ACCOUNT_STATUS.drop(op.get_bind(), checkfirst=True)
