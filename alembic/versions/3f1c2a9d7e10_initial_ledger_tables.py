"""initial_ledger_tables

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-19 09:12:44.118302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7e10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "normalized_transactions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("source", sa.String(50), nullable=False),
        sa.Column("external_id", sa.String(255), nullable=True),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("base_asset", sa.String(50), nullable=False),
        sa.Column("base_amount", sa.Numeric(38, 18), nullable=False),
        sa.Column("quote_asset", sa.String(50), nullable=True),
        sa.Column("quote_amount", sa.Numeric(38, 18), nullable=True),
        sa.Column("fee_asset", sa.String(50), nullable=True),
        sa.Column("fee_amount", sa.Numeric(38, 18), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("tx_hash", sa.String(120), nullable=True),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("is_transfer", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("transfer_match_id", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("base_amount >= 0", name="ck_normalized_transactions_base_amount_non_negative"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_normalized_transactions_user_id_users"),
        sa.PrimaryKeyConstraint("id", name="pk_normalized_transactions"),
    )
    op.create_index("ix_normalized_transactions_tx_hash", "normalized_transactions", ["tx_hash"])
    op.create_index("ix_normalized_transactions_transfer_match_id", "normalized_transactions", ["transfer_match_id"])
    op.create_index(
        "ix_normalized_transactions_user_kind_ts", "normalized_transactions", ["user_id", "kind", "timestamp"],
    )

    op.create_table(
        "transfer_matches",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("withdrawal_tx_id", sa.Uuid(), nullable=False),
        sa.Column("deposit_tx_id", sa.Uuid(), nullable=False),
        sa.Column("match_confidence", sa.Numeric(5, 4), nullable=False),
        sa.Column("match_method", sa.String(30), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("withdrawal_tx_id <> deposit_tx_id", name="ck_transfer_matches_distinct_legs"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_transfer_matches_user_id_users"),
        sa.ForeignKeyConstraint(
            ["withdrawal_tx_id"], ["normalized_transactions.id"],
            name="fk_transfer_matches_withdrawal_tx_id_normalized_transactions",
        ),
        sa.ForeignKeyConstraint(
            ["deposit_tx_id"], ["normalized_transactions.id"],
            name="fk_transfer_matches_deposit_tx_id_normalized_transactions",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_transfer_matches"),
        sa.UniqueConstraint("withdrawal_tx_id", name="uq_transfer_matches_withdrawal_tx_id"),
        sa.UniqueConstraint("deposit_tx_id", name="uq_transfer_matches_deposit_tx_id"),
    )
    op.create_index("ix_transfer_matches_user_id", "transfer_matches", ["user_id"])

    op.create_table(
        "transactions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("normalized_tx_id", sa.Uuid(), nullable=True),
        sa.Column("source_name", sa.String(50), nullable=True),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("asset", sa.String(50), nullable=False),
        sa.Column("amount", sa.Numeric(38, 18), nullable=False),
        sa.Column("value_usd", sa.Numeric(24, 8), nullable=True),
        sa.Column("fee", sa.Numeric(38, 18), nullable=True),
        sa.Column("tx_hash", sa.String(120), nullable=True),
        sa.Column("category", sa.String(50), nullable=False, server_default="uncategorized"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_transactions_user_id_users"),
        sa.ForeignKeyConstraint(
            ["normalized_tx_id"], ["normalized_transactions.id"],
            name="fk_transactions_normalized_tx_id_normalized_transactions",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_transactions"),
        sa.UniqueConstraint("normalized_tx_id", name="uq_transactions_normalized_tx_id"),
    )
    op.create_index("ix_transactions_user_date", "transactions", ["user_id", "date"])


def downgrade() -> None:
    op.drop_index("ix_transactions_user_date", "transactions")
    op.drop_table("transactions")
    op.drop_index("ix_transfer_matches_user_id", "transfer_matches")
    op.drop_table("transfer_matches")
    op.drop_index("ix_normalized_transactions_user_kind_ts", "normalized_transactions")
    op.drop_index("ix_normalized_transactions_transfer_match_id", "normalized_transactions")
    op.drop_index("ix_normalized_transactions_tx_hash", "normalized_transactions")
    op.drop_table("normalized_transactions")
    op.drop_table("users")
