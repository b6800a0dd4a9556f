"""003: create transactions table (deposit / withdraw ledger)

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transactions (
            id                  UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            type                VARCHAR(16)     NOT NULL,
            value               NUMERIC(15, 2)  NOT NULL,
            bank_account_id     UUID            NOT NULL REFERENCES bank_accounts (id),
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT clock_timestamp(),
            CONSTRAINT ck_transactions_type     CHECK (type IN ('DEPOSIT', 'WITHDRAW')),
            CONSTRAINT ck_transactions_value_gt_0 CHECK (value > 0)
        );
    """)
    op.execute(
        "CREATE INDEX idx_transactions_account_time "
        "ON transactions (bank_account_id, created_at);"
    )
    op.execute(
        "COMMENT ON TABLE transactions IS "
        "'Append-only: never updated or deleted outside test resets';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
