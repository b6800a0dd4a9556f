"""002: create bank_accounts table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE bank_accounts (
            id              UUID            PRIMARY KEY,
            account_number  BIGINT          GENERATED BY DEFAULT AS IDENTITY,
            agency          VARCHAR(32)     NOT NULL,
            type            VARCHAR(16)     NOT NULL,
            balance         NUMERIC(15, 2)  NOT NULL DEFAULT 0,
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_bank_accounts_account_number  UNIQUE (account_number),
            CONSTRAINT ck_bank_accounts_type            CHECK (type IN ('CORRENTE', 'POUPANCA')),
            CONSTRAINT ck_bank_accounts_balance_gte_0   CHECK (balance >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_bank_accounts_updated_at
            BEFORE UPDATE ON bank_accounts
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON COLUMN bank_accounts.account_number IS "
        "'Sequential display number, assigned by the database only';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bank_accounts CASCADE;")
