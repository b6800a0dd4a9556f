"""BankAccountRepository: concrete implementation of BankAccountRepositoryProtocol.

Balance mutations are single atomic PostgreSQL UPDATE ... RETURNING statements.
For withdrawals the non-negative check lives in the WHERE clause, so a result
of 0 rows means either the account is missing or the balance is too low.

Transaction ownership: the CALLER (application service) commits or rolls back.
The balance UPDATE and the ledger INSERT run on the same session and therefore
land or vanish together.
"""

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bank_accounts.domain.models import (
    BankAccount,
    BankAccountPage,
    LedgerTransaction,
    page_offset,
)
from src.bank_common.enums import BankAccountType, TransactionType
from src.bank_common.errors import (
    BankAccountNotFoundError,
    InsufficientFundsError,
    InternalError,
)

logger = logging.getLogger(__name__)

_ACCOUNT_COLUMNS = (
    "id, account_number, agency, type, balance, is_active, created_at, updated_at"
)

# ---------------------------------------------------------------------------
# SQL: bank_accounts
# ---------------------------------------------------------------------------

_INSERT_ACCOUNT_SQL = text(f"""
    INSERT INTO bank_accounts
        (id, agency, type, balance, is_active, created_at, updated_at)
    VALUES
        (CAST(:id AS UUID), :agency, :type, :balance, :is_active,
         :created_at, :updated_at)
    RETURNING {_ACCOUNT_COLUMNS}
""")

_UPDATE_ACCOUNT_SQL = text(f"""
    UPDATE bank_accounts
    SET agency = COALESCE(CAST(:agency AS VARCHAR), agency),
        type = COALESCE(CAST(:type AS VARCHAR), type),
        updated_at = NOW()
    WHERE id = CAST(:id AS UUID)
    RETURNING {_ACCOUNT_COLUMNS}
""")

_DEACTIVATE_SQL = text(f"""
    UPDATE bank_accounts
    SET is_active = FALSE,
        updated_at = NOW()
    WHERE id = CAST(:id AS UUID)
    RETURNING {_ACCOUNT_COLUMNS}
""")

_INCREMENT_SQL = text(f"""
    UPDATE bank_accounts
    SET balance = balance + :amount,
        updated_at = NOW()
    WHERE id = CAST(:id AS UUID)
    RETURNING {_ACCOUNT_COLUMNS}
""")

_DECREMENT_SQL = text(f"""
    UPDATE bank_accounts
    SET balance = balance - :amount,
        updated_at = NOW()
    WHERE id = CAST(:id AS UUID) AND balance >= :amount
    RETURNING {_ACCOUNT_COLUMNS}
""")

_GET_ACCOUNT_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM bank_accounts
    WHERE id = CAST(:id AS UUID)
""")

_LIST_ALL_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM bank_accounts
    ORDER BY account_number ASC
""")

_LIST_PAGE_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM bank_accounts
    ORDER BY account_number ASC
    LIMIT :limit OFFSET :offset
""")

_COUNT_SQL = text("SELECT COUNT(*) FROM bank_accounts")

# ---------------------------------------------------------------------------
# SQL: transactions (append-only ledger)
# ---------------------------------------------------------------------------

_INSERT_TRANSACTION_SQL = text("""
    INSERT INTO transactions (type, value, bank_account_id)
    VALUES (:type, :value, CAST(:bank_account_id AS UUID))
    RETURNING id, type, value, bank_account_id, created_at
""")

_LIST_TRANSACTIONS_SQL = text("""
    SELECT id, type, value, bank_account_id, created_at
    FROM transactions
    WHERE bank_account_id = CAST(:bank_account_id AS UUID)
    ORDER BY created_at ASC, id ASC
""")

_CLEAR_TRANSACTIONS_SQL = text("DELETE FROM transactions")
_CLEAR_ACCOUNTS_SQL = text("DELETE FROM bank_accounts")


def _row_to_account(
    row: Any, transactions: tuple[LedgerTransaction, ...] = ()
) -> BankAccount:
    return BankAccount(
        id=str(row.id),
        account_number=row.account_number,
        agency=row.agency,
        type=BankAccountType(row.type),
        balance=Decimal(row.balance),
        is_active=row.is_active,
        created_at=row.created_at,
        updated_at=row.updated_at,
        transactions=transactions,
    )


def _row_to_transaction(row: Any) -> LedgerTransaction:
    return LedgerTransaction(
        id=str(row.id),
        type=TransactionType(row.type),
        value=Decimal(row.value),
        bank_account_id=str(row.bank_account_id),
        created_at=row.created_at,
    )


class BankAccountRepository:
    """Concrete repository; every mutation is one atomic SQL statement."""

    async def save(self, db: AsyncSession, bank_account: BankAccount) -> BankAccount:
        result = await db.execute(
            _INSERT_ACCOUNT_SQL,
            {
                "id": bank_account.id,
                "agency": bank_account.agency,
                "type": bank_account.type.value,
                "balance": bank_account.balance,
                "is_active": bank_account.is_active,
                "created_at": bank_account.created_at,
                "updated_at": bank_account.updated_at,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Bank account insert returned no rows")
        return _row_to_account(row)

    async def update(
        self,
        db: AsyncSession,
        bank_account_id: str,
        agency: str | None,
        type: BankAccountType | None,
    ) -> BankAccount:
        result = await db.execute(
            _UPDATE_ACCOUNT_SQL,
            {
                "id": bank_account_id,
                "agency": agency,
                "type": type.value if type is not None else None,
            },
        )
        row = result.fetchone()
        if row is None:
            raise BankAccountNotFoundError(bank_account_id)
        return _row_to_account(row)

    async def deactivate_bank_account(
        self, db: AsyncSession, bank_account_id: str
    ) -> BankAccount:
        result = await db.execute(_DEACTIVATE_SQL, {"id": bank_account_id})
        row = result.fetchone()
        if row is None:
            raise BankAccountNotFoundError(bank_account_id)
        return _row_to_account(row)

    async def find_one(self, db: AsyncSession, bank_account_id: str) -> BankAccount:
        result = await db.execute(_GET_ACCOUNT_SQL, {"id": bank_account_id})
        row = result.fetchone()
        if row is None:
            raise BankAccountNotFoundError(bank_account_id)
        tx_result = await db.execute(
            _LIST_TRANSACTIONS_SQL, {"bank_account_id": bank_account_id}
        )
        transactions = tuple(_row_to_transaction(r) for r in tx_result.fetchall())
        return _row_to_account(row, transactions)

    async def find_all(
        self, db: AsyncSession, page: int | None, page_size: int | None
    ) -> BankAccountPage:
        if page is None or page_size is None:
            result = await db.execute(_LIST_ALL_SQL)
            return BankAccountPage.unpaged([_row_to_account(r) for r in result.fetchall()])

        total = (await db.execute(_COUNT_SQL)).scalar_one()
        result = await db.execute(
            _LIST_PAGE_SQL,
            {"limit": page_size, "offset": page_offset(page, page_size)},
        )
        return BankAccountPage.paged(
            [_row_to_account(r) for r in result.fetchall()],
            page=page,
            page_size=page_size,
            total=total,
        )

    async def increment_balance(
        self, db: AsyncSession, bank_account_id: str, amount: Decimal
    ) -> BankAccount:
        result = await db.execute(_INCREMENT_SQL, {"id": bank_account_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise BankAccountNotFoundError(bank_account_id)
        await self._append_transaction(db, bank_account_id, TransactionType.DEPOSIT, amount)
        return _row_to_account(row)

    async def decrement_balance(
        self, db: AsyncSession, bank_account_id: str, amount: Decimal
    ) -> BankAccount:
        result = await db.execute(_DECREMENT_SQL, {"id": bank_account_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            acc_result = await db.execute(_GET_ACCOUNT_SQL, {"id": bank_account_id})
            if acc_result.fetchone() is None:
                raise BankAccountNotFoundError(bank_account_id)
            logger.warning(
                "Conditional withdraw refused: account=%s amount=%s", bank_account_id, amount
            )
            raise InsufficientFundsError()
        await self._append_transaction(db, bank_account_id, TransactionType.WITHDRAW, amount)
        return _row_to_account(row)

    async def clear(self, db: AsyncSession) -> None:
        await db.execute(_CLEAR_TRANSACTIONS_SQL)
        await db.execute(_CLEAR_ACCOUNTS_SQL)

    async def _append_transaction(
        self,
        db: AsyncSession,
        bank_account_id: str,
        tx_type: TransactionType,
        amount: Decimal,
    ) -> LedgerTransaction:
        result = await db.execute(
            _INSERT_TRANSACTION_SQL,
            {"type": tx_type.value, "value": amount, "bank_account_id": bank_account_id},
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Ledger insert returned no rows")
        return _row_to_transaction(row)
