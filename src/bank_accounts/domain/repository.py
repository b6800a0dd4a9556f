"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock (or an in-memory fake) that conforms to this Protocol.
Infrastructure layer provides the PostgreSQL implementation.

Contract for the balance mutations: increment_balance / decrement_balance
change the balance, refresh updated_at and append the ledger entry as one
atomic unit. decrement_balance must refuse (InsufficientFundsError) inside
that same unit when the result would be negative; the service pre-check
alone does not survive two concurrent withdrawals.
"""

from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bank_accounts.domain.models import BankAccount, BankAccountPage
from src.bank_common.enums import BankAccountType


class BankAccountRepositoryProtocol(Protocol):
    async def save(self, db: AsyncSession, bank_account: BankAccount) -> BankAccount: ...

    async def update(
        self,
        db: AsyncSession,
        bank_account_id: str,
        agency: str | None,
        type: BankAccountType | None,
    ) -> BankAccount: ...

    async def deactivate_bank_account(
        self, db: AsyncSession, bank_account_id: str
    ) -> BankAccount: ...

    async def find_one(self, db: AsyncSession, bank_account_id: str) -> BankAccount: ...

    async def find_all(
        self, db: AsyncSession, page: int | None, page_size: int | None
    ) -> BankAccountPage: ...

    async def increment_balance(
        self, db: AsyncSession, bank_account_id: str, amount: Decimal
    ) -> BankAccount: ...

    async def decrement_balance(
        self, db: AsyncSession, bank_account_id: str, amount: Decimal
    ) -> BankAccount: ...

    async def clear(self, db: AsyncSession) -> None: ...
