"""Shared test fixtures.

InMemoryBankAccountRepository follows the repository contract closely
enough for service and router tests: sequential account numbers, a ledger
appended with every balance change, and a decrement that refuses to go
negative while holding a lock (the in-memory stand-in for the conditional
UPDATE).
"""

import asyncio
import dataclasses
from collections.abc import AsyncGenerator, Iterator
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.bank_accounts.api import router as router_module
from src.bank_accounts.application.service import BankAccountManagementService
from src.bank_accounts.domain.models import (
    BankAccount,
    BankAccountPage,
    LedgerTransaction,
    page_offset,
)
from src.bank_common.database import get_db_session
from src.bank_common.datetime_utils import utc_now
from src.bank_common.enums import TransactionType
from src.bank_common.errors import BankAccountNotFoundError, InsufficientFundsError
from src.bank_common.id_generator import SequentialIdGenerator
from src.main import app


class InMemoryBankAccountRepository:
    def __init__(self) -> None:
        self.accounts: dict[str, BankAccount] = {}
        self.ledger: dict[str, list[LedgerTransaction]] = {}
        self._next_number = 1
        self._tx_ids = SequentialIdGenerator(start=900_000)
        self._lock = asyncio.Lock()

    def _get(self, bank_account_id: str) -> BankAccount:
        try:
            return self.accounts[bank_account_id]
        except KeyError:
            raise BankAccountNotFoundError(bank_account_id) from None

    def _store(self, account: BankAccount) -> BankAccount:
        self.accounts[account.id] = account
        return account

    async def save(self, db, bank_account: BankAccount) -> BankAccount:
        saved = dataclasses.replace(
            bank_account, account_number=self._next_number, is_active=True
        )
        self._next_number += 1
        self.ledger[saved.id] = []
        return self._store(saved)

    async def update(self, db, bank_account_id, agency, type) -> BankAccount:
        account = self._get(bank_account_id)
        return self._store(
            dataclasses.replace(
                account,
                agency=agency if agency is not None else account.agency,
                type=type if type is not None else account.type,
                updated_at=utc_now(),
            )
        )

    async def deactivate_bank_account(self, db, bank_account_id) -> BankAccount:
        account = self._get(bank_account_id)
        return self._store(dataclasses.replace(account, is_active=False, updated_at=utc_now()))

    async def find_one(self, db, bank_account_id) -> BankAccount:
        snapshot = dataclasses.replace(
            self._get(bank_account_id),
            transactions=tuple(self.ledger[bank_account_id]),
        )
        await asyncio.sleep(0)  # concurrent callers may now act on the same stale snapshot
        return snapshot

    async def find_all(self, db, page, page_size) -> BankAccountPage:
        ordered = sorted(self.accounts.values(), key=lambda a: a.account_number or 0)
        if page is None or page_size is None:
            return BankAccountPage.unpaged(ordered)
        start = page_offset(page, page_size)
        return BankAccountPage.paged(
            ordered[start:start + page_size], page=page, page_size=page_size, total=len(ordered)
        )

    async def increment_balance(self, db, bank_account_id, amount: Decimal) -> BankAccount:
        async with self._lock:
            account = self._get(bank_account_id)
            updated = dataclasses.replace(
                account, balance=account.balance + amount, updated_at=utc_now()
            )
            self._append(bank_account_id, TransactionType.DEPOSIT, amount)
            return self._store(updated)

    async def decrement_balance(self, db, bank_account_id, amount: Decimal) -> BankAccount:
        async with self._lock:
            account = self._get(bank_account_id)
            if account.balance < amount:
                raise InsufficientFundsError()
            updated = dataclasses.replace(
                account, balance=account.balance - amount, updated_at=utc_now()
            )
            self._append(bank_account_id, TransactionType.WITHDRAW, amount)
            return self._store(updated)

    async def clear(self, db) -> None:
        self.accounts.clear()
        self.ledger.clear()

    def _append(self, bank_account_id: str, tx_type: TransactionType, amount: Decimal) -> None:
        self.ledger[bank_account_id].append(
            LedgerTransaction(
                id=self._tx_ids(),
                type=tx_type,
                value=amount,
                bank_account_id=bank_account_id,
                created_at=utc_now(),
            )
        )


@pytest.fixture
def memory_repo() -> InMemoryBankAccountRepository:
    return InMemoryBankAccountRepository()


@pytest.fixture
def db() -> AsyncMock:
    """Stand-in AsyncSession: commit/rollback are awaitable no-ops."""
    return AsyncMock()


@pytest.fixture
def service(memory_repo: InMemoryBankAccountRepository) -> BankAccountManagementService:
    return BankAccountManagementService(repo=memory_repo, id_generator=SequentialIdGenerator())


@pytest.fixture
def api_service(
    memory_repo: InMemoryBankAccountRepository, monkeypatch: pytest.MonkeyPatch
) -> Iterator[BankAccountManagementService]:
    """Route the HTTP layer to an in-memory service and a fake session."""
    svc = BankAccountManagementService(repo=memory_repo)
    monkeypatch.setattr(router_module, "_service", svc)

    async def _fake_session() -> AsyncGenerator[AsyncMock, None]:
        yield AsyncMock()

    app.dependency_overrides[get_db_session] = _fake_session
    yield svc
    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def api_client(
    api_service: BankAccountManagementService, client: AsyncClient
) -> AsyncClient:
    return client
