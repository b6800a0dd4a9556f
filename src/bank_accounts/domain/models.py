"""Domain models for bank_accounts: pure dataclasses, no SQLAlchemy dependency."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from src.bank_common.datetime_utils import Clock, utc_now
from src.bank_common.enums import BankAccountType, TransactionType
from src.bank_common.id_generator import IdGenerator, generate_id


@dataclass(frozen=True)
class LedgerTransaction:
    """Append-only record of one deposit or withdrawal."""

    id: str
    type: TransactionType
    value: Decimal                   # always positive; direction comes from type
    bank_account_id: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class BankAccount:
    id: str
    agency: str
    type: BankAccountType
    balance: Decimal
    is_active: bool
    created_at: datetime
    updated_at: datetime
    account_number: int | None = None   # assigned by the database on insert
    transactions: tuple[LedgerTransaction, ...] = ()


def create_bank_account(
    agency: str,
    type: BankAccountType,
    balance: Decimal = Decimal("0"),
    is_active: bool = True,
    id_generator: IdGenerator = generate_id,
    clock: Clock = utc_now,
) -> BankAccount:
    """Build a brand-new account with a fresh id and created_at == updated_at."""
    now = clock()
    return BankAccount(
        id=id_generator(),
        agency=agency,
        type=type,
        balance=balance,
        is_active=is_active,
        created_at=now,
        updated_at=now,
    )


def page_offset(page: int, page_size: int) -> int:
    """Row offset of a 1-indexed page."""
    return (page - 1) * page_size


def page_count(total: int, page_size: int) -> int:
    if total == 0:
        return 0
    return math.ceil(total / page_size)


@dataclass(frozen=True)
class BankAccountPage:
    """Result of a listing. Pagination fields are all None for an unpaged listing."""

    accounts: list[BankAccount] = field(default_factory=list)
    page: int | None = None
    page_size: int | None = None
    total: int | None = None
    page_count: int | None = None

    @classmethod
    def unpaged(cls, accounts: list[BankAccount]) -> "BankAccountPage":
        return cls(accounts=accounts)

    @classmethod
    def paged(
        cls,
        accounts: list[BankAccount],
        page: int,
        page_size: int,
        total: int,
    ) -> "BankAccountPage":
        return cls(
            accounts=accounts,
            page=page,
            page_size=page_size,
            total=total,
            page_count=page_count(total, page_size),
        )

    @property
    def is_paged(self) -> bool:
        return self.page is not None
