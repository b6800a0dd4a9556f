"""Pydantic schemas for the bank_accounts API.

Request models forbid unknown fields so a typo in a body is a 400 rather
than a silently ignored value.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from src.bank_accounts.domain.models import BankAccount, BankAccountPage, LedgerTransaction
from src.bank_common.datetime_utils import to_iso
from src.bank_common.enums import BankAccountType, TransactionType

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateBankAccountRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    agency: str = Field(..., min_length=1, max_length=32)
    type: BankAccountType


class UpdateBankAccountRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    agency: str | None = Field(None, min_length=1, max_length=32)
    type: BankAccountType | None = None


class DepositRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    value: Decimal = Field(
        ..., gt=0, max_digits=15, decimal_places=2, description="Amount to deposit"
    )


class WithdrawRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    value: Decimal = Field(
        ..., gt=0, max_digits=15, decimal_places=2, description="Amount to withdraw"
    )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TransactionItem(BaseModel):
    id: str
    type: TransactionType
    value: float
    bank_account_id: str
    created_at: str  # ISO8601 string

    @classmethod
    def from_domain(cls, tx: LedgerTransaction) -> "TransactionItem":
        return cls(
            id=tx.id,
            type=tx.type,
            value=float(tx.value),
            bank_account_id=tx.bank_account_id,
            created_at=to_iso(tx.created_at),
        )


class BankAccountResponse(BaseModel):
    id: str
    account_number: int | None
    agency: str
    type: BankAccountType
    balance: float
    is_active: bool
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, account: BankAccount) -> "BankAccountResponse":
        return cls(
            id=account.id,
            account_number=account.account_number,
            agency=account.agency,
            type=account.type,
            balance=float(account.balance),
            is_active=account.is_active,
            created_at=to_iso(account.created_at),
            updated_at=to_iso(account.updated_at),
        )


class BankAccountDetail(BankAccountResponse):
    transactions: list[TransactionItem]

    @classmethod
    def from_domain(cls, account: BankAccount) -> "BankAccountDetail":
        base = BankAccountResponse.from_domain(account)
        return cls(
            **base.model_dump(),
            transactions=[TransactionItem.from_domain(t) for t in account.transactions],
        )


class BankAccountListResponse(BaseModel):
    """Dump with exclude_none=True: an unpaged listing carries only bank_accounts."""

    bank_accounts: list[BankAccountResponse]
    page: int | None = None
    page_size: int | None = None
    total: int | None = None
    page_count: int | None = None

    @classmethod
    def from_page(cls, result: BankAccountPage) -> "BankAccountListResponse":
        return cls(
            bank_accounts=[BankAccountResponse.from_domain(a) for a in result.accounts],
            page=result.page,
            page_size=result.page_size,
            total=result.total,
            page_count=result.page_count,
        )
