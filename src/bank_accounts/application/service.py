"""BankAccountManagementService: the only place business rules live.

The router passes the request's db session in; the service hands it to the
repository and owns commit/rollback for every mutating call, so a balance
change and its ledger entry are committed together or not at all.
Reads (find_account, list_accounts) run without an explicit commit.
"""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.bank_accounts.domain.models import BankAccount, BankAccountPage, create_bank_account
from src.bank_accounts.domain.repository import BankAccountRepositoryProtocol
from src.bank_accounts.infrastructure.persistence import BankAccountRepository
from src.bank_common.datetime_utils import Clock, utc_now
from src.bank_common.enums import BankAccountType
from src.bank_common.errors import InsufficientFundsError, InvalidAmountError
from src.bank_common.id_generator import IdGenerator, generate_id

logger = logging.getLogger(__name__)


def _as_decimal(amount: Decimal | int | float) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    # str() first so 0.1 stays 0.1 instead of its binary expansion
    return Decimal(str(amount))


def _decimal_places(value: Decimal) -> int:
    """Significant fractional digits, so Decimal("1.500") counts as 1."""
    _, digits, exponent = value.as_tuple()
    while exponent < 0 and digits and digits[-1] == 0:
        digits = digits[:-1]
        exponent += 1
    return -exponent if exponent < 0 else 0


def _check_amount(bank_account_id: str, value: Decimal, verb: str) -> None:
    """Reject amounts NUMERIC(15, 2) cannot store exactly, or that are not positive."""
    if not value.is_finite():
        message = f"The amount to be {verb} must be a finite number"
    elif value <= 0:
        message = f"The amount to be {verb} must be greater than zero"
    elif _decimal_places(value) > 2:
        message = f"The amount to be {verb} must have at most two decimal places"
    else:
        return
    logger.warning("Amount rejected: account=%s amount=%s (%s)", bank_account_id, value, verb)
    raise InvalidAmountError(message)


class BankAccountManagementService:
    def __init__(
        self,
        repo: BankAccountRepositoryProtocol | None = None,
        id_generator: IdGenerator = generate_id,
        clock: Clock = utc_now,
    ) -> None:
        self._repo: BankAccountRepositoryProtocol = repo or BankAccountRepository()
        self._id_generator = id_generator
        self._clock = clock

    async def create_account(
        self, db: AsyncSession, agency: str, type: BankAccountType
    ) -> BankAccount:
        bank_account = create_bank_account(
            agency=agency,
            type=type,
            balance=Decimal("0"),
            id_generator=self._id_generator,
            clock=self._clock,
        )
        try:
            saved = await self._repo.save(db, bank_account)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Bank account created: id=%s number=%s", saved.id, saved.account_number)
        return saved

    async def update_account(
        self,
        db: AsyncSession,
        bank_account_id: str,
        agency: str | None = None,
        type: BankAccountType | None = None,
    ) -> BankAccount:
        try:
            account = await self._repo.update(db, bank_account_id, agency, type)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return account

    async def deactivate_account(self, db: AsyncSession, bank_account_id: str) -> BankAccount:
        # No "already inactive" check: a second deactivation is a no-op.
        try:
            account = await self._repo.deactivate_bank_account(db, bank_account_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Bank account deactivated: id=%s", bank_account_id)
        return account

    async def find_account(self, db: AsyncSession, bank_account_id: str) -> BankAccount:
        return await self._repo.find_one(db, bank_account_id)

    async def list_accounts(
        self,
        db: AsyncSession,
        page: int | None = None,
        page_size: int | None = None,
    ) -> BankAccountPage:
        # A lone page or page_size means no pagination.
        if page is None or page_size is None:
            page, page_size = None, None
        return await self._repo.find_all(db, page, page_size)

    async def deposit_on_account(
        self, db: AsyncSession, bank_account_id: str, amount: Decimal | int | float
    ) -> BankAccount:
        value = _as_decimal(amount)
        _check_amount(bank_account_id, value, "deposited")

        try:
            account = await self._repo.increment_balance(db, bank_account_id, value)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Deposit: account=%s amount=%s balance=%s", bank_account_id, value, account.balance
        )
        return account

    async def withdraw_from_account(
        self, db: AsyncSession, bank_account_id: str, amount: Decimal | int | float
    ) -> BankAccount:
        value = _as_decimal(amount)
        bank_account = await self.find_account(db, bank_account_id)
        self._validate_withdraw_amount(bank_account_id, value, bank_account.balance)

        try:
            account = await self._repo.decrement_balance(db, bank_account_id, value)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Withdraw: account=%s amount=%s balance=%s", bank_account_id, value, account.balance
        )
        return account

    def _validate_withdraw_amount(
        self, bank_account_id: str, amount: Decimal, balance: Decimal
    ) -> None:
        _check_amount(bank_account_id, amount, "withdrawn")
        if amount > balance:
            logger.warning(
                "Withdraw rejected: account=%s amount=%s balance=%s",
                bank_account_id,
                amount,
                balance,
            )
            raise InsufficientFundsError()
