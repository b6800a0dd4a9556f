"""bank_accounts REST endpoints.

POST   /bank-accounts                       open an account (201)
PUT    /bank-accounts/{id}                  update agency / type
DELETE /bank-accounts/{id}                  deactivate (no physical delete)
GET    /bank-accounts/{id}                  detail incl. ledger transactions
GET    /bank-accounts?page=&pageSize=       list, paginated when both are given
PUT    /bank-accounts/{id}/deposit          deposit {value}
PUT    /bank-accounts/{id}/withdraw         withdraw {value}
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.bank_accounts.application.schemas import (
    BankAccountDetail,
    BankAccountListResponse,
    BankAccountResponse,
    CreateBankAccountRequest,
    DepositRequest,
    UpdateBankAccountRequest,
    WithdrawRequest,
)
from src.bank_accounts.application.service import BankAccountManagementService
from src.bank_common.database import get_db_session
from src.bank_common.response import ApiResponse, success_response

router = APIRouter(prefix="/bank-accounts", tags=["bank-accounts"])

_service = BankAccountManagementService()


@router.post("", status_code=status.HTTP_201_CREATED, summary="Bank Account Register")
async def create_bank_account(
    body: CreateBankAccountRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    account = await _service.create_account(db, body.agency, body.type)
    data = BankAccountResponse.from_domain(account).model_dump(mode="json")
    return success_response(data, request)


@router.put("/{bank_account_id}", summary="Bank Account Update")
async def update_bank_account(
    bank_account_id: UUID,
    body: UpdateBankAccountRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    account = await _service.update_account(
        db, str(bank_account_id), agency=body.agency, type=body.type
    )
    data = BankAccountResponse.from_domain(account).model_dump(mode="json")
    return success_response(data, request)


@router.delete("/{bank_account_id}", summary="Bank Account Deactivate")
async def deactivate_bank_account(
    bank_account_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    account = await _service.deactivate_account(db, str(bank_account_id))
    data = BankAccountResponse.from_domain(account).model_dump(mode="json")
    return success_response(data, request)


@router.get("/{bank_account_id}", summary="Bank Account Detail")
async def get_bank_account(
    bank_account_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    account = await _service.find_account(db, str(bank_account_id))
    data = BankAccountDetail.from_domain(account).model_dump(mode="json")
    return success_response(data, request)


@router.get("", summary="Bank Account List")
async def list_bank_accounts(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    page: int | None = Query(None, ge=1, description="1-indexed page; needs pageSize"),
    page_size: int | None = Query(
        None, ge=1, alias="pageSize", description="Items per page; needs page"
    ),
) -> ApiResponse:
    result = await _service.list_accounts(db, page, page_size)
    data = BankAccountListResponse.from_page(result).model_dump(mode="json", exclude_none=True)
    return success_response(data, request)


@router.put("/{bank_account_id}/deposit", summary="Bank Account Deposit")
async def deposit(
    bank_account_id: UUID,
    body: DepositRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    account = await _service.deposit_on_account(db, str(bank_account_id), body.value)
    data = BankAccountResponse.from_domain(account).model_dump(mode="json")
    return success_response(data, request)


@router.put("/{bank_account_id}/withdraw", summary="Bank Account Withdraw")
async def withdraw(
    bank_account_id: UUID,
    body: WithdrawRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    account = await _service.withdraw_from_account(db, str(bank_account_id), body.value)
    data = BankAccountResponse.from_domain(account).model_dump(mode="json")
    return success_response(data, request)
