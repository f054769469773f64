"""Loan account API"""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.deps import get_db
from pocketbooks.models.loan import LoanAccount
from pocketbooks.schemas.common import ApiResponse, PaginatedResponse
from pocketbooks.schemas.loan import LoanAccountCreate, LoanAccountResponse, LoanAccountUpdate
from pocketbooks.services import crud, loans as loan_service
from pocketbooks.services.crud import ListParams

router = APIRouter()

SEARCH_FIELDS = ("bank_name", "account_number", "loan_type")


@router.get("", response_model=PaginatedResponse[LoanAccountResponse])
async def list_loan_accounts(
    *,
    db: AsyncSession = Depends(get_db),
    params: ListParams = Depends(),
) -> Any:
    loans, pagination = await crud.get_all(db, LoanAccount, params, SEARCH_FIELDS)
    return PaginatedResponse[LoanAccountResponse](
        data=[LoanAccountResponse.model_validate(loan) for loan in loans],
        pagination=pagination,
    )


@router.get("/{loan_account_id}", response_model=ApiResponse[LoanAccountResponse])
async def get_loan_account(
    *,
    db: AsyncSession = Depends(get_db),
    loan_account_id: int,
) -> Any:
    loan = await crud.get_by_id(db, LoanAccount, loan_account_id)
    return ApiResponse[LoanAccountResponse](data=LoanAccountResponse.model_validate(loan))


@router.post("", response_model=ApiResponse[LoanAccountResponse], status_code=201)
async def create_loan_account(
    *,
    db: AsyncSession = Depends(get_db),
    loan_in: LoanAccountCreate,
) -> Any:
    data = loan_in.model_dump()
    data["account_number"] = data["account_number"].strip()
    if data.get("outstanding_amount") is None:
        data["outstanding_amount"] = data["principal_amount"]
    loan = await crud.create(db, LoanAccount, data, unique_field="account_number")
    await db.commit()
    return ApiResponse[LoanAccountResponse](
        data=LoanAccountResponse.model_validate(loan),
        message="Loan account created successfully",
    )


@router.put("/{loan_account_id}", response_model=ApiResponse[LoanAccountResponse])
async def update_loan_account(
    *,
    db: AsyncSession = Depends(get_db),
    loan_account_id: int,
    loan_in: LoanAccountUpdate,
) -> Any:
    data = loan_in.model_dump(exclude_unset=True)
    if data.get("account_number"):
        data["account_number"] = data["account_number"].strip()
    loan = await crud.update(db, LoanAccount, loan_account_id, data, unique_field="account_number")
    await db.commit()
    return ApiResponse[LoanAccountResponse](
        data=LoanAccountResponse.model_validate(loan),
        message="Loan account updated successfully",
    )


@router.delete("/{loan_account_id}", response_model=ApiResponse)
async def delete_loan_account(
    *,
    db: AsyncSession = Depends(get_db),
    loan_account_id: int,
) -> Any:
    await loan_service.delete_loan_account(db, loan_account_id)
    await db.commit()
    return ApiResponse(message="Loan account deleted successfully")
