from typing import Any
from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from mt5platform.core.modules.account.models import Account, AccountUpdate
from mt5platform.web.deps import AccountManagerDep, AppDep, PrincipalDep
from mt5platform.web.openapi import ErrorResponse, MessageResponse

router = APIRouter(tags=["accounts"])

MANAGER_RESPONSES: dict[int | str, dict[str, object]] = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    403: {"model": ErrorResponse, "description": "Manager or Admin access required"},
}


class CreateAccountRequest(BaseModel):
    """Request to register an MT5 account."""

    account_number: str | None = Field(None, description="Broker account number (unique)")
    password: str | None = Field(None, description="Broker account password")
    server: str | None = Field(None, description="Broker server name")
    provider: str | None = Field(None, description="One of ftmo, forex, xm (case-insensitive)")
    account_type: str | None = Field(None, description="One of challenge, verification, live; defaults to challenge")
    base_balance: Any = Field(0, description="Non-negative starting balance")


class UpdateAccountRequest(BaseModel):
    """Partial account update. Omitted fields are left unchanged."""

    account_number: str | None = None
    password: str | None = None
    server: str | None = None
    provider: str | None = None
    account_type: str | None = None
    base_balance: Any = None


class AccountResponse(BaseModel):
    account: Account
    message: str


@router.get(
    "/accounts",
    summary="List accounts",
    description="Get all MT5 accounts. Any authenticated role may read.",
    operation_id="listAccounts",
    responses={
        200: {"description": "List of accounts"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_accounts(app: AppDep, _: PrincipalDep) -> list[Account]:
    return await app.get_all_accounts()


@router.post(
    "/accounts",
    summary="Create account",
    description="Register a new MT5 account.",
    operation_id="createAccount",
    status_code=201,
    responses={
        201: {"description": "Account created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid request or duplicate account number"},
        **MANAGER_RESPONSES,
    },
)
async def create_account(req: CreateAccountRequest, app: AppDep, principal: AccountManagerDep) -> AccountResponse:
    account = await app.create_account(
        principal, req.account_number, req.password, req.server, req.provider, req.base_balance, req.account_type
    )
    return AccountResponse(account=account, message="Account created successfully")


@router.put(
    "/accounts/{account_id}",
    summary="Update account",
    description="Update account fields with the same validation rules as creation.",
    operation_id="updateAccount",
    responses={
        200: {"description": "Account updated successfully"},
        400: {"model": ErrorResponse, "description": "Invalid request"},
        404: {"model": ErrorResponse, "description": "Account not found"},
        **MANAGER_RESPONSES,
    },
)
async def update_account(
    account_id: UUID, req: UpdateAccountRequest, app: AppDep, principal: AccountManagerDep
) -> AccountResponse:
    account = await app.update_account(principal, account_id, AccountUpdate.model_validate(req.model_dump()))
    return AccountResponse(account=account, message="Account updated successfully")


@router.delete(
    "/accounts/{account_id}",
    summary="Delete account",
    description="Delete an MT5 account.",
    operation_id="deleteAccount",
    responses={
        200: {"description": "Account deleted successfully"},
        404: {"model": ErrorResponse, "description": "Account not found"},
        **MANAGER_RESPONSES,
    },
)
async def delete_account(account_id: UUID, app: AppDep, _: AccountManagerDep) -> MessageResponse:
    await app.delete_account(account_id)
    return MessageResponse(message="Account deleted successfully")
