"""Account API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from carteira.api.dependencies import get_account_service, get_current_user_id, get_owned_account
from carteira.models.account import Account
from carteira.models.enums import AccountStatus
from carteira.schemas.account import (
    AccountCreate,
    AccountHistoryResponse,
    AccountResponse,
    AccountUpdate,
)
from carteira.services.account_service import AccountService, InvalidValidityWindowError

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    account_data: AccountCreate,
    user_id: Annotated[str, Depends(get_current_user_id)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
):
    """Create a new shared subscription account."""
    return account_service.create_account(user_id, account_data)


@router.get("", response_model=list[AccountResponse])
async def get_accounts(
    user_id: Annotated[str, Depends(get_current_user_id)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
    status: AccountStatus | None = None,
):
    """Get the current user's accounts, optionally filtered by status."""
    return account_service.list_accounts(user_id, status)


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account: Annotated[Account, Depends(get_owned_account)],
):
    """Get a specific account."""
    return account


@router.patch("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_data: AccountUpdate,
    account: Annotated[Account, Depends(get_owned_account)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
):
    """Update an account. The owner can never be changed."""
    if "owner_id" in account_data.model_fields_set:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot modify account owner",
        )

    try:
        return account_service.update_account(account, user_id, account_data)
    except InvalidValidityWindowError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account: Annotated[Account, Depends(get_owned_account)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
):
    """Delete an account."""
    account_service.delete_account(account, user_id)


@router.get("/{account_id}/history", response_model=list[AccountHistoryResponse])
async def get_account_history(
    account: Annotated[Account, Depends(get_owned_account)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
):
    """Get the mutation history of an account."""
    return account_service.get_history(account.id)
