# finance_app/api/v1/endpoints/bank_accounts.py
import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from finance_app import schemas
from finance_app import crud
from finance_app.db import models
from finance_app.api.v1 import deps

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_owned_bank_account(
    bank_account_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_async_db),
    auth_context: deps.AuthContext = Depends(deps.get_auth_context)
) -> models.BankAccount:
    try:
        bank_account = await crud.crud_bank_account.get_bank_account(db, bank_account_id=bank_account_id)
    except Exception:
        logger.exception("Error reading bank account %s", bank_account_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not retrieve bank account")

    if not bank_account:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bank account not found")
    if bank_account.owner_user_id != auth_context.owner_user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not enough permissions")
    return bank_account


@router.get("/", response_model=List[schemas.BankAccount])
async def read_bank_accounts(
    db: AsyncSession = Depends(deps.get_async_db),
    auth_context: deps.AuthContext = Depends(deps.get_auth_context),
):
    """
    Bank accounts of the current user, newest first, each with its balance
    (sum of its transactions).
    """
    try:
        return await crud.crud_bank_account.get_bank_accounts_with_balance(
            db, owner_user_id=auth_context.owner_user_id
        )
    except Exception:
        logger.exception("Error reading bank accounts")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not retrieve bank accounts")


@router.get("/{bank_account_id}", response_model=schemas.BankAccount)
async def read_bank_account(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    bank_account: models.BankAccount = Depends(get_owned_bank_account),
):
    try:
        bank_account.balance = await crud.crud_bank_account.get_balance(db, bank_account_id=bank_account.id)
    except Exception:
        logger.exception("Error computing balance of bank account %s", bank_account.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not retrieve bank account")
    return bank_account


@router.post("/", response_model=schemas.BankAccount, status_code=status.HTTP_201_CREATED)
async def create_bank_account(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    bank_account_in: schemas.BankAccountCreate,
    auth_context: deps.AuthContext = Depends(deps.get_auth_context),
):
    try:
        return await crud.crud_bank_account.create_bank_account(
            db, obj_in=bank_account_in, owner_user_id=auth_context.owner_user_id
        )
    except Exception:
        logger.exception("Error creating bank account")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not create bank account")


@router.put("/{bank_account_id}", response_model=schemas.BankAccount)
async def update_bank_account(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    bank_account: models.BankAccount = Depends(get_owned_bank_account),
    bank_account_in: schemas.BankAccountUpdate,
):
    try:
        updated = await crud.crud_bank_account.update_bank_account(db, db_obj=bank_account, obj_in=bank_account_in)
        updated.balance = await crud.crud_bank_account.get_balance(db, bank_account_id=updated.id)
        return updated
    except Exception:
        logger.exception("Error updating bank account %s", bank_account.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not update bank account")


@router.delete("/{bank_account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bank_account(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    bank_account: models.BankAccount = Depends(get_owned_bank_account),
):
    """
    Delete an account together with its transactions. Recurring series that
    used it are kept without an account.
    """
    try:
        await crud.crud_bank_account.remove_bank_account(db, db_obj=bank_account)
    except Exception:
        logger.exception("Error deleting bank account %s", bank_account.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not delete bank account")
    return None
