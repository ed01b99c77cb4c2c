# finance_app/api/v1/endpoints/recurring_transactions.py
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from finance_app import schemas
from finance_app import crud
from finance_app.db import models
from finance_app.api.v1 import deps
from finance_app.api.v1.endpoints.transactions import check_category, check_bank_account

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_owned_recurring_transaction(
    recurring_transaction_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_async_db),
    auth_context: deps.AuthContext = Depends(deps.get_auth_context)
) -> models.RecurringTransaction:
    item = await crud.crud_recurring_transaction.get_recurring_transaction(
        db, recurring_transaction_id=recurring_transaction_id
    )
    if not item or item.owner_user_id != auth_context.owner_user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recurring transaction not found")
    return item


@router.get("/", response_model=List[schemas.RecurringTransaction])
async def read_recurring_transactions(
    db: AsyncSession = Depends(deps.get_async_db),
    auth_context: deps.AuthContext = Depends(deps.get_auth_context),
    is_subscription: Optional[bool] = Query(None, description="Only subscriptions (true) or only the others (false)"),
):
    try:
        return await crud.crud_recurring_transaction.get_recurring_transactions_by_owner(
            db, owner_user_id=auth_context.owner_user_id, is_subscription=is_subscription
        )
    except Exception:
        logger.exception("Error reading recurring transactions")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not retrieve recurring transactions")


@router.get("/{recurring_transaction_id}", response_model=schemas.RecurringTransaction)
async def read_recurring_transaction(item: models.RecurringTransaction = Depends(get_owned_recurring_transaction)):
    return item


@router.post("/", response_model=schemas.RecurringTransaction, status_code=status.HTTP_201_CREATED)
async def create_recurring_transaction(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    item_in: schemas.RecurringTransactionCreate,
    auth_context: deps.AuthContext = Depends(deps.get_auth_context),
    now: datetime = Depends(deps.get_now),
):
    """
    Register a recurring series. Its first next occurrence is computed from
    the start date, frequency and interval; no transaction is created.
    """
    await check_category(db, item_in.category_id, auth_context.owner_user_id)
    await check_bank_account(db, item_in.bank_account_id, auth_context.owner_user_id)
    try:
        return await crud.crud_recurring_transaction.create_recurring_transaction(
            db, obj_in=item_in, owner_user_id=auth_context.owner_user_id, today=now.date()
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Error creating recurring transaction")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not create recurring transaction")


@router.put("/{recurring_transaction_id}", response_model=schemas.RecurringTransaction)
async def update_recurring_transaction(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    item: models.RecurringTransaction = Depends(get_owned_recurring_transaction),
    item_in: schemas.RecurringTransactionUpdate,
    now: datetime = Depends(deps.get_now),
):
    if "category_id" in item_in.model_fields_set:
        await check_category(db, item_in.category_id, item.owner_user_id)
    if "bank_account_id" in item_in.model_fields_set:
        await check_bank_account(db, item_in.bank_account_id, item.owner_user_id)
    try:
        return await crud.crud_recurring_transaction.update_recurring_transaction(
            db, db_obj=item, obj_in=item_in, today=now.date()
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Error updating recurring transaction %s", item.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not update recurring transaction")


@router.delete("/{recurring_transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recurring_transaction(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    item: models.RecurringTransaction = Depends(get_owned_recurring_transaction),
):
    try:
        await crud.crud_recurring_transaction.remove_recurring_transaction(db, db_obj=item)
    except Exception:
        logger.exception("Error deleting recurring transaction %s", item.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not delete recurring transaction")
    return None
