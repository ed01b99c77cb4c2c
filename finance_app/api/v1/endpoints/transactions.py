# finance_app/api/v1/endpoints/transactions.py
import logging
import uuid
from datetime import date
from enum import Enum
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from finance_app import schemas
from finance_app import crud
from finance_app.db import models
from finance_app.api.v1 import deps

logger = logging.getLogger(__name__)

router = APIRouter()


class TransactionKind(str, Enum):
    all = "all"
    expense = "expense"
    income = "income"


async def get_owned_transaction(
    transaction_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_async_db),
    auth_context: deps.AuthContext = Depends(deps.get_auth_context)
) -> models.Transaction:
    transaction = await crud.crud_transaction.get_transaction(db, transaction_id=transaction_id)
    if not transaction or transaction.owner_user_id != auth_context.owner_user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return transaction


async def check_category(db: AsyncSession, category_id: Optional[uuid.UUID], owner_user_id: uuid.UUID) -> None:
    if category_id is None:
        return
    category = await crud.crud_category.get_owned_category(
        db, category_id=category_id, owner_user_id=owner_user_id
    )
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")


async def check_bank_account(db: AsyncSession, bank_account_id: Optional[uuid.UUID], owner_user_id: uuid.UUID) -> None:
    if bank_account_id is None:
        return
    bank_account = await crud.crud_bank_account.get_owned_bank_account(
        db, bank_account_id=bank_account_id, owner_user_id=owner_user_id
    )
    if not bank_account:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bank account not found")


@router.get("/", response_model=schemas.TransactionListResponse)
async def read_transactions(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    auth_context: deps.AuthContext = Depends(deps.get_auth_context),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(50, gt=0, le=200, description="Page size"),
    category_id: Optional[uuid.UUID] = Query(None, description="Only this category"),
    bank_account_id: Optional[uuid.UUID] = Query(None, description="Only this bank account"),
    kind: TransactionKind = Query(TransactionKind.all, description="expense, income or all"),
    start_date: Optional[date] = Query(None, description="First day, inclusive (YYYY-MM-DD)"),
    end_date: Optional[date] = Query(None, description="Last day, inclusive (YYYY-MM-DD)"),
):
    """
    Transactions of the current user, newest first, with filters and pagination.
    """
    if start_date and end_date and end_date < start_date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="end_date must not precede start_date")

    filters = {
        "category_id": category_id,
        "bank_account_id": bank_account_id,
        "kind": kind.value,
        "start_date": start_date,
        "end_date": end_date,
    }
    active_filters = {k: v for k, v in filters.items() if v is not None}

    try:
        transactions_list, total_count = await crud.crud_transaction.get_transactions_by_owner(
            db,
            owner_user_id=auth_context.owner_user_id,
            skip=skip,
            limit=limit,
            filters=active_filters,
        )
    except Exception:
        logger.exception("Error reading transactions")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not retrieve transactions")

    return schemas.TransactionListResponse(
        transactions=[schemas.Transaction.model_validate(t) for t in transactions_list],
        total_count=total_count,
    )


@router.get("/{transaction_id}", response_model=schemas.Transaction)
async def read_transaction(transaction: models.Transaction = Depends(get_owned_transaction)):
    return transaction


@router.post("/", response_model=schemas.Transaction, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    transaction_in: schemas.TransactionCreate,
    auth_context: deps.AuthContext = Depends(deps.get_auth_context),
):
    """
    Record a transaction. Negative amounts are expenses, positive ones income.
    """
    await check_category(db, transaction_in.category_id, auth_context.owner_user_id)
    await check_bank_account(db, transaction_in.bank_account_id, auth_context.owner_user_id)
    try:
        return await crud.crud_transaction.create_transaction(
            db, obj_in=transaction_in, owner_user_id=auth_context.owner_user_id
        )
    except Exception:
        logger.exception("Error creating transaction")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not create transaction")


@router.put("/{transaction_id}", response_model=schemas.Transaction)
async def update_transaction(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    transaction: models.Transaction = Depends(get_owned_transaction),
    transaction_in: schemas.TransactionUpdate,
):
    if "category_id" in transaction_in.model_fields_set:
        await check_category(db, transaction_in.category_id, transaction.owner_user_id)
    if "bank_account_id" in transaction_in.model_fields_set:
        await check_bank_account(db, transaction_in.bank_account_id, transaction.owner_user_id)
    try:
        return await crud.crud_transaction.update_transaction(db, db_obj=transaction, obj_in=transaction_in)
    except Exception:
        logger.exception("Error updating transaction %s", transaction.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not update transaction")


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    transaction: models.Transaction = Depends(get_owned_transaction),
):
    try:
        await crud.crud_transaction.remove_transaction(db, transaction_id=transaction.id)
    except Exception:
        logger.exception("Error deleting transaction %s", transaction.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not delete transaction")
    return None
