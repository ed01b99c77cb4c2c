# finance_app/crud/crud_recurring_transaction.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload
from sqlalchemy import desc
from typing import Optional, List, Union, Dict, Any
from datetime import date
import uuid

from finance_app.db.models.recurring_transaction import RecurringTransaction as RecurringTransactionModel
from finance_app.schemas.recurring_transaction import RecurringTransactionCreate, RecurringTransactionUpdate
from finance_app.services.recurrence import calculate_next_occurrence

# --- Read Operations ---

async def get_recurring_transaction(
    db: AsyncSession,
    recurring_transaction_id: uuid.UUID
) -> Optional[RecurringTransactionModel]:
    result = await db.execute(
        select(RecurringTransactionModel)
        .options(joinedload(RecurringTransactionModel.category))
        .filter(RecurringTransactionModel.id == recurring_transaction_id)
    )
    return result.scalar_one_or_none()

async def get_recurring_transactions_by_owner(
    db: AsyncSession,
    *,
    owner_user_id: uuid.UUID,
    is_subscription: Optional[bool] = None
) -> List[RecurringTransactionModel]:
    """Series of one user, latest next occurrence first; optionally only (non-)subscriptions."""
    stmt = (
        select(RecurringTransactionModel)
        .options(joinedload(RecurringTransactionModel.category))
        .filter(RecurringTransactionModel.owner_user_id == owner_user_id)
    )
    if is_subscription is not None:
        stmt = stmt.filter(RecurringTransactionModel.is_subscription == is_subscription)
    stmt = stmt.order_by(desc(RecurringTransactionModel.next_occurrence_date), RecurringTransactionModel.id)
    result = await db.execute(stmt)
    return list(result.scalars().all())

# --- Create Operation ---

async def create_recurring_transaction(
    db: AsyncSession,
    *,
    obj_in: RecurringTransactionCreate,
    owner_user_id: uuid.UUID,
    today: date
) -> RecurringTransactionModel:
    if obj_in.end_date is not None and obj_in.end_date < obj_in.start_date:
        raise ValueError("end_date must not precede start_date")

    db_obj = RecurringTransactionModel(
        **obj_in.model_dump(),
        next_occurrence_date=calculate_next_occurrence(
            obj_in.start_date, obj_in.frequency, obj_in.interval, today
        ),
        owner_user_id=owner_user_id,
    )
    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj, attribute_names=["created_at", "updated_at", "category"])
    return db_obj

# --- Update Operation ---

async def update_recurring_transaction(
    db: AsyncSession,
    *,
    db_obj: RecurringTransactionModel,
    obj_in: Union[RecurringTransactionUpdate, Dict[str, Any]],
    today: date
) -> RecurringTransactionModel:
    """
    Partial update. The next occurrence is recomputed when the schedule
    (start date, frequency or interval) changes.
    Raises ValueError when the merged dates break end_date >= start_date.
    """
    if isinstance(obj_in, dict):
        update_data = obj_in
    else:
        update_data = obj_in.model_dump(exclude_unset=True)

    start_date = update_data.get("start_date", db_obj.start_date)
    end_date = update_data.get("end_date", db_obj.end_date)
    if end_date is not None and end_date < start_date:
        raise ValueError("end_date must not precede start_date")

    for field, value in update_data.items():
        if hasattr(db_obj, field):
            setattr(db_obj, field, value)

    if {"start_date", "frequency", "interval"} & update_data.keys():
        db_obj.next_occurrence_date = calculate_next_occurrence(
            db_obj.start_date, db_obj.frequency, db_obj.interval, today
        )

    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj, attribute_names=["updated_at", "category"])
    return db_obj

# --- Delete Operation ---

async def remove_recurring_transaction(
    db: AsyncSession,
    *,
    db_obj: RecurringTransactionModel
) -> RecurringTransactionModel:
    await db.delete(db_obj)
    await db.flush()
    return db_obj
