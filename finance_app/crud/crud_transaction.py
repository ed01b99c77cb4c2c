# finance_app/crud/crud_transaction.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload
from sqlalchemy import func, desc, and_
from typing import Optional, List, Union, Dict, Any, Tuple
from datetime import datetime, date, time
from zoneinfo import ZoneInfo
import uuid

from finance_app.core.config import settings
from finance_app.db.models.transaction import Transaction as TransactionModel
from finance_app.schemas.transaction import TransactionCreate, TransactionUpdate

# --- Read Operations ---

async def get_transaction(db: AsyncSession, transaction_id: uuid.UUID) -> Optional[TransactionModel]:
    result = await db.execute(
        select(TransactionModel)
        .options(joinedload(TransactionModel.category))
        .filter(TransactionModel.id == transaction_id)
    )
    return result.scalar_one_or_none()


def local_day_bounds(day: date) -> Tuple[datetime, datetime]:
    """First and last instant of a calendar day in the zone budgets are computed in."""
    zone = ZoneInfo(settings.BUDGET_TIMEZONE)
    return datetime.combine(day, time.min, tzinfo=zone), datetime.combine(day, time.max, tzinfo=zone)


def _filter_conditions(owner_user_id: uuid.UUID, filters: Dict[str, Any]) -> list:
    conditions = [TransactionModel.owner_user_id == owner_user_id]
    if filters.get("category_id"):
        conditions.append(TransactionModel.category_id == filters["category_id"])
    if filters.get("bank_account_id"):
        conditions.append(TransactionModel.bank_account_id == filters["bank_account_id"])

    kind = filters.get("kind")
    if kind == "expense":
        conditions.append(TransactionModel.amount < 0)
    elif kind == "income":
        conditions.append(TransactionModel.amount > 0)

    # Calendar days in the budget zone, inclusive on both ends
    start_date: Optional[date] = filters.get("start_date")
    end_date: Optional[date] = filters.get("end_date")
    if start_date:
        conditions.append(
            TransactionModel.transaction_date >= local_day_bounds(start_date)[0]
        )
    if end_date:
        conditions.append(
            TransactionModel.transaction_date <= local_day_bounds(end_date)[1]
        )
    return conditions


async def get_transactions_by_owner(
    db: AsyncSession,
    *,
    owner_user_id: uuid.UUID,
    skip: int = 0,
    limit: int = 50,
    filters: Optional[Dict[str, Any]] = None
) -> Tuple[List[TransactionModel], int]:
    """
    Paginated, filtered transactions of one user.
    Returns (page of transactions, total number of rows matching the filters).
    """
    conditions = _filter_conditions(owner_user_id, filters or {})

    count_query = select(func.count(TransactionModel.id)).where(and_(*conditions))
    total_count_res = await db.execute(count_query)
    total_count = total_count_res.scalar_one()

    query = (
        select(TransactionModel)
        .options(joinedload(TransactionModel.category))
        .where(and_(*conditions))
        .order_by(desc(TransactionModel.transaction_date), TransactionModel.id)
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all()), total_count


async def get_expenses_in_range(
    db: AsyncSession,
    *,
    owner_user_id: uuid.UUID,
    start: datetime,
    end: datetime
) -> List[TransactionModel]:
    """
    Every expense (amount < 0) of the user dated inside [start, end].
    One query, no per-category filtering; callers split the rows themselves.
    """
    result = await db.execute(
        select(TransactionModel).filter(
            TransactionModel.owner_user_id == owner_user_id,
            TransactionModel.transaction_date >= start,
            TransactionModel.transaction_date <= end,
            TransactionModel.amount < 0,
        )
    )
    return list(result.scalars().all())

# --- Create Operation ---

async def create_transaction(
    db: AsyncSession,
    *,
    obj_in: TransactionCreate,
    owner_user_id: uuid.UUID
) -> TransactionModel:
    db_obj = TransactionModel(
        amount=obj_in.amount,
        description=obj_in.description,
        transaction_date=obj_in.transaction_date,
        category_id=obj_in.category_id,
        bank_account_id=obj_in.bank_account_id,
        owner_user_id=owner_user_id,
    )
    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj, attribute_names=["created_at_db", "updated_at", "category"])
    return db_obj

# --- Update Operation ---

async def update_transaction(
    db: AsyncSession,
    *,
    db_obj: TransactionModel,
    obj_in: Union[TransactionUpdate, Dict[str, Any]]
) -> TransactionModel:
    if isinstance(obj_in, dict):
        update_data = obj_in
    else:
        update_data = obj_in.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        if hasattr(db_obj, field):
            setattr(db_obj, field, value)

    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj, attribute_names=["updated_at", "category"])
    return db_obj

# --- Delete Operation ---

async def remove_transaction(db: AsyncSession, *, transaction_id: uuid.UUID) -> Optional[TransactionModel]:
    db_obj = await get_transaction(db, transaction_id=transaction_id)
    if not db_obj:
        return None
    await db.delete(db_obj)
    await db.flush()
    return db_obj
