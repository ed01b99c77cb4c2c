# finance_app/crud/crud_budget.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload
from typing import Optional, List, Union, Dict, Any
import uuid

from finance_app.db.models.budget import Budget as BudgetModel
from finance_app.schemas.budget import BudgetCreate, BudgetUpdate

# --- Read Operations ---

async def get_budget(db: AsyncSession, budget_id: uuid.UUID) -> Optional[BudgetModel]:
    """
    Budget by id, with its category loaded for display.
    Spending is not computed here, see services.budget_spending.
    """
    result = await db.execute(
        select(BudgetModel)
        .options(joinedload(BudgetModel.category))
        .filter(BudgetModel.id == budget_id)
    )
    return result.scalar_one_or_none()


async def get_budgets_by_owner(
    db: AsyncSession,
    *,
    owner_user_id: uuid.UUID,
    skip: int = 0,
    limit: Optional[int] = None
) -> List[BudgetModel]:
    """
    Budgets of one user, newest first, category joined in the same query
    so the list can be serialized without extra round trips.
    limit=None returns every budget.
    """
    stmt = (
        select(BudgetModel)
        .options(joinedload(BudgetModel.category))
        .filter(BudgetModel.owner_user_id == owner_user_id)
        .order_by(BudgetModel.created_at.desc(), BudgetModel.id)
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())

# --- Create Operation ---

async def create_budget_with_owner(
    db: AsyncSession,
    *,
    obj_in: BudgetCreate,
    owner_user_id: uuid.UUID
) -> BudgetModel:
    if obj_in.end_date is not None and obj_in.end_date < obj_in.start_date:
        raise ValueError("end_date must not precede start_date")

    db_obj = BudgetModel(
        name=obj_in.name,
        amount=obj_in.amount,
        period=obj_in.period,
        start_date=obj_in.start_date,
        end_date=obj_in.end_date,
        category_id=obj_in.category_id,
        owner_user_id=owner_user_id,
    )
    db.add(db_obj)
    await db.flush()
    # server defaults (created_at/updated_at) and the category for the response
    await db.refresh(db_obj, attribute_names=["created_at", "updated_at", "category"])
    return db_obj

# --- Update Operation ---

async def update_budget(
    db: AsyncSession,
    *,
    db_obj: BudgetModel,
    obj_in: Union[BudgetUpdate, Dict[str, Any]]
) -> BudgetModel:
    """
    Partial update of any field.
    Raises ValueError when the merged dates break end_date >= start_date.
    """
    if isinstance(obj_in, dict):
        update_data = obj_in
    else:
        update_data = obj_in.model_dump(exclude_unset=True)

    start_date = update_data.get("start_date", db_obj.start_date)
    end_date = update_data.get("end_date", db_obj.end_date)
    if start_date is None:
        raise ValueError("start_date is required")
    if end_date is not None and end_date < start_date:
        raise ValueError("end_date must not precede start_date")

    for field, value in update_data.items():
        if hasattr(db_obj, field):
            setattr(db_obj, field, value)

    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj, attribute_names=["updated_at", "category"])
    return db_obj

# --- Delete Operation ---

async def remove_budget(db: AsyncSession, *, budget_id: uuid.UUID) -> Optional[BudgetModel]:
    db_obj = await get_budget(db, budget_id=budget_id)
    if db_obj:
        await db.delete(db_obj)
        await db.flush()
    return db_obj
