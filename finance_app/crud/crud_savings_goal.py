# finance_app/crud/crud_savings_goal.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import desc
from typing import Optional, List, Union, Dict, Any
from decimal import Decimal
import uuid

from finance_app.db.models.savings_goal import SavingsGoal as SavingsGoalModel
from finance_app.schemas.savings_goal import SavingsGoalCreate, SavingsGoalUpdate

# --- Read Operations ---

async def get_savings_goal(db: AsyncSession, savings_goal_id: uuid.UUID) -> Optional[SavingsGoalModel]:
    result = await db.execute(select(SavingsGoalModel).filter(SavingsGoalModel.id == savings_goal_id))
    return result.scalar_one_or_none()

async def get_savings_goals_by_owner(db: AsyncSession, *, owner_user_id: uuid.UUID) -> List[SavingsGoalModel]:
    result = await db.execute(
        select(SavingsGoalModel)
        .filter(SavingsGoalModel.owner_user_id == owner_user_id)
        .order_by(desc(SavingsGoalModel.created_at), SavingsGoalModel.id)
    )
    return list(result.scalars().all())

# --- Create Operation ---

async def create_savings_goal(
    db: AsyncSession,
    *,
    obj_in: SavingsGoalCreate,
    owner_user_id: uuid.UUID
) -> SavingsGoalModel:
    db_obj = SavingsGoalModel(
        name=obj_in.name,
        target_amount=obj_in.target_amount,
        target_date=obj_in.target_date,
        current_amount=Decimal("0"),
        icon=obj_in.icon,
        color=obj_in.color,
        owner_user_id=owner_user_id,
    )
    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    return db_obj

# --- Update Operations ---

async def update_savings_goal(
    db: AsyncSession,
    *,
    db_obj: SavingsGoalModel,
    obj_in: Union[SavingsGoalUpdate, Dict[str, Any]]
) -> SavingsGoalModel:
    if isinstance(obj_in, dict):
        update_data = obj_in
    else:
        update_data = obj_in.model_dump(exclude_unset=True)
    # Contributions are the only way to move the saved amount
    update_data.pop("current_amount", None)

    for field, value in update_data.items():
        if hasattr(db_obj, field):
            setattr(db_obj, field, value)

    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    return db_obj

async def add_contribution(db: AsyncSession, *, db_obj: SavingsGoalModel, amount: Decimal) -> SavingsGoalModel:
    """Add a positive amount to the saved total."""
    if amount <= 0:
        raise ValueError("Contribution must be positive")
    db_obj.current_amount = Decimal(db_obj.current_amount) + amount
    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    return db_obj

# --- Delete Operation ---

async def remove_savings_goal(db: AsyncSession, *, db_obj: SavingsGoalModel) -> SavingsGoalModel:
    await db.delete(db_obj)
    await db.flush()
    return db_obj
