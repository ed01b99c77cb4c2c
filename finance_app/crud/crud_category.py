# finance_app/crud/crud_category.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from typing import Optional, List, Union, Dict, Any
import uuid

from finance_app.db.models.category import Category as CategoryModel
from finance_app.db.models.budget import Budget as BudgetModel
from finance_app.schemas.category import CategoryCreate, CategoryUpdate

# --- Read Operations ---

async def get_category(db: AsyncSession, category_id: uuid.UUID) -> Optional[CategoryModel]:
    result = await db.execute(select(CategoryModel).filter(CategoryModel.id == category_id))
    return result.scalar_one_or_none()

async def get_owned_category(
    db: AsyncSession,
    *,
    category_id: uuid.UUID,
    owner_user_id: uuid.UUID
) -> Optional[CategoryModel]:
    """Category by id, only if it belongs to the given user."""
    result = await db.execute(
        select(CategoryModel).filter(
            CategoryModel.id == category_id,
            CategoryModel.owner_user_id == owner_user_id,
        )
    )
    return result.scalar_one_or_none()

async def get_categories_by_owner(
    db: AsyncSession,
    *,
    owner_user_id: uuid.UUID,
    skip: int = 0,
    limit: int = 100
) -> List[CategoryModel]:
    result = await db.execute(
        select(CategoryModel)
        .filter(CategoryModel.owner_user_id == owner_user_id)
        .order_by(CategoryModel.name)
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all())

async def count_budgets_using_category(db: AsyncSession, *, category_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count(BudgetModel.id)).filter(BudgetModel.category_id == category_id)
    )
    return result.scalar_one()

# --- Create Operation ---

async def create_category(
    db: AsyncSession,
    *,
    obj_in: CategoryCreate,
    owner_user_id: uuid.UUID
) -> CategoryModel:
    db_obj = CategoryModel(
        name=obj_in.name,
        icon=obj_in.icon,
        color=obj_in.color,
        owner_user_id=owner_user_id,
    )
    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    return db_obj

# --- Update Operation ---

async def update_category(
    db: AsyncSession,
    *,
    db_obj: CategoryModel,
    obj_in: Union[CategoryUpdate, Dict[str, Any]]
) -> CategoryModel:
    if isinstance(obj_in, dict):
        update_data = obj_in
    else:
        update_data = obj_in.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        if hasattr(db_obj, field):
            setattr(db_obj, field, value)

    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    return db_obj

# --- Delete Operation ---

async def remove_category(db: AsyncSession, *, db_obj: CategoryModel) -> CategoryModel:
    # Transactions fall back to NULL through the FK; callers check budgets first (RESTRICT)
    await db.delete(db_obj)
    await db.flush()
    return db_obj
