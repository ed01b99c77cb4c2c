# finance_app/api/v1/endpoints/categories.py
import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from finance_app import schemas
from finance_app import crud
from finance_app.db import models
from finance_app.api.v1 import deps

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_owned_category(
    category_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_async_db),
    auth_context: deps.AuthContext = Depends(deps.get_auth_context)
) -> models.Category:
    # Another user's category is reported as missing, not forbidden
    category = await crud.crud_category.get_owned_category(
        db, category_id=category_id, owner_user_id=auth_context.owner_user_id
    )
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.get("/", response_model=List[schemas.Category])
async def read_categories(
    db: AsyncSession = Depends(deps.get_async_db),
    auth_context: deps.AuthContext = Depends(deps.get_auth_context),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, gt=0, le=500),
):
    """
    Categories of the current user, sorted by name.
    """
    try:
        return await crud.crud_category.get_categories_by_owner(
            db, owner_user_id=auth_context.owner_user_id, skip=skip, limit=limit
        )
    except Exception:
        logger.exception("Error reading categories")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not retrieve categories")


@router.get("/{category_id}", response_model=schemas.Category)
async def read_category(category: models.Category = Depends(get_owned_category)):
    return category


@router.post("/", response_model=schemas.Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    category_in: schemas.CategoryCreate,
    auth_context: deps.AuthContext = Depends(deps.get_auth_context),
):
    try:
        return await crud.crud_category.create_category(
            db, obj_in=category_in, owner_user_id=auth_context.owner_user_id
        )
    except Exception:
        logger.exception("Error creating category")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not create category")


@router.put("/{category_id}", response_model=schemas.Category)
async def update_category(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    category: models.Category = Depends(get_owned_category),
    category_in: schemas.CategoryUpdate,
):
    try:
        return await crud.crud_category.update_category(db, db_obj=category, obj_in=category_in)
    except Exception:
        logger.exception("Error updating category %s", category.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not update category")


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    category: models.Category = Depends(get_owned_category),
):
    """
    Delete a category. Transactions that used it become uncategorized.
    Refused with 409 while a budget is still scoped to it.
    """
    try:
        budget_count = await crud.crud_category.count_budgets_using_category(db, category_id=category.id)
    except Exception:
        logger.exception("Error checking budgets of category %s", category.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not delete category")
    if budget_count:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Category is used by {budget_count} budget(s); delete or re-scope them first",
        )

    try:
        await crud.crud_category.remove_category(db, db_obj=category)
    except Exception:
        logger.exception("Error deleting category %s", category.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not delete category")
    return None
