# finance_app/api/v1/endpoints/budgets.py
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from finance_app import schemas
from finance_app import crud
from finance_app.db import models
from finance_app.api.v1 import deps
from finance_app.services import budget_spending

logger = logging.getLogger(__name__)

router = APIRouter()


async def _check_category(db: AsyncSession, category_id: Optional[uuid.UUID], owner_user_id: uuid.UUID) -> None:
    if category_id is None:
        return
    category = await crud.crud_category.get_owned_category(
        db, category_id=category_id, owner_user_id=owner_user_id
    )
    if not category:
        raise ValueError("Category not found")


async def get_owned_budget(
    budget_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_async_db),
    auth_context: deps.AuthContext = Depends(deps.get_auth_context)
) -> models.Budget:
    """
    Load the budget from the path and make sure the caller owns it.
    """
    try:
        budget = await crud.crud_budget.get_budget(db=db, budget_id=budget_id)
    except Exception:
        logger.exception("Error reading budget %s", budget_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not retrieve budget details")

    if not budget:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")
    if budget.owner_user_id != auth_context.owner_user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not enough permissions")
    return budget


@router.get(
    "/",
    response_model=List[schemas.Budget]
)
async def read_budgets(
    db: AsyncSession = Depends(deps.get_async_db),
    auth_context: deps.AuthContext = Depends(deps.get_auth_context),
    now: datetime = Depends(deps.get_now),
):
    """
    Every budget of the current user with the amount spent in its current
    window. Spending is recomputed on each call.
    """
    try:
        return await budget_spending.get_budgets_with_spending(
            db, owner_user_id=auth_context.owner_user_id, now=now
        )
    except Exception:
        logger.exception("Error reading budgets for user %s", auth_context.owner_user_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not retrieve budgets")


@router.get(
    "/{budget_id}",
    response_model=schemas.Budget
)
async def read_budget(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    budget: models.Budget = Depends(get_owned_budget),
    now: datetime = Depends(deps.get_now),
):
    """
    One budget with its spending, computed the same way as the list.
    """
    try:
        enriched = await budget_spending.enrich_budgets_with_spending(
            db, owner_user_id=budget.owner_user_id, budgets=[budget], now=now
        )
    except Exception:
        logger.exception("Error computing spending for budget %s", budget.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not retrieve budget details")
    return enriched[0]


@router.post(
    "/",
    response_model=schemas.Budget,
    status_code=status.HTTP_201_CREATED
)
async def create_budget(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    budget_in: schemas.BudgetCreate,
    auth_context: deps.AuthContext = Depends(deps.get_auth_context),
    now: datetime = Depends(deps.get_now),
):
    """
    Create a budget for the current user.
    """
    try:
        await _check_category(db, budget_in.category_id, auth_context.owner_user_id)
        budget = await crud.crud_budget.create_budget_with_owner(
            db=db,
            obj_in=budget_in,
            owner_user_id=auth_context.owner_user_id
        )
        await budget_spending.enrich_budgets_with_spending(
            db, owner_user_id=auth_context.owner_user_id, budgets=[budget], now=now
        )
        return budget
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Error creating budget")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not create budget")


@router.put(
    "/{budget_id}",
    response_model=schemas.Budget
)
async def update_budget(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    budget: models.Budget = Depends(get_owned_budget),
    budget_in: schemas.BudgetUpdate,
    now: datetime = Depends(deps.get_now),
):
    """
    Partially update a budget. The end date is re-checked against the
    (possibly updated) start date.
    """
    try:
        if "category_id" in budget_in.model_fields_set:
            await _check_category(db, budget_in.category_id, budget.owner_user_id)
        updated_budget = await crud.crud_budget.update_budget(db=db, db_obj=budget, obj_in=budget_in)
        await budget_spending.enrich_budgets_with_spending(
            db, owner_user_id=budget.owner_user_id, budgets=[updated_budget], now=now
        )
        return updated_budget
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Error updating budget %s", budget.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not update budget")


@router.delete(
    "/{budget_id}",
    status_code=status.HTTP_204_NO_CONTENT
)
async def delete_budget(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    budget: models.Budget = Depends(get_owned_budget),
):
    """
    Delete a budget. Transactions and categories are left untouched.
    """
    try:
        await crud.crud_budget.remove_budget(db=db, budget_id=budget.id)
    except Exception:
        logger.exception("Error deleting budget %s", budget.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not delete budget")
    return None
