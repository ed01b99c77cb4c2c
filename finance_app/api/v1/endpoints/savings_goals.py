# finance_app/api/v1/endpoints/savings_goals.py
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


async def get_owned_savings_goal(
    savings_goal_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_async_db),
    auth_context: deps.AuthContext = Depends(deps.get_auth_context)
) -> models.SavingsGoal:
    goal = await crud.crud_savings_goal.get_savings_goal(db, savings_goal_id=savings_goal_id)
    if not goal or goal.owner_user_id != auth_context.owner_user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Savings goal not found")
    return goal


@router.get("/", response_model=List[schemas.SavingsGoal])
async def read_savings_goals(
    db: AsyncSession = Depends(deps.get_async_db),
    auth_context: deps.AuthContext = Depends(deps.get_auth_context),
):
    try:
        return await crud.crud_savings_goal.get_savings_goals_by_owner(db, owner_user_id=auth_context.owner_user_id)
    except Exception:
        logger.exception("Error reading savings goals")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not retrieve savings goals")


@router.get("/{savings_goal_id}", response_model=schemas.SavingsGoal)
async def read_savings_goal(goal: models.SavingsGoal = Depends(get_owned_savings_goal)):
    return goal


@router.post("/", response_model=schemas.SavingsGoal, status_code=status.HTTP_201_CREATED)
async def create_savings_goal(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    goal_in: schemas.SavingsGoalCreate,
    auth_context: deps.AuthContext = Depends(deps.get_auth_context),
):
    """
    Create a goal. The saved amount starts at zero.
    """
    try:
        return await crud.crud_savings_goal.create_savings_goal(
            db, obj_in=goal_in, owner_user_id=auth_context.owner_user_id
        )
    except Exception:
        logger.exception("Error creating savings goal")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not create savings goal")


@router.put("/{savings_goal_id}", response_model=schemas.SavingsGoal)
async def update_savings_goal(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    goal: models.SavingsGoal = Depends(get_owned_savings_goal),
    goal_in: schemas.SavingsGoalUpdate,
):
    try:
        return await crud.crud_savings_goal.update_savings_goal(db, db_obj=goal, obj_in=goal_in)
    except Exception:
        logger.exception("Error updating savings goal %s", goal.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not update savings goal")


@router.post("/{savings_goal_id}/contributions", response_model=schemas.SavingsGoal)
async def contribute_to_savings_goal(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    goal: models.SavingsGoal = Depends(get_owned_savings_goal),
    contribution_in: schemas.SavingsGoalContribution,
):
    """
    Add money to a goal's saved amount.
    """
    try:
        return await crud.crud_savings_goal.add_contribution(db, db_obj=goal, amount=contribution_in.amount)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Error adding contribution to savings goal %s", goal.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not add contribution")


@router.delete("/{savings_goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_savings_goal(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    goal: models.SavingsGoal = Depends(get_owned_savings_goal),
):
    try:
        await crud.crud_savings_goal.remove_savings_goal(db, db_obj=goal)
    except Exception:
        logger.exception("Error deleting savings goal %s", goal.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not delete savings goal")
    return None
