# finance_app/schemas/savings_goal.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
import uuid

from .category import HEX_COLOR_PATTERN, reject_null


class SavingsGoalBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    target_amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    target_date: Optional[date] = None
    icon: Optional[str] = Field("🎯", max_length=50)
    color: Optional[str] = Field("#A855F7", pattern=HEX_COLOR_PATTERN)

class SavingsGoalCreate(SavingsGoalBase):
    pass

class SavingsGoalUpdate(BaseModel):
    # current_amount only moves through contributions
    name: Optional[str] = Field(None, min_length=1, max_length=256)
    target_amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    target_date: Optional[date] = None
    icon: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)

    not_null = field_validator("name", "target_amount", mode="before")(reject_null)

class SavingsGoalContribution(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)

class SavingsGoalInDBBase(SavingsGoalBase):
    id: uuid.UUID
    owner_user_id: uuid.UUID
    current_amount: Decimal
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class SavingsGoal(SavingsGoalInDBBase):
    pass
