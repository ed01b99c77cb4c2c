# finance_app/schemas/budget.py
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
import uuid

from finance_app.db.models.budget import BudgetPeriod
from .category import CategoryDisplay, blank_to_none, reject_null


class BudgetBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    period: BudgetPeriod = BudgetPeriod.monthly
    start_date: date = Field(default_factory=date.today)
    end_date: Optional[date] = None
    category_id: Optional[uuid.UUID] = None

    normalize_category = field_validator("category_id", mode="before")(blank_to_none)

class BudgetCreate(BudgetBase):
    @model_validator(mode="after")
    def check_dates(self) -> "BudgetCreate":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")
        return self

class BudgetUpdate(BaseModel):
    # Every field is optional; the merged result is re-checked in crud
    name: Optional[str] = Field(None, min_length=1, max_length=256)
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    period: Optional[BudgetPeriod] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category_id: Optional[uuid.UUID] = None

    normalize_category = field_validator("category_id", mode="before")(blank_to_none)
    not_null = field_validator("name", "amount", "period", "start_date", mode="before")(reject_null)

class BudgetInDBBase(BudgetBase):
    id: uuid.UUID
    owner_user_id: uuid.UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class Budget(BudgetInDBBase):
    # Derived on every read, never stored
    spent_amount: Decimal = Field(default=Decimal("0"))
    remaining_amount: Decimal = Field(default=Decimal("0"))
    category: Optional[CategoryDisplay] = None
