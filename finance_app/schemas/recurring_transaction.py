# finance_app/schemas/recurring_transaction.py
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
import uuid

from finance_app.db.models.recurring_transaction import RecurrenceFrequency
from .category import CategoryDisplay, blank_to_none, reject_null


class RecurringTransactionBase(BaseModel):
    description: str = Field(..., min_length=1, max_length=256)
    notes: Optional[str] = None
    # Signed like a transaction amount
    amount: Decimal = Field(..., max_digits=12, decimal_places=2)
    frequency: RecurrenceFrequency
    interval: int = Field(1, ge=1)
    start_date: date
    end_date: Optional[date] = None
    is_subscription: bool = False
    category_id: Optional[uuid.UUID] = None
    bank_account_id: Optional[uuid.UUID] = None

    normalize_ids = field_validator("category_id", "bank_account_id", mode="before")(blank_to_none)

class RecurringTransactionCreate(RecurringTransactionBase):
    @model_validator(mode="after")
    def check_dates(self) -> "RecurringTransactionCreate":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")
        return self

class RecurringTransactionUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1, max_length=256)
    notes: Optional[str] = None
    amount: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
    frequency: Optional[RecurrenceFrequency] = None
    interval: Optional[int] = Field(None, ge=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_subscription: Optional[bool] = None
    category_id: Optional[uuid.UUID] = None
    bank_account_id: Optional[uuid.UUID] = None

    normalize_ids = field_validator("category_id", "bank_account_id", mode="before")(blank_to_none)
    not_null = field_validator(
        "description", "amount", "frequency", "interval", "start_date", "is_subscription", mode="before"
    )(reject_null)

class RecurringTransactionInDBBase(RecurringTransactionBase):
    id: uuid.UUID
    owner_user_id: uuid.UUID
    next_occurrence_date: date
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class RecurringTransaction(RecurringTransactionInDBBase):
    category: Optional[CategoryDisplay] = None
