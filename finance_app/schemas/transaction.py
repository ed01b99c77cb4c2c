# finance_app/schemas/transaction.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime, timezone
from decimal import Decimal
import uuid

from .category import CategoryDisplay, blank_to_none, reject_null


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TransactionBase(BaseModel):
    # Signed: negative for expenses, positive for income
    amount: Decimal = Field(..., max_digits=12, decimal_places=2)
    description: str = Field(..., min_length=1, max_length=256)
    transaction_date: datetime = Field(default_factory=_utc_now)
    category_id: Optional[uuid.UUID] = None
    bank_account_id: Optional[uuid.UUID] = None

    normalize_ids = field_validator("category_id", "bank_account_id", mode="before")(blank_to_none)

class TransactionCreate(TransactionBase):
    pass

class TransactionUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
    description: Optional[str] = Field(None, min_length=1, max_length=256)
    transaction_date: Optional[datetime] = None
    category_id: Optional[uuid.UUID] = None
    bank_account_id: Optional[uuid.UUID] = None

    normalize_ids = field_validator("category_id", "bank_account_id", mode="before")(blank_to_none)
    not_null = field_validator("amount", "description", "transaction_date", mode="before")(reject_null)

class TransactionInDBBase(TransactionBase):
    id: uuid.UUID
    owner_user_id: uuid.UUID
    created_at_db: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class Transaction(TransactionInDBBase):
    category: Optional[CategoryDisplay] = None

class TransactionListResponse(BaseModel):
    transactions: List[Transaction]
    total_count: int # Number of rows matching the filters, ignoring pagination
