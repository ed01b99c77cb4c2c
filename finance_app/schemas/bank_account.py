# finance_app/schemas/bank_account.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
import uuid

from .category import blank_to_none, reject_null

# #RGB or #RRGGBB
SHORT_OR_LONG_HEX_PATTERN = r"^#([0-9a-fA-F]{3}){1,2}$"


class BankAccountBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    icon: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, pattern=SHORT_OR_LONG_HEX_PATTERN)

    blank_display = field_validator("icon", "color", mode="before")(blank_to_none)

class BankAccountCreate(BankAccountBase):
    pass

class BankAccountUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=256)
    icon: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, pattern=SHORT_OR_LONG_HEX_PATTERN)

    blank_display = field_validator("icon", "color", mode="before")(blank_to_none)
    not_null = field_validator("name", mode="before")(reject_null)

class BankAccountInDBBase(BankAccountBase):
    id: uuid.UUID
    owner_user_id: uuid.UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class BankAccount(BankAccountInDBBase):
    # Sum of the signed amounts of the account's transactions, derived on read
    balance: Decimal = Field(default=Decimal("0"))
