# finance_app/schemas/category.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Any
from datetime import datetime
import uuid

HEX_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


def blank_to_none(value: Any) -> Any:
    # "" and None both mean "not set" on the wire (no category, no account, no icon); only None is kept internally
    if isinstance(value, str) and not value.strip():
        return None
    return value


def reject_null(value: Any) -> Any:
    # Partial updates may omit a NOT NULL field, never send it as null
    if value is None:
        raise ValueError("may be omitted but not null")
    return value

class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    icon: str = Field("💡", min_length=1, max_length=50)
    color: str = Field("#ffffff", pattern=HEX_COLOR_PATTERN)

class CategoryCreate(CategoryBase):
    # owner_user_id comes from the session, never from the client
    pass

class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=256)
    icon: Optional[str] = Field(None, min_length=1, max_length=50)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)

    not_null = field_validator("name", "icon", "color", mode="before")(reject_null)

class CategoryInDBBase(CategoryBase):
    id: uuid.UUID
    owner_user_id: uuid.UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class Category(CategoryInDBBase):
    pass

class CategoryDisplay(BaseModel):
    """Display attributes of a category, embedded in budgets and transactions."""
    id: uuid.UUID
    name: str
    icon: str
    color: str

    class Config:
        from_attributes = True
