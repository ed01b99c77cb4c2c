# finance_app/schemas/user.py
from pydantic import BaseModel
from typing import Optional
import uuid

class UserBase(BaseModel):
    # Claims we receive from the verified session and keep locally
    email: Optional[str] = None
    name: Optional[str] = None

class UserCreate(UserBase):
    id: uuid.UUID # Same id as in the auth service

class UserUpdate(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None

class UserInDBBase(UserBase):
    id: uuid.UUID

    class Config:
        from_attributes = True

class User(UserInDBBase):
    pass
