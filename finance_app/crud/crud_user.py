# finance_app/crud/crud_user.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Optional
import uuid

from finance_app.db.models.user import User as UserModel
from finance_app.schemas.user import UserCreate, UserUpdate

# --- Read Operations ---

async def get_user(db: AsyncSession, user_id: uuid.UUID) -> Optional[UserModel]:
    result = await db.execute(select(UserModel).filter(UserModel.id == user_id))
    return result.scalar_one_or_none()

# --- Create / Update Operations ---

async def create_user(db: AsyncSession, *, user_in: UserCreate) -> UserModel:
    db_user = UserModel(id=user_in.id, email=user_in.email, name=user_in.name)
    db.add(db_user)
    await db.flush()
    return db_user

async def update_user(db: AsyncSession, *, db_obj: UserModel, obj_in: UserUpdate) -> UserModel:
    update_data = obj_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if hasattr(db_obj, field):
            setattr(db_obj, field, value)
    db.add(db_obj)
    return db_obj

async def get_or_create_or_update_user_from_session(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    email: Optional[str] = None,
    name: Optional[str] = None,
) -> UserModel:
    """
    Return the local user for the session claims.
    Created on the first request, email/name refreshed when the auth service changed them.
    """
    db_user = await get_user(db, user_id=user_id)
    if db_user is None:
        return await create_user(db, user_in=UserCreate(id=user_id, email=email, name=name))

    changes = {}
    if email is not None and db_user.email != email:
        changes["email"] = email
    if name is not None and db_user.name != name:
        changes["name"] = name
    if changes:
        db_user = await update_user(db, db_obj=db_user, obj_in=UserUpdate(**changes))
    return db_user
