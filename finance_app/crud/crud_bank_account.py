# finance_app/crud/crud_bank_account.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, desc
from typing import Optional, List, Union, Dict, Any
from decimal import Decimal
import uuid

from finance_app.db.models.bank_account import BankAccount as BankAccountModel
from finance_app.db.models.transaction import Transaction as TransactionModel
from finance_app.schemas.bank_account import BankAccountCreate, BankAccountUpdate

# --- Read Operations ---

async def get_bank_account(db: AsyncSession, bank_account_id: uuid.UUID) -> Optional[BankAccountModel]:
    result = await db.execute(select(BankAccountModel).filter(BankAccountModel.id == bank_account_id))
    return result.scalar_one_or_none()

async def get_owned_bank_account(
    db: AsyncSession,
    *,
    bank_account_id: uuid.UUID,
    owner_user_id: uuid.UUID
) -> Optional[BankAccountModel]:
    result = await db.execute(
        select(BankAccountModel).filter(
            BankAccountModel.id == bank_account_id,
            BankAccountModel.owner_user_id == owner_user_id,
        )
    )
    return result.scalar_one_or_none()

async def get_bank_accounts_with_balance(
    db: AsyncSession,
    *,
    owner_user_id: uuid.UUID
) -> List[BankAccountModel]:
    """
    Accounts of one user, newest first, each with ``balance`` set to the sum of
    its transactions (0 for an account without any). One grouped query.
    """
    balance = func.coalesce(func.sum(TransactionModel.amount), 0).label("balance")
    result = await db.execute(
        select(BankAccountModel, balance)
        .outerjoin(TransactionModel, TransactionModel.bank_account_id == BankAccountModel.id)
        .filter(BankAccountModel.owner_user_id == owner_user_id)
        .group_by(BankAccountModel.id)
        .order_by(desc(BankAccountModel.created_at), BankAccountModel.id)
    )
    accounts = []
    for account, account_balance in result.all():
        account.balance = Decimal(account_balance)
        accounts.append(account)
    return accounts

async def get_balance(db: AsyncSession, *, bank_account_id: uuid.UUID) -> Decimal:
    result = await db.execute(
        select(func.coalesce(func.sum(TransactionModel.amount), 0))
        .filter(TransactionModel.bank_account_id == bank_account_id)
    )
    return Decimal(result.scalar_one())

# --- Create Operation ---

async def create_bank_account(
    db: AsyncSession,
    *,
    obj_in: BankAccountCreate,
    owner_user_id: uuid.UUID
) -> BankAccountModel:
    db_obj = BankAccountModel(
        name=obj_in.name,
        icon=obj_in.icon,
        color=obj_in.color,
        owner_user_id=owner_user_id,
    )
    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    db_obj.balance = Decimal("0")
    return db_obj

# --- Update Operation ---

async def update_bank_account(
    db: AsyncSession,
    *,
    db_obj: BankAccountModel,
    obj_in: Union[BankAccountUpdate, Dict[str, Any]]
) -> BankAccountModel:
    if isinstance(obj_in, dict):
        update_data = obj_in
    else:
        update_data = obj_in.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        if hasattr(db_obj, field):
            setattr(db_obj, field, value)

    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    return db_obj

# --- Delete Operation ---

async def remove_bank_account(db: AsyncSession, *, db_obj: BankAccountModel) -> BankAccountModel:
    # Its transactions go with it (CASCADE), recurring series lose the link (SET NULL)
    await db.delete(db_obj)
    await db.flush()
    return db_obj
