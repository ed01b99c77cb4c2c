# finance_app/db/models/user.py
from sqlalchemy import Column, String, DateTime, func
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from finance_app.db.base_class import Base

class User(Base):
    __tablename__ = "users"

    # Same id as in the auth service, we never generate it ourselves
    id = Column(UUID(as_uuid=True), primary_key=True)
    email = Column(String, nullable=True, unique=True, index=True)
    name = Column(String, nullable=True)

    categories = relationship("Category", back_populates="owner_user", cascade="all, delete-orphan")
    budgets = relationship("Budget", back_populates="owner_user", cascade="all, delete-orphan")
    transactions = relationship("Transaction", back_populates="owner_user", cascade="all, delete-orphan")
    bank_accounts = relationship("BankAccount", back_populates="owner_user", cascade="all, delete-orphan")
    recurring_transactions = relationship("RecurringTransaction", back_populates="owner_user", cascade="all, delete-orphan")
    savings_goals = relationship("SavingsGoal", back_populates="owner_user", cascade="all, delete-orphan")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
