# finance_app/db/models/recurring_transaction.py
import enum
import uuid
from sqlalchemy import (
    Column, String, Text, Numeric, Integer, Boolean, Date, DateTime, ForeignKey, func,
    CheckConstraint, Enum as SQLAlchemyEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from finance_app.db.base_class import Base

class RecurrenceFrequency(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"

class RecurringTransaction(Base):
    __tablename__ = "recurring_transactions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    description = Column(String(256), nullable=False)
    notes = Column(Text, nullable=True)
    # Signed like Transaction.amount
    amount = Column(Numeric(12, 2), nullable=False)
    frequency = Column(
        SQLAlchemyEnum(RecurrenceFrequency, name="recurrence_frequency_enum", create_constraint=True),
        nullable=False,
    )
    interval = Column("repeat_interval", Integer, nullable=False, default=1, server_default="1")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    next_occurrence_date = Column(Date, nullable=False, index=True)
    is_subscription = Column(Boolean, nullable=False, default=False, server_default="false")

    bank_account_id = Column(UUID(as_uuid=True), ForeignKey("bank_accounts.id", ondelete="SET NULL"), nullable=True, index=True)
    category_id = Column(UUID(as_uuid=True), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    owner_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner_user = relationship("User", back_populates="recurring_transactions")
    bank_account = relationship("BankAccount", back_populates="recurring_transactions")
    category = relationship("Category", back_populates="recurring_transactions")

    __table_args__ = (
        CheckConstraint("repeat_interval >= 1", name="ck_recurring_interval_positive"),
        CheckConstraint("end_date IS NULL OR end_date >= start_date", name="ck_recurring_end_after_start"),
    )
