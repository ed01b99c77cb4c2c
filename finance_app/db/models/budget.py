# finance_app/db/models/budget.py
import enum
import uuid
from sqlalchemy import Column, String, Numeric, Date, DateTime, ForeignKey, func, CheckConstraint, Enum as SQLAlchemyEnum
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from finance_app.db.base_class import Base

class BudgetPeriod(str, enum.Enum):
    monthly = "monthly"
    weekly = "weekly"
    yearly = "yearly"
    custom = "custom"

class Budget(Base):
    __tablename__ = "budgets"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(256), index=True, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    period = Column(
        SQLAlchemyEnum(BudgetPeriod, name="budget_period_enum", create_constraint=True),
        nullable=False,
        default=BudgetPeriod.monthly,
    )
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True) # NULL = ongoing

    # NULL = the budget applies to every category; a category still used by a budget cannot be deleted
    category_id = Column(UUID(as_uuid=True), ForeignKey("categories.id", ondelete="RESTRICT"), nullable=True, index=True)
    owner_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner_user = relationship("User", back_populates="budgets")
    category = relationship("Category", back_populates="budgets")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_budget_amount_positive"),
        CheckConstraint("end_date IS NULL OR end_date >= start_date", name="ck_budget_end_after_start"),
    )
