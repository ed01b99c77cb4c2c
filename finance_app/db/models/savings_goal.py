# finance_app/db/models/savings_goal.py
import uuid
from sqlalchemy import Column, String, Numeric, Date, DateTime, ForeignKey, func, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from finance_app.db.base_class import Base

class SavingsGoal(Base):
    __tablename__ = "savings_goals"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(256), nullable=False)
    target_amount = Column(Numeric(12, 2), nullable=False)
    current_amount = Column(Numeric(12, 2), nullable=False, default=0, server_default="0.00")
    target_date = Column(Date, nullable=True)
    icon = Column(String(50), nullable=True, default="🎯")
    color = Column(String(7), nullable=True, default="#A855F7")

    owner_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner_user = relationship("User", back_populates="savings_goals")

    __table_args__ = (
        CheckConstraint("target_amount > 0", name="ck_savings_goal_target_positive"),
        CheckConstraint("current_amount >= 0", name="ck_savings_goal_current_not_negative"),
    )
