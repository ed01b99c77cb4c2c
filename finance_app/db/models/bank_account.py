# finance_app/db/models/bank_account.py
import uuid
from sqlalchemy import Column, String, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from finance_app.db.base_class import Base

class BankAccount(Base):
    __tablename__ = "bank_accounts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(256), nullable=False)
    icon = Column(String(50), nullable=True)
    color = Column(String(7), nullable=True) # #RRGGBB

    owner_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner_user = relationship("User", back_populates="bank_accounts")
    # Deleting an account deletes its transactions (CASCADE on the FK side)
    transactions = relationship("Transaction", back_populates="bank_account", passive_deletes=True)
    recurring_transactions = relationship("RecurringTransaction", back_populates="bank_account", passive_deletes=True)
