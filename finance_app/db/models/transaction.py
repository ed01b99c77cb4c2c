# finance_app/db/models/transaction.py
import uuid
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, func, Index
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from finance_app.db.base_class import Base

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Signed: negative is an expense, positive is income
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String(256), nullable=False)
    transaction_date = Column(DateTime(timezone=True), nullable=False, default=func.now())

    category_id = Column(UUID(as_uuid=True), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    bank_account_id = Column(UUID(as_uuid=True), ForeignKey("bank_accounts.id", ondelete="CASCADE"), nullable=True, index=True)
    owner_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at_db = Column("created_at", DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner_user = relationship("User", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")
    bank_account = relationship("BankAccount", back_populates="transactions")

    __table_args__ = (
        # Serves the owner + date range scans of the budget spending read
        Index("ix_transactions_owner_date", "owner_user_id", "transaction_date"),
    )
