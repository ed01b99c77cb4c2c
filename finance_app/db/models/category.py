# finance_app/db/models/category.py
import uuid
from sqlalchemy import Column, String, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from finance_app.db.base_class import Base

class Category(Base):
    __tablename__ = "categories"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(256), nullable=False)
    icon = Column(String(50), nullable=False, default="💡", server_default="💡")
    color = Column(String(7), nullable=False, default="#ffffff", server_default="#ffffff") # #RRGGBB

    owner_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner_user = relationship("User", back_populates="categories")
    # Transactions become uncategorized (SET NULL); budgets block the delete (RESTRICT)
    budgets = relationship("Budget", back_populates="category", passive_deletes="all")
    transactions = relationship("Transaction", back_populates="category", passive_deletes=True)
    recurring_transactions = relationship("RecurringTransaction", back_populates="category", passive_deletes=True)
