from sqlalchemy import Column, Integer, String, Text, Boolean, Date, Numeric, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin

class ExpenseStatus(enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

class ExpenseCategory(Base, TimestampMixin):
    __tablename__ = "expense_categories"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint('tenant_id', 'name', name='_tenant_expense_category_uc'),
    )

class Expense(Base, TimestampMixin):
    __tablename__ = 'expenses'

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    category_id = Column(Integer, ForeignKey("expense_categories.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("chart_of_accounts.id"), nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    reference = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    attachment = Column(String(500), nullable=True)
    status = Column(Enum(ExpenseStatus), nullable=False, default=ExpenseStatus.APPROVED)

    category = relationship("ExpenseCategory")
