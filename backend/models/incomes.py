from sqlalchemy import Column, Integer, String, Text, Boolean, Date, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class IncomeCategory(Base, TimestampMixin):
    __tablename__ = "income_categories"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint('tenant_id', 'name', name='_tenant_income_category_uc'),
    )

class Income(Base, TimestampMixin):
    __tablename__ = 'incomes'

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    category_id = Column(Integer, ForeignKey("income_categories.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("chart_of_accounts.id"), nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    reference = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    attachment = Column(String(500), nullable=True)

    category = relationship("IncomeCategory")
