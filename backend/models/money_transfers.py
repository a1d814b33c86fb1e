from sqlalchemy import Column, Integer, String, Text, Date, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class MoneyTransfer(Base, TimestampMixin):
    __tablename__ = 'money_transfers'

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    from_account_id = Column(Integer, ForeignKey("chart_of_accounts.id"), nullable=False)
    to_account_id = Column(Integer, ForeignKey("chart_of_accounts.id"), nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    reference = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)

    from_account = relationship("ChartOfAccounts", foreign_keys=[from_account_id])
    to_account = relationship("ChartOfAccounts", foreign_keys=[to_account_id])

    __table_args__ = (
        CheckConstraint('amount > 0', name='check_transfer_amount_positive'),
        CheckConstraint('from_account_id <> to_account_id', name='check_transfer_distinct_accounts'),
    )
