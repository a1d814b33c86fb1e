from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric, ForeignKey, Enum, UniqueConstraint
from database import Base
import enum
from models.audit_mixin import TimestampMixin

class AccountType(enum.Enum):
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

class ChartOfAccounts(Base, TimestampMixin):
    __tablename__ = "chart_of_accounts"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    parent_id = Column(Integer, ForeignKey("chart_of_accounts.id"), nullable=True, index=True)
    account_code = Column(String(20), nullable=False, index=True)
    account_name = Column(String(100), nullable=False)
    account_type = Column(Enum(AccountType), nullable=False)
    sub_type = Column(String(50), nullable=True)  # CASH, BANK, RECEIVABLE, ...
    description = Column(Text, nullable=True)
    # Cached aggregate of journal entries; only crud.chart_of_accounts.adjust_balance writes it
    balance = Column(Numeric(14, 2), nullable=False, default=0, server_default="0")
    is_system = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint('tenant_id', 'account_code', name='_tenant_account_code_uc'),
    )
