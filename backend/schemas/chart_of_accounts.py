from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from models.chart_of_accounts import AccountType

class ChartOfAccountsBase(BaseModel):
    account_code: str = Field(..., min_length=1, max_length=20)
    account_name: str = Field(..., min_length=1, max_length=100)
    account_type: AccountType
    sub_type: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True

    @field_validator('account_code')
    @classmethod
    def validate_account_code(cls, v):
        v = v.strip()
        if not v.isalnum():
            raise ValueError("account_code must be alphanumeric")
        return v

class ChartOfAccountsCreate(ChartOfAccountsBase):
    parent_id: Optional[int] = None

class ChartOfAccountsUpdate(BaseModel):
    # code, type and balance are deliberately absent
    account_name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None

class ChartOfAccounts(ChartOfAccountsBase):
    id: int
    tenant_id: str
    parent_id: Optional[int] = None
    balance: Decimal
    is_system: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ChartOfAccountsPage(BaseModel):
    items: List[ChartOfAccounts]
    total: int
    skip: int
    limit: int

class AccountNode(BaseModel):
    id: int
    parent_id: Optional[int] = None
    account_code: str
    account_name: str
    account_type: AccountType
    sub_type: Optional[str] = None
    balance: Decimal
    is_system: bool
    is_active: bool
    children: List[AccountNode] = []

class SeedResult(BaseModel):
    created: int
    existing: int
