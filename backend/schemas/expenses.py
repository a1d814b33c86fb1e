from pydantic import BaseModel, Field
from datetime import date
import datetime
from decimal import Decimal
from typing import List, Optional
from models.expenses import ExpenseStatus

class ExpenseCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None

class ExpenseCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None

class ExpenseCategory(ExpenseCategoryCreate):
    id: int
    tenant_id: str
    is_active: bool

    class Config:
        from_attributes = True

class ExpenseBase(BaseModel):
    category_id: int
    account_id: int
    date: date
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    reference: Optional[str] = None
    description: Optional[str] = None
    attachment: Optional[str] = None

class ExpenseCreate(ExpenseBase):
    status: ExpenseStatus = ExpenseStatus.APPROVED

class ExpenseUpdate(BaseModel):
    category_id: Optional[int] = None
    account_id: Optional[int] = None
    date: Optional[datetime.date] = None
    amount: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    reference: Optional[str] = None
    description: Optional[str] = None
    attachment: Optional[str] = None
    status: Optional[ExpenseStatus] = None

class Expense(ExpenseBase):
    id: int
    tenant_id: str
    status: ExpenseStatus
    created_by: Optional[str] = None
    updated_by: Optional[str] = None

    class Config:
        from_attributes = True

class ExpenseSummary(BaseModel):
    total: Decimal
    count: int

class ExpenseCategoryTotal(BaseModel):
    category: ExpenseCategory
    total: Decimal
    count: int
