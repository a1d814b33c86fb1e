from pydantic import BaseModel, Field
from datetime import date
import datetime
from decimal import Decimal
from typing import Optional

class IncomeCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None

class IncomeCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None

class IncomeCategory(IncomeCategoryCreate):
    id: int
    tenant_id: str
    is_active: bool

    class Config:
        from_attributes = True

class IncomeBase(BaseModel):
    category_id: int
    account_id: int
    date: date
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    reference: Optional[str] = None
    description: Optional[str] = None
    attachment: Optional[str] = None

class IncomeCreate(IncomeBase):
    pass

class IncomeUpdate(BaseModel):
    category_id: Optional[int] = None
    account_id: Optional[int] = None
    date: Optional[datetime.date] = None
    amount: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    reference: Optional[str] = None
    description: Optional[str] = None
    attachment: Optional[str] = None

class Income(IncomeBase):
    id: int
    tenant_id: str
    created_by: Optional[str] = None
    updated_by: Optional[str] = None

    class Config:
        from_attributes = True

class IncomeSummary(BaseModel):
    total: Decimal
    count: int

class IncomeCategoryTotal(BaseModel):
    category: IncomeCategory
    total: Decimal
    count: int
