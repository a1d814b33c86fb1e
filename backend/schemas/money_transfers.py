from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from typing import List, Optional

class TransferAccount(BaseModel):
    id: int
    account_code: str
    account_name: str

    class Config:
        from_attributes = True

class MoneyTransferCreate(BaseModel):
    from_account_id: int
    to_account_id: int
    date: date
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    reference: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None

class MoneyTransfer(MoneyTransferCreate):
    id: int
    tenant_id: str
    from_account: TransferAccount
    to_account: TransferAccount
    created_by: Optional[str] = None

    class Config:
        from_attributes = True

class MoneyTransferPage(BaseModel):
    items: List[MoneyTransfer]
    total: int
    skip: int
    limit: int
