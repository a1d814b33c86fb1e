from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

class PostingEffect(BaseModel):
    """Monetary effect on one account. Debit raises the cached balance, credit lowers it."""
    debit: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    credit: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)

    @model_validator(mode='after')
    def check_one_side(self):
        if self.debit > 0 and self.credit > 0:
            raise ValueError('A posting carries either a debit or a credit, not both.')
        if self.debit == 0 and self.credit == 0:
            raise ValueError('A posting must have a non-zero debit or credit amount.')
        return self

    @property
    def net(self) -> Decimal:
        return self.debit - self.credit

class JournalEntry(BaseModel):
    id: int
    tenant_id: str
    account_id: int
    date: date
    debit: Decimal
    credit: Decimal
    description: Optional[str] = None
    ref_type: str
    ref_id: str
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
