from pydantic import BaseModel
from datetime import date
from decimal import Decimal
from typing import List, Optional
from schemas.chart_of_accounts import ChartOfAccounts

# Account statement
class StatementEntry(BaseModel):
    id: int
    date: date
    description: Optional[str] = None
    ref_type: str
    ref_id: str
    debit: Decimal
    credit: Decimal
    running_balance: Decimal

class AccountStatement(BaseModel):
    account: ChartOfAccounts
    start_date: date
    end_date: date
    method: str
    opening_balance: Decimal
    closing_balance: Decimal
    total_debit: Decimal
    total_credit: Decimal
    entries: List[StatementEntry]
