from decimal import Decimal
from datetime import date
from sqlalchemy.orm import Session

from crud import chart_of_accounts as chart_crud
from exceptions import InvalidDateRange, InvalidStatementMethod
from models.journal_entry import JournalEntry
from schemas.chart_of_accounts import ChartOfAccounts as ChartOfAccountsSchema
from schemas.ledgers import AccountStatement, StatementEntry

STATEMENT_METHODS = ("cached", "historical")

def get_account_statement(
    db: Session,
    account_id: int,
    start_date: date,
    end_date: date,
    tenant_id: str,
    method: str = "cached"
) -> AccountStatement:
    """
    Range-bounded reconstruction of an account's activity.

    "cached" works backward from the account's current balance: the net of the
    entries inside the window is subtracted to get the opening balance. Entries
    dated after `end_date` are not excluded, so this is only exact when
    `end_date` is on or after the latest posting.

    "historical" sums every entry dated before `start_date` instead, which
    stays correct for any window at the cost of scanning the account's history.
    """
    if start_date > end_date:
        raise InvalidDateRange("start_date must not be after end_date")
    if method not in STATEMENT_METHODS:
        raise InvalidStatementMethod(f"method must be one of {STATEMENT_METHODS}")

    account = chart_crud.get_account(db, account_id, tenant_id)

    entries = db.query(JournalEntry).filter(
        JournalEntry.tenant_id == tenant_id,
        JournalEntry.account_id == account_id,
        JournalEntry.date >= start_date,
        JournalEntry.date <= end_date
    ).order_by(JournalEntry.date.asc(), JournalEntry.id.asc()).all()

    if method == "cached":
        opening_balance = Decimal(account.balance or 0)
        for entry in entries:
            opening_balance -= entry.debit - entry.credit
    else:
        prior_entries = db.query(JournalEntry).filter(
            JournalEntry.tenant_id == tenant_id,
            JournalEntry.account_id == account_id,
            JournalEntry.date < start_date
        ).all()
        opening_balance = sum((entry.debit - entry.credit for entry in prior_entries), Decimal("0"))

    running_balance = opening_balance
    total_debit = Decimal("0")
    total_credit = Decimal("0")
    statement_entries = []
    for entry in entries:
        running_balance += entry.debit - entry.credit
        total_debit += entry.debit
        total_credit += entry.credit
        statement_entries.append(StatementEntry(
            id=entry.id,
            date=entry.date,
            description=entry.description,
            ref_type=entry.ref_type,
            ref_id=entry.ref_id,
            debit=entry.debit,
            credit=entry.credit,
            running_balance=running_balance
        ))

    return AccountStatement(
        account=ChartOfAccountsSchema.model_validate(account),
        start_date=start_date,
        end_date=end_date,
        method=method,
        opening_balance=opening_balance,
        closing_balance=running_balance,
        total_debit=total_debit,
        total_credit=total_credit,
        entries=statement_entries
    )
