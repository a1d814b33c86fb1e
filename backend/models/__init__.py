from models.chart_of_accounts import ChartOfAccounts, AccountType
from models.journal_entry import JournalEntry
from models.expenses import Expense, ExpenseCategory, ExpenseStatus
from models.incomes import Income, IncomeCategory
from models.money_transfers import MoneyTransfer
from models.audit_log import AuditLog

__all__ = ['AccountType', 'AuditLog', 'ChartOfAccounts', 'Expense', 'ExpenseCategory', 'ExpenseStatus', 'Income', 'IncomeCategory', 'JournalEntry', 'MoneyTransfer',]
