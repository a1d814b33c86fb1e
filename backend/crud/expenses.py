from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from crud import posted_records
from crud.posted_records import PostedRecordKind
from models import expenses as models
from schemas import expenses as schemas

# Expenses credit the chosen account; only approved ones count towards summaries.
EXPENSES = PostedRecordKind(
    record_model=models.Expense,
    category_model=models.ExpenseCategory,
    ref_type="EXPENSE",
    label="Expense",
    table_name="expenses",
    side="credit",
    counted=(models.Expense.status == models.ExpenseStatus.APPROVED,),
)
REF_TYPE = EXPENSES.ref_type


# --- Categories ---

def get_categories(db: Session, tenant_id: str) -> List[models.ExpenseCategory]:
    return posted_records.get_categories(db, EXPENSES, tenant_id)

def get_category(db: Session, category_id: int, tenant_id: str) -> models.ExpenseCategory:
    return posted_records.get_category(db, EXPENSES, category_id, tenant_id)

def create_category(db: Session, category: schemas.ExpenseCategoryCreate, tenant_id: str, user_id: Optional[str] = None):
    return posted_records.create_category(db, EXPENSES, category, tenant_id, user_id)

def update_category(db: Session, category_id: int, category: schemas.ExpenseCategoryUpdate, tenant_id: str, user_id: Optional[str] = None):
    return posted_records.update_category(db, EXPENSES, category_id, category, tenant_id, user_id)

def delete_category(db: Session, category_id: int, tenant_id: str):
    posted_records.delete_category(db, EXPENSES, category_id, tenant_id)


# --- Expenses ---

def get_expense(db: Session, expense_id: int, tenant_id: str) -> models.Expense:
    return posted_records.get_record(db, EXPENSES, expense_id, tenant_id)

def get_expenses(
    db: Session,
    tenant_id: str,
    category_id: Optional[int] = None,
    account_id: Optional[int] = None,
    status: Optional[models.ExpenseStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 10
) -> List[models.Expense]:
    criteria = (models.Expense.status == status,) if status else ()
    return posted_records.get_records(
        db, EXPENSES, tenant_id, category_id, account_id, start_date, end_date, skip, limit, criteria
    )

def create_expense(db: Session, expense: schemas.ExpenseCreate, tenant_id: str, user_id: Optional[str] = None) -> models.Expense:
    return posted_records.create_record(db, EXPENSES, expense, tenant_id, user_id)

def update_expense(db: Session, expense_id: int, expense: schemas.ExpenseUpdate, tenant_id: str, user_id: Optional[str] = None) -> models.Expense:
    return posted_records.update_record(db, EXPENSES, expense_id, expense, tenant_id, user_id)

def delete_expense(db: Session, expense_id: int, tenant_id: str, user_id: Optional[str] = None) -> None:
    posted_records.delete_record(db, EXPENSES, expense_id, tenant_id, user_id)


# --- Aggregates ---

def get_summary(db: Session, tenant_id: str, start_date: date, end_date: date) -> schemas.ExpenseSummary:
    total, count = posted_records.summarize(db, EXPENSES, tenant_id, start_date, end_date)
    return schemas.ExpenseSummary(total=total, count=count)

def get_totals_by_category(db: Session, tenant_id: str, start_date: date, end_date: date) -> List[schemas.ExpenseCategoryTotal]:
    return [
        schemas.ExpenseCategoryTotal(
            category=schemas.ExpenseCategory.model_validate(category),
            total=total,
            count=count
        )
        for category, total, count in posted_records.totals_by_category(db, EXPENSES, tenant_id, start_date, end_date)
    ]
