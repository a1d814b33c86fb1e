from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from crud import posted_records
from crud.posted_records import PostedRecordKind
from models import incomes as models
from schemas import incomes as schemas

INCOMES = PostedRecordKind(
    record_model=models.Income,
    category_model=models.IncomeCategory,
    ref_type="INCOME",
    label="Income",
    table_name="incomes",
    side="debit",
)
REF_TYPE = INCOMES.ref_type


def get_categories(db: Session, tenant_id: str) -> List[models.IncomeCategory]:
    return posted_records.get_categories(db, INCOMES, tenant_id)

def get_category(db: Session, category_id: int, tenant_id: str) -> models.IncomeCategory:
    return posted_records.get_category(db, INCOMES, category_id, tenant_id)

def create_category(db: Session, category: schemas.IncomeCategoryCreate, tenant_id: str, user_id: Optional[str] = None):
    return posted_records.create_category(db, INCOMES, category, tenant_id, user_id)

def update_category(db: Session, category_id: int, category: schemas.IncomeCategoryUpdate, tenant_id: str, user_id: Optional[str] = None):
    return posted_records.update_category(db, INCOMES, category_id, category, tenant_id, user_id)

def delete_category(db: Session, category_id: int, tenant_id: str):
    posted_records.delete_category(db, INCOMES, category_id, tenant_id)


def get_income(db: Session, income_id: int, tenant_id: str) -> models.Income:
    return posted_records.get_record(db, INCOMES, income_id, tenant_id)

def get_incomes(
    db: Session,
    tenant_id: str,
    category_id: Optional[int] = None,
    account_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 10
) -> List[models.Income]:
    return posted_records.get_records(db, INCOMES, tenant_id, category_id, account_id, start_date, end_date, skip, limit)

def create_income(db: Session, income: schemas.IncomeCreate, tenant_id: str, user_id: Optional[str] = None) -> models.Income:
    return posted_records.create_record(db, INCOMES, income, tenant_id, user_id)

def update_income(db: Session, income_id: int, income: schemas.IncomeUpdate, tenant_id: str, user_id: Optional[str] = None) -> models.Income:
    return posted_records.update_record(db, INCOMES, income_id, income, tenant_id, user_id)

def delete_income(db: Session, income_id: int, tenant_id: str, user_id: Optional[str] = None) -> None:
    posted_records.delete_record(db, INCOMES, income_id, tenant_id, user_id)


def get_summary(db: Session, tenant_id: str, start_date: date, end_date: date) -> schemas.IncomeSummary:
    total, count = posted_records.summarize(db, INCOMES, tenant_id, start_date, end_date)
    return schemas.IncomeSummary(total=total, count=count)

def get_totals_by_category(db: Session, tenant_id: str, start_date: date, end_date: date) -> List[schemas.IncomeCategoryTotal]:
    return [
        schemas.IncomeCategoryTotal(
            category=schemas.IncomeCategory.model_validate(category),
            total=total,
            count=count
        )
        for category, total, count in posted_records.totals_by_category(db, INCOMES, tenant_id, start_date, end_date)
    ]
