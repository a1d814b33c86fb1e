"""
Shared CRUD for categorized records that post to the ledger (expenses, incomes).

A `PostedRecordKind` names the record and category models, the journal
`ref_type`, which side of the account the amount lands on, and which records
count towards summaries. Every write to a record and its journal entries goes
through one `run_atomic` unit of work.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, NamedTuple, Optional, Tuple

from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session

from crud import ledger
from crud.audit_log import create_audit_log
from crud.chart_of_accounts import resolve_reference
from exceptions import NotFound, DuplicateName, CategoryInUse, InvalidDateRange
from models.chart_of_accounts import ChartOfAccounts
from schemas.audit_log import AuditLogCreate
from schemas.journal_entry import PostingEffect
from utils import sqlalchemy_to_dict
from utils.transactions import run_atomic

logger = logging.getLogger(__name__)

# Fields whose change replaces the record's journal entry
LEDGER_FIELDS = ('amount', 'date', 'account_id')


class PostedRecordKind(NamedTuple):
    record_model: type
    category_model: type
    ref_type: str
    label: str
    table_name: str
    side: str  # "debit" or "credit"
    counted: tuple = ()  # extra criteria for summaries

    def effect(self, amount: Decimal) -> PostingEffect:
        if self.side == "debit":
            return PostingEffect(debit=amount)
        return PostingEffect(credit=amount)

    def posting_description(self, record, category) -> str:
        return record.description or f"{self.label}: {category.name}"


# --- Categories ---

def get_categories(db: Session, kind: PostedRecordKind, tenant_id: str) -> list:
    model = kind.category_model
    return db.query(model).filter(model.tenant_id == tenant_id).order_by(model.name).all()

def get_category(db: Session, kind: PostedRecordKind, category_id: int, tenant_id: str):
    model = kind.category_model
    category = db.query(model).filter(model.id == category_id, model.tenant_id == tenant_id).first()
    if not category:
        raise NotFound(f"{kind.label} category with id {category_id} not found")
    return category

def _check_category_name(db: Session, kind: PostedRecordKind, name: str, tenant_id: str, exclude_id: Optional[int] = None):
    model = kind.category_model
    query = db.query(model).filter(model.tenant_id == tenant_id, model.name == name)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    if query.first():
        raise DuplicateName("Category with this name already exists")

def create_category(db: Session, kind: PostedRecordKind, category: BaseModel, tenant_id: str, user_id: Optional[str] = None):
    _check_category_name(db, kind, category.name, tenant_id)
    db_category = kind.category_model(**category.model_dump(), tenant_id=tenant_id, created_by=user_id)
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return db_category

def update_category(db: Session, kind: PostedRecordKind, category_id: int, category: BaseModel, tenant_id: str, user_id: Optional[str] = None):
    """Existing journal entries keep the description they were posted with."""
    db_category = get_category(db, kind, category_id, tenant_id)
    update_data = category.model_dump(exclude_unset=True, exclude_none=True)
    if 'name' in update_data:
        _check_category_name(db, kind, update_data['name'], tenant_id, exclude_id=category_id)
    for key, value in update_data.items():
        setattr(db_category, key, value)
    db_category.updated_by = user_id
    db.commit()
    db.refresh(db_category)
    return db_category

def delete_category(db: Session, kind: PostedRecordKind, category_id: int, tenant_id: str):
    db_category = get_category(db, kind, category_id, tenant_id)
    record = kind.record_model
    in_use = db.query(record.id).filter(record.category_id == category_id, record.tenant_id == tenant_id).first()
    if in_use:
        raise CategoryInUse(f"Cannot delete category with {kind.table_name}")
    db.delete(db_category)
    db.commit()


# --- Records ---

def get_record(db: Session, kind: PostedRecordKind, record_id: int, tenant_id: str, for_update: bool = False):
    model = kind.record_model
    query = db.query(model).filter(model.id == record_id, model.tenant_id == tenant_id)
    if for_update:
        query = query.with_for_update()
    record = query.first()
    if not record:
        raise NotFound(f"{kind.label} with id {record_id} not found")
    return record

def get_records(
    db: Session,
    kind: PostedRecordKind,
    tenant_id: str,
    category_id: Optional[int] = None,
    account_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 10,
    criteria: tuple = ()
) -> list:
    model = kind.record_model
    query = db.query(model).filter(model.tenant_id == tenant_id, *criteria)
    if category_id is not None:
        query = query.filter(model.category_id == category_id)
    if account_id is not None:
        query = query.filter(model.account_id == account_id)
    if start_date and end_date:
        query = query.filter(model.date >= start_date, model.date <= end_date)
    return query.order_by(model.date.desc(), model.id.desc()).offset(skip).limit(limit).all()

def _post(db: Session, kind: PostedRecordKind, record, category, user_id: Optional[str]):
    ledger.apply_posting(
        db, record.tenant_id, record.account_id,
        kind.effect(record.amount),
        record.date,
        kind.posting_description(record, category),
        kind.ref_type, record.id, user_id
    )

def create_record(db: Session, kind: PostedRecordKind, data: BaseModel, tenant_id: str, user_id: Optional[str] = None):
    def work():
        category = resolve_reference(db, kind.category_model, data.category_id, tenant_id, f"{kind.label} category")
        resolve_reference(db, ChartOfAccounts, data.account_id, tenant_id, "Account")

        record = kind.record_model(**data.model_dump(), tenant_id=tenant_id, created_by=user_id)
        db.add(record)
        db.flush()
        _post(db, kind, record, category, user_id)
        return record

    record = run_atomic(db, work)
    db.refresh(record)
    logger.info(f"Created {kind.table_name} record {record.id} ({record.amount}) for tenant {tenant_id}")
    return record

def update_record(db: Session, kind: PostedRecordKind, record_id: int, data: BaseModel, tenant_id: str, user_id: Optional[str] = None):
    def work():
        record = get_record(db, kind, record_id, tenant_id, for_update=True)
        old_values = sqlalchemy_to_dict(record)
        old_description = kind.posting_description(record, record.category)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        category = record.category
        if 'category_id' in update_data:
            category = resolve_reference(db, kind.category_model, update_data['category_id'], tenant_id, f"{kind.label} category")
        if 'account_id' in update_data:
            resolve_reference(db, ChartOfAccounts, update_data['account_id'], tenant_id, "Account")

        ledger_changed = any(
            key in update_data and update_data[key] != getattr(record, key)
            for key in LEDGER_FIELDS
        )
        for key, value in update_data.items():
            setattr(record, key, value)
        record.updated_by = user_id
        db.flush()

        if ledger_changed or kind.posting_description(record, category) != old_description:
            ledger.apply_reversal(db, tenant_id, kind.ref_type, record.id)
            _post(db, kind, record, category, user_id)

        create_audit_log(db, AuditLogCreate(
            tenant_id=tenant_id,
            table_name=kind.table_name,
            record_id=record_id,
            changed_by=user_id,
            action='UPDATE',
            old_values=old_values,
            new_values=sqlalchemy_to_dict(record)
        ))
        return record

    record = run_atomic(db, work)
    db.refresh(record)
    return record

def delete_record(db: Session, kind: PostedRecordKind, record_id: int, tenant_id: str, user_id: Optional[str] = None) -> None:
    def work():
        record = get_record(db, kind, record_id, tenant_id, for_update=True)
        create_audit_log(db, AuditLogCreate(
            tenant_id=tenant_id,
            table_name=kind.table_name,
            record_id=record_id,
            changed_by=user_id,
            action='DELETE',
            old_values=sqlalchemy_to_dict(record),
            new_values={}
        ))
        ledger.apply_reversal(db, tenant_id, kind.ref_type, record_id)
        db.delete(record)
        db.flush()

    run_atomic(db, work)
    logger.info(f"Deleted {kind.table_name} record {record_id} for tenant {tenant_id}")


# --- Aggregates ---

def _counted_in_range(query, kind: PostedRecordKind, tenant_id: str, start_date: date, end_date: date):
    if start_date > end_date:
        raise InvalidDateRange("start_date must not be after end_date")
    model = kind.record_model
    return query.filter(
        model.tenant_id == tenant_id,
        model.date >= start_date,
        model.date <= end_date,
        *kind.counted
    )

def summarize(db: Session, kind: PostedRecordKind, tenant_id: str, start_date: date, end_date: date) -> Tuple[Decimal, int]:
    model = kind.record_model
    total, count = _counted_in_range(
        db.query(func.sum(model.amount), func.count(model.id)),
        kind, tenant_id, start_date, end_date
    ).one()
    return total or Decimal("0"), count or 0

def totals_by_category(db: Session, kind: PostedRecordKind, tenant_id: str, start_date: date, end_date: date) -> List[tuple]:
    """(category, total, count) for every category with counted records in the range."""
    model = kind.record_model
    rows = _counted_in_range(
        db.query(model.category_id, func.sum(model.amount), func.count(model.id)),
        kind, tenant_id, start_date, end_date
    ).group_by(model.category_id).all()

    categories = {category.id: category for category in get_categories(db, kind, tenant_id)}
    return [
        (categories[category_id], total or Decimal("0"), count)
        for category_id, total, count in rows
        if category_id in categories
    ]
