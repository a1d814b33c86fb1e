import logging
import os
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import or_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crud.audit_log import create_audit_log
from exceptions import (
    NotFound, DuplicateCode, SystemAccountProtected, HasChildren, HasTransactions,
    CrossTenantReference, InvalidHierarchy,
)
from models.chart_of_accounts import ChartOfAccounts, AccountType
from models.journal_entry import JournalEntry
from schemas.audit_log import AuditLogCreate
from schemas.chart_of_accounts import ChartOfAccountsCreate, ChartOfAccountsUpdate
from utils import sqlalchemy_to_dict
from utils.account_tree import AccountForest

logger = logging.getLogger(__name__)

MAX_ACCOUNT_DEPTH = int(os.getenv("LEDGER_MAX_ACCOUNT_DEPTH", "5"))


def resolve_reference(db: Session, model, record_id: int, tenant_id: str, label: str):
    """Load a foreign-referenced row by (tenant_id, id).

    A row that exists under another tenant is a CrossTenantReference, never a
    silent match.
    """
    record = db.query(model).filter(model.id == record_id).first()
    if record is None:
        raise NotFound(f"{label} with id {record_id} not found")
    if record.tenant_id != tenant_id:
        logger.warning(f"Tenant {tenant_id} referenced {label} {record_id} owned by another tenant")
        raise CrossTenantReference(f"{label} with id {record_id} belongs to a different tenant")
    return record


def get_account(db: Session, account_id: int, tenant_id: str) -> ChartOfAccounts:
    account = db.query(ChartOfAccounts).filter(
        ChartOfAccounts.id == account_id,
        ChartOfAccounts.tenant_id == tenant_id
    ).first()
    if not account:
        raise NotFound(f"Account with id {account_id} not found")
    return account


def get_account_by_code(db: Session, account_code: str, tenant_id: str) -> Optional[ChartOfAccounts]:
    return db.query(ChartOfAccounts).filter(
        ChartOfAccounts.account_code == account_code,
        ChartOfAccounts.tenant_id == tenant_id
    ).first()


def get_accounts(
    db: Session,
    tenant_id: str,
    account_type: Optional[AccountType] = None,
    sub_type: Optional[str] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 50
) -> Tuple[List[ChartOfAccounts], int]:
    query = db.query(ChartOfAccounts).filter(ChartOfAccounts.tenant_id == tenant_id)

    if account_type:
        query = query.filter(ChartOfAccounts.account_type == account_type)
    if sub_type:
        query = query.filter(ChartOfAccounts.sub_type == sub_type)
    if is_active is not None:
        query = query.filter(ChartOfAccounts.is_active == is_active)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(or_(
            func.lower(ChartOfAccounts.account_code).like(pattern),
            func.lower(ChartOfAccounts.account_name).like(pattern)
        ))

    total = query.count()
    accounts = query.order_by(ChartOfAccounts.account_code).offset(skip).limit(limit).all()
    return accounts, total


def load_forest(db: Session, tenant_id: str) -> AccountForest:
    accounts = db.query(ChartOfAccounts).filter(ChartOfAccounts.tenant_id == tenant_id).all()
    return AccountForest(accounts)


def get_account_tree(db: Session, tenant_id: str) -> List[dict]:
    """Root accounts with their children nested, ordered by code at every level."""
    return load_forest(db, tenant_id).to_nested()


def build_account(
    db: Session,
    account: ChartOfAccountsCreate,
    tenant_id: str,
    user_id: Optional[str] = None,
    is_system: bool = False
) -> ChartOfAccounts:
    """Validate and stage a new account without committing."""
    if get_account_by_code(db, account.account_code, tenant_id):
        raise DuplicateCode(f"Account with code {account.account_code} already exists")

    if account.parent_id is not None:
        resolve_reference(db, ChartOfAccounts, account.parent_id, tenant_id, "Parent account")
        forest = load_forest(db, tenant_id)
        if forest.depth(account.parent_id) + 1 > MAX_ACCOUNT_DEPTH:
            raise InvalidHierarchy(f"Account hierarchy cannot be deeper than {MAX_ACCOUNT_DEPTH} levels")

    db_account = ChartOfAccounts(
        **account.model_dump(),
        tenant_id=tenant_id,
        balance=Decimal("0"),
        is_system=is_system,
        created_by=user_id
    )
    db.add(db_account)
    db.flush()
    return db_account


def create_account(db: Session, account: ChartOfAccountsCreate, tenant_id: str, user_id: Optional[str] = None) -> ChartOfAccounts:
    try:
        db_account = build_account(db, account, tenant_id, user_id)
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent insert of the same code
        db.rollback()
        raise DuplicateCode(f"Account with code {account.account_code} already exists")
    except Exception:
        db.rollback()
        raise
    db.refresh(db_account)
    logger.info(f"Created account {db_account.account_code} ({db_account.id}) for tenant {tenant_id}")
    return db_account


def update_account(db: Session, account_id: int, account_update: ChartOfAccountsUpdate, tenant_id: str, user_id: Optional[str] = None) -> ChartOfAccounts:
    account = get_account(db, account_id, tenant_id)
    if account.is_system:
        raise SystemAccountProtected("Cannot modify system account")

    old_values = sqlalchemy_to_dict(account)
    update_data = account_update.model_dump(exclude_unset=True)
    for field in ('account_name', 'is_active'):
        if field in update_data and update_data[field] is None:
            update_data.pop(field)
    for key, value in update_data.items():
        setattr(account, key, value)
    account.updated_by = user_id
    db.flush()

    create_audit_log(db, AuditLogCreate(
        tenant_id=tenant_id,
        table_name='chart_of_accounts',
        record_id=account.id,
        changed_by=user_id,
        action='UPDATE',
        old_values=old_values,
        new_values=sqlalchemy_to_dict(account)
    ))
    db.commit()
    db.refresh(account)
    return account


def delete_account(db: Session, account_id: int, tenant_id: str, user_id: Optional[str] = None) -> None:
    account = get_account(db, account_id, tenant_id)

    if account.is_system:
        raise SystemAccountProtected("Cannot delete system account")

    has_children = db.query(ChartOfAccounts.id).filter(
        ChartOfAccounts.parent_id == account.id,
        ChartOfAccounts.tenant_id == tenant_id
    ).first()
    if has_children:
        raise HasChildren("Cannot delete account with sub-accounts")

    has_entries = db.query(JournalEntry.id).filter(
        JournalEntry.account_id == account.id,
        JournalEntry.tenant_id == tenant_id
    ).first()
    if has_entries:
        raise HasTransactions("Cannot delete account with transactions")

    account_code = account.account_code
    create_audit_log(db, AuditLogCreate(
        tenant_id=tenant_id,
        table_name='chart_of_accounts',
        record_id=account.id,
        changed_by=user_id,
        action='DELETE',
        old_values=sqlalchemy_to_dict(account),
        new_values={}
    ))
    db.delete(account)
    db.commit()
    logger.info(f"Deleted account {account_code} ({account_id}) for tenant {tenant_id}")


def adjust_balance(db: Session, account_id: int, tenant_id: str, delta: Decimal) -> None:
    """Atomically add `delta` to the cached balance.

    Called only by the posting engine, inside its transaction. The increment
    happens in a single UPDATE statement, so concurrent postings to the same
    account serialize on the row instead of overwriting each other.
    """
    updated = db.query(ChartOfAccounts).filter(
        ChartOfAccounts.id == account_id,
        ChartOfAccounts.tenant_id == tenant_id
    ).update(
        {ChartOfAccounts.balance: ChartOfAccounts.balance + delta},
        synchronize_session=False
    )
    if updated == 0:
        raise NotFound(f"Account with id {account_id} not found")
