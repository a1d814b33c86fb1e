from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from crud import chart_of_accounts as crud
from crud.audit_log import get_audit_logs
from crud import chart_seeder
from crud import statements as crud_statements
from database import get_db
from models.chart_of_accounts import AccountType
from schemas.chart_of_accounts import (
    AccountNode, ChartOfAccounts, ChartOfAccountsCreate, ChartOfAccountsPage,
    ChartOfAccountsUpdate, SeedResult,
)
from schemas.audit_log import AuditLog
from schemas.ledgers import AccountStatement
from utils.tenancy import get_tenant_id, get_user_id

router = APIRouter(
    prefix="/chart-of-accounts",
    tags=["Chart of Accounts"],
)

@router.post("/", response_model=ChartOfAccounts, status_code=status.HTTP_201_CREATED)
def create_account(
    account: ChartOfAccountsCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id)
):
    return crud.create_account(db, account, tenant_id, user_id)

@router.get("/", response_model=ChartOfAccountsPage)
def get_accounts(
    account_type: Optional[AccountType] = None,
    sub_type: Optional[str] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    accounts, total = crud.get_accounts(
        db, tenant_id,
        account_type=account_type,
        sub_type=sub_type,
        is_active=is_active,
        search=search,
        skip=skip,
        limit=limit
    )
    return ChartOfAccountsPage(items=accounts, total=total, skip=skip, limit=limit)

@router.get("/tree", response_model=List[AccountNode])
def get_account_tree(
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return crud.get_account_tree(db, tenant_id)

@router.post("/seed", response_model=SeedResult)
def seed_default_accounts(
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id)
):
    """
    Create the default chart of accounts for the tenant. Re-running it creates nothing new.
    """
    return chart_seeder.seed_default_accounts(db, tenant_id, user_id)

@router.get("/{account_id}", response_model=ChartOfAccounts)
def get_account(
    account_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return crud.get_account(db, account_id, tenant_id)

@router.patch("/{account_id}", response_model=ChartOfAccounts)
def update_account(
    account_id: int,
    account_update: ChartOfAccountsUpdate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id)
):
    return crud.update_account(db, account_id, account_update, tenant_id, user_id)

@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    account_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user_id: Optional[str] = Depends(get_user_id)
):
    crud.delete_account(db, account_id, tenant_id, user_id)
    return None

@router.get("/{account_id}/statement", response_model=AccountStatement)
def get_account_statement(
    account_id: int,
    start_date: date,
    end_date: date,
    method: Literal["cached", "historical"] = "cached",
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """
    Opening balance, running balance per entry and closing balance for the window.
    """
    return crud_statements.get_account_statement(db, account_id, start_date, end_date, tenant_id, method)

@router.get("/{account_id}/history", response_model=List[AuditLog])
def get_account_history(
    account_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """
    Audit trail of updates and deletion for the account, oldest first.
    """
    return get_audit_logs(db, tenant_id, "chart_of_accounts", account_id)
