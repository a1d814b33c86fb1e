"""
Transfers between two accounts of the same tenant.

A transfer credits the source account and debits the destination account,
both journal entries carrying ref_type TRANSFER and the transfer id.
"""

import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from crud import ledger
from crud.audit_log import create_audit_log
from crud.chart_of_accounts import resolve_reference
from exceptions import NotFound, InvalidTransfer, InsufficientBalance, InvalidDateRange
from models.chart_of_accounts import ChartOfAccounts
from models.money_transfers import MoneyTransfer
from schemas.audit_log import AuditLogCreate
from schemas.journal_entry import PostingEffect
from schemas.money_transfers import MoneyTransferCreate
from utils import sqlalchemy_to_dict
from utils.transactions import run_atomic

logger = logging.getLogger(__name__)

REF_TYPE = "TRANSFER"


def get_transfer(db: Session, transfer_id: int, tenant_id: str, for_update: bool = False) -> MoneyTransfer:
    query = db.query(MoneyTransfer).filter(MoneyTransfer.id == transfer_id, MoneyTransfer.tenant_id == tenant_id)
    if for_update:
        query = query.with_for_update()
    transfer = query.first()
    if not transfer:
        raise NotFound(f"Transfer with id {transfer_id} not found")
    return transfer


def get_transfers(
    db: Session,
    tenant_id: str,
    from_account_id: Optional[int] = None,
    to_account_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 10
) -> Tuple[List[MoneyTransfer], int]:
    query = db.query(MoneyTransfer).filter(MoneyTransfer.tenant_id == tenant_id)

    if from_account_id is not None:
        query = query.filter(MoneyTransfer.from_account_id == from_account_id)
    if to_account_id is not None:
        query = query.filter(MoneyTransfer.to_account_id == to_account_id)
    if start_date and end_date:
        if start_date > end_date:
            raise InvalidDateRange("start_date must not be after end_date")
        query = query.filter(MoneyTransfer.date >= start_date, MoneyTransfer.date <= end_date)

    total = query.count()
    transfers = query.order_by(MoneyTransfer.date.desc(), MoneyTransfer.id.desc()).offset(skip).limit(limit).all()
    return transfers, total


def _lock_account(db: Session, account_id: int, tenant_id: str) -> ChartOfAccounts:
    return db.query(ChartOfAccounts).filter(
        ChartOfAccounts.id == account_id,
        ChartOfAccounts.tenant_id == tenant_id
    ).with_for_update().populate_existing().one()


def create_transfer(db: Session, transfer: MoneyTransferCreate, tenant_id: str, user_id: Optional[str] = None) -> MoneyTransfer:
    if transfer.from_account_id == transfer.to_account_id:
        raise InvalidTransfer("Cannot transfer to the same account")

    def work():
        resolve_reference(db, ChartOfAccounts, transfer.from_account_id, tenant_id, "Source account")
        destination = resolve_reference(db, ChartOfAccounts, transfer.to_account_id, tenant_id, "Destination account")

        # Balance is read under the row lock so two transfers cannot both pass the check
        source = _lock_account(db, transfer.from_account_id, tenant_id)
        if source.balance < transfer.amount:
            raise InsufficientBalance(
                f"Insufficient balance in account {source.account_code}: {source.balance} < {transfer.amount}"
            )

        db_transfer = MoneyTransfer(**transfer.model_dump(), tenant_id=tenant_id, created_by=user_id)
        db.add(db_transfer)
        db.flush()

        description = transfer.description or f"Transfer: {source.account_name} → {destination.account_name}"
        ledger.apply_posting(
            db, tenant_id, source.id, PostingEffect(credit=transfer.amount),
            transfer.date, description, REF_TYPE, db_transfer.id, user_id
        )
        ledger.apply_posting(
            db, tenant_id, destination.id, PostingEffect(debit=transfer.amount),
            transfer.date, description, REF_TYPE, db_transfer.id, user_id
        )
        return db_transfer

    db_transfer = run_atomic(db, work)
    db.refresh(db_transfer)
    logger.info(
        f"Transferred {db_transfer.amount} from account {db_transfer.from_account_id} "
        f"to account {db_transfer.to_account_id} for tenant {tenant_id}"
    )
    return db_transfer


def delete_transfer(db: Session, transfer_id: int, tenant_id: str, user_id: Optional[str] = None) -> None:
    def work():
        db_transfer = get_transfer(db, transfer_id, tenant_id, for_update=True)
        create_audit_log(db, AuditLogCreate(
            tenant_id=tenant_id,
            table_name='money_transfers',
            record_id=transfer_id,
            changed_by=user_id,
            action='DELETE',
            old_values=sqlalchemy_to_dict(db_transfer),
            new_values={}
        ))
        ledger.apply_reversal(db, tenant_id, REF_TYPE, transfer_id)
        db.delete(db_transfer)
        db.flush()

    run_atomic(db, work)
    logger.info(f"Deleted transfer {transfer_id} for tenant {tenant_id}")
