"""
Ledger posting engine.

This is the only path by which an account balance changes. Each posting
adjusts the cached balance and writes its journal entry inside one
transaction; a reversal undoes both halves together. The `apply_*` functions
stage work on the session without committing so that workflows (expenses,
incomes) can bundle their own rows into the same unit of work; the public
`post_entry` / `reverse_posting` / `repost` functions commit through
`run_atomic`.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from crud import chart_of_accounts as chart_crud
from exceptions import InvalidDateRange, PostingIntegrityFailure
from models.journal_entry import JournalEntry
from schemas.journal_entry import PostingEffect
from utils.transactions import run_atomic

logger = logging.getLogger(__name__)


def _new_journal_entry(db: Session, entry: JournalEntry) -> JournalEntry:
    db.add(entry)
    db.flush()
    return entry


def apply_posting(
    db: Session,
    tenant_id: str,
    account_id: int,
    effect: PostingEffect,
    entry_date: date,
    description: Optional[str],
    ref_type: str,
    ref_id,
    created_by: Optional[str] = None
) -> JournalEntry:
    """Stage balance adjustment + journal entry. The caller commits."""
    chart_crud.get_account(db, account_id, tenant_id)

    chart_crud.adjust_balance(db, account_id, tenant_id, effect.net)
    return _new_journal_entry(db, JournalEntry(
        tenant_id=tenant_id,
        account_id=account_id,
        date=entry_date,
        debit=effect.debit,
        credit=effect.credit,
        description=description,
        ref_type=ref_type,
        ref_id=str(ref_id),
        created_by=created_by
    ))


def _entries_for_reversal(db: Session, tenant_id: str, ref_type: str, ref_id) -> List[JournalEntry]:
    return db.query(JournalEntry).filter(
        JournalEntry.tenant_id == tenant_id,
        JournalEntry.ref_type == ref_type,
        JournalEntry.ref_id == str(ref_id)
    ).order_by(JournalEntry.id).with_for_update().all()


def apply_reversal(db: Session, tenant_id: str, ref_type: str, ref_id) -> int:
    """Stage the inverse of every entry posted for (ref_type, ref_id). The caller commits.

    Each entry is deleted before its balance effect is undone; an entry another
    transaction already removed aborts the whole reversal.
    """
    entries = _entries_for_reversal(db, tenant_id, ref_type, ref_id)
    for entry in entries:
        deleted = db.query(JournalEntry).filter(
            JournalEntry.id == entry.id,
            JournalEntry.tenant_id == tenant_id
        ).delete(synchronize_session=False)
        if deleted != 1:
            logger.error(f"Journal entry {entry.id} for {ref_type}:{ref_id} was already reversed")
            raise PostingIntegrityFailure(f"Postings for {ref_type}:{ref_id} were changed concurrently; retry later")
        chart_crud.adjust_balance(db, entry.account_id, tenant_id, -(entry.debit - entry.credit))
        db.expunge(entry)
    return len(entries)


def post_entry(
    db: Session,
    tenant_id: str,
    account_id: int,
    effect: PostingEffect,
    entry_date: date,
    description: Optional[str],
    ref_type: str,
    ref_id,
    created_by: Optional[str] = None
) -> JournalEntry:
    entry = run_atomic(db, lambda: apply_posting(
        db, tenant_id, account_id, effect, entry_date, description, ref_type, ref_id, created_by
    ))
    db.refresh(entry)
    logger.info(
        f"Posted {ref_type}:{ref_id} to account {account_id} for tenant {tenant_id} "
        f"(debit={effect.debit}, credit={effect.credit})"
    )
    return entry


def reverse_posting(db: Session, tenant_id: str, ref_type: str, ref_id) -> int:
    reversed_count = run_atomic(db, lambda: apply_reversal(db, tenant_id, ref_type, ref_id))
    logger.info(f"Reversed {reversed_count} journal entries for {ref_type}:{ref_id}, tenant {tenant_id}")
    return reversed_count


def repost(
    db: Session,
    tenant_id: str,
    ref_type: str,
    ref_id,
    account_id: int,
    effect: PostingEffect,
    entry_date: date,
    description: Optional[str],
    created_by: Optional[str] = None
) -> JournalEntry:
    """Replace the postings of (ref_type, ref_id) with a single new posting, atomically."""
    def work():
        apply_reversal(db, tenant_id, ref_type, ref_id)
        return apply_posting(db, tenant_id, account_id, effect, entry_date, description, ref_type, ref_id, created_by)

    entry = run_atomic(db, work)
    db.refresh(entry)
    logger.info(f"Reposted {ref_type}:{ref_id} to account {account_id} for tenant {tenant_id}")
    return entry


def get_entries_by_reference(db: Session, tenant_id: str, ref_type: str, ref_id) -> List[JournalEntry]:
    return db.query(JournalEntry).filter(
        JournalEntry.tenant_id == tenant_id,
        JournalEntry.ref_type == ref_type,
        JournalEntry.ref_id == str(ref_id)
    ).order_by(JournalEntry.id).all()


def get_journal_entry(db: Session, entry_id: int, tenant_id: str) -> Optional[JournalEntry]:
    return db.query(JournalEntry).filter(
        JournalEntry.id == entry_id,
        JournalEntry.tenant_id == tenant_id
    ).first()


def get_journal_entries(
    db: Session,
    tenant_id: str,
    account_id: Optional[int] = None,
    ref_type: Optional[str] = None,
    ref_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100
) -> List[JournalEntry]:
    """
    Retrieves a list of journal entries with optional filtering, newest first.
    """
    if start_date and end_date and start_date > end_date:
        raise InvalidDateRange("start_date must not be after end_date")

    query = db.query(JournalEntry).filter(JournalEntry.tenant_id == tenant_id)

    if account_id is not None:
        query = query.filter(JournalEntry.account_id == account_id)
    if ref_type:
        query = query.filter(JournalEntry.ref_type == ref_type)
    if ref_id is not None:
        query = query.filter(JournalEntry.ref_id == str(ref_id))
    if start_date:
        query = query.filter(JournalEntry.date >= start_date)
    if end_date:
        query = query.filter(JournalEntry.date <= end_date)

    return query.order_by(JournalEntry.date.desc(), JournalEntry.id.desc()).offset(skip).limit(limit).all()


def sum_entries(db: Session, tenant_id: str, account_id: int):
    """Σ(debit − credit) over the account's journal, the value the cached balance must equal."""
    entries = db.query(JournalEntry).filter(
        JournalEntry.tenant_id == tenant_id,
        JournalEntry.account_id == account_id
    ).all()
    return sum((entry.debit - entry.credit for entry in entries), 0)
