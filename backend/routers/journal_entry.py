from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from database import get_db
from schemas.journal_entry import JournalEntry
from crud import ledger
from utils.tenancy import get_tenant_id

router = APIRouter(
    prefix="/journal-entries",
    tags=["Journal Entries"],
)

@router.get("/", response_model=List[JournalEntry])
def get_journal_entries(
    account_id: Optional[int] = None,
    ref_type: Optional[str] = None,
    ref_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """
    Retrieve a list of journal entries. Entries are only written by the expense and income workflows.
    """
    return ledger.get_journal_entries(
        db=db,
        tenant_id=tenant_id,
        account_id=account_id,
        ref_type=ref_type,
        ref_id=ref_id,
        start_date=start_date,
        end_date=end_date,
        skip=skip,
        limit=limit
    )

@router.get("/by-reference/{ref_type}/{ref_id}", response_model=List[JournalEntry])
def get_entries_by_reference(
    ref_type: str,
    ref_id: str,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """
    Every entry currently posted for one originating document, e.g. EXPENSE/42.
    """
    return ledger.get_entries_by_reference(db, tenant_id, ref_type.upper(), ref_id)

@router.get("/{entry_id}", response_model=JournalEntry)
def get_journal_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """
    Retrieve a single journal entry by its ID.
    """
    db_entry = ledger.get_journal_entry(db=db, entry_id=entry_id, tenant_id=tenant_id)
    if db_entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Journal entry not found")
    return db_entry
