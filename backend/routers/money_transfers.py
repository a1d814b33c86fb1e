from datetime import date
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
from database import get_db
from schemas import money_transfers as schemas
from crud import money_transfers as crud
from utils.tenancy import get_tenant_id, get_user_id

router = APIRouter(
    prefix="/money-transfers",
    tags=["Money Transfers"],
)

@router.post("/", response_model=schemas.MoneyTransfer, status_code=status.HTTP_201_CREATED)
def create_transfer(transfer: schemas.MoneyTransferCreate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user_id: Optional[str] = Depends(get_user_id)):
    return crud.create_transfer(db, transfer, tenant_id, user_id)

@router.get("/", response_model=schemas.MoneyTransferPage)
def read_transfers(
    from_account_id: Optional[int] = None,
    to_account_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 10,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    transfers, total = crud.get_transfers(db, tenant_id, from_account_id, to_account_id, start_date, end_date, skip, limit)
    return schemas.MoneyTransferPage(items=transfers, total=total, skip=skip, limit=limit)

@router.get("/{transfer_id}", response_model=schemas.MoneyTransfer)
def read_transfer(transfer_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return crud.get_transfer(db, transfer_id, tenant_id)

@router.delete("/{transfer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transfer(transfer_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user_id: Optional[str] = Depends(get_user_id)):
    crud.delete_transfer(db, transfer_id, tenant_id, user_id)
    return None
