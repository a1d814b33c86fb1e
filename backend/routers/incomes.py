from datetime import date
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from database import get_db
from schemas import incomes as schemas
from crud import incomes as crud
from utils.tenancy import get_tenant_id, get_user_id

router = APIRouter(
    prefix="/incomes",
    tags=["Incomes"],
)

@router.get("/categories", response_model=List[schemas.IncomeCategory])
def read_categories(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return crud.get_categories(db, tenant_id)

@router.post("/categories", response_model=schemas.IncomeCategory, status_code=status.HTTP_201_CREATED)
def create_category(category: schemas.IncomeCategoryCreate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user_id: Optional[str] = Depends(get_user_id)):
    return crud.create_category(db, category, tenant_id, user_id)

@router.patch("/categories/{category_id}", response_model=schemas.IncomeCategory)
def update_category(category_id: int, category: schemas.IncomeCategoryUpdate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user_id: Optional[str] = Depends(get_user_id)):
    return crud.update_category(db, category_id, category, tenant_id, user_id)

@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    crud.delete_category(db, category_id, tenant_id)
    return None

@router.get("/summary", response_model=schemas.IncomeSummary)
def read_summary(start_date: date, end_date: date, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return crud.get_summary(db, tenant_id, start_date, end_date)

@router.get("/by-category", response_model=List[schemas.IncomeCategoryTotal])
def read_totals_by_category(start_date: date, end_date: date, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return crud.get_totals_by_category(db, tenant_id, start_date, end_date)

@router.post("/", response_model=schemas.Income, status_code=status.HTTP_201_CREATED)
def create_income(income: schemas.IncomeCreate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user_id: Optional[str] = Depends(get_user_id)):
    return crud.create_income(db=db, income=income, tenant_id=tenant_id, user_id=user_id)

@router.get("/", response_model=List[schemas.Income])
def read_incomes(
    category_id: Optional[int] = None,
    account_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 10,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return crud.get_incomes(db, tenant_id, category_id, account_id, start_date, end_date, skip, limit)

@router.get("/{income_id}", response_model=schemas.Income)
def read_income(income_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return crud.get_income(db=db, income_id=income_id, tenant_id=tenant_id)

@router.put("/{income_id}", response_model=schemas.Income)
def update_income(income_id: int, income: schemas.IncomeUpdate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user_id: Optional[str] = Depends(get_user_id)):
    return crud.update_income(db=db, income_id=income_id, income=income, tenant_id=tenant_id, user_id=user_id)

@router.delete("/{income_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_income(income_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user_id: Optional[str] = Depends(get_user_id)):
    crud.delete_income(db=db, income_id=income_id, tenant_id=tenant_id, user_id=user_id)
    return None
