from datetime import date
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from database import get_db
from models.expenses import ExpenseStatus
from schemas import expenses as schemas
from crud import expenses as crud
from utils.tenancy import get_tenant_id, get_user_id

router = APIRouter(
    prefix="/expenses",
    tags=["Expenses"],
)

@router.get("/categories", response_model=List[schemas.ExpenseCategory])
def read_categories(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return crud.get_categories(db, tenant_id)

@router.post("/categories", response_model=schemas.ExpenseCategory, status_code=status.HTTP_201_CREATED)
def create_category(category: schemas.ExpenseCategoryCreate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user_id: Optional[str] = Depends(get_user_id)):
    return crud.create_category(db, category, tenant_id, user_id)

@router.patch("/categories/{category_id}", response_model=schemas.ExpenseCategory)
def update_category(category_id: int, category: schemas.ExpenseCategoryUpdate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user_id: Optional[str] = Depends(get_user_id)):
    return crud.update_category(db, category_id, category, tenant_id, user_id)

@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    crud.delete_category(db, category_id, tenant_id)
    return None

@router.get("/summary", response_model=schemas.ExpenseSummary)
def read_summary(start_date: date, end_date: date, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return crud.get_summary(db, tenant_id, start_date, end_date)

@router.get("/by-category", response_model=List[schemas.ExpenseCategoryTotal])
def read_totals_by_category(start_date: date, end_date: date, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return crud.get_totals_by_category(db, tenant_id, start_date, end_date)

@router.post("/", response_model=schemas.Expense, status_code=status.HTTP_201_CREATED)
def create_expense(expense: schemas.ExpenseCreate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user_id: Optional[str] = Depends(get_user_id)):
    return crud.create_expense(db=db, expense=expense, tenant_id=tenant_id, user_id=user_id)

@router.get("/", response_model=List[schemas.Expense])
def read_expenses(
    category_id: Optional[int] = None,
    account_id: Optional[int] = None,
    status: Optional[ExpenseStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 10,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return crud.get_expenses(db, tenant_id, category_id, account_id, status, start_date, end_date, skip, limit)

@router.get("/{expense_id}", response_model=schemas.Expense)
def read_expense(expense_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return crud.get_expense(db=db, expense_id=expense_id, tenant_id=tenant_id)

@router.put("/{expense_id}", response_model=schemas.Expense)
def update_expense(expense_id: int, expense: schemas.ExpenseUpdate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user_id: Optional[str] = Depends(get_user_id)):
    return crud.update_expense(db=db, expense_id=expense_id, expense=expense, tenant_id=tenant_id, user_id=user_id)

@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(expense_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user_id: Optional[str] = Depends(get_user_id)):
    crud.delete_expense(db=db, expense_id=expense_id, tenant_id=tenant_id, user_id=user_id)
    return None
