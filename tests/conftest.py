import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_TO_FILE", "false")

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from crud import chart_of_accounts as chart_crud
from crud import expenses as expense_crud
from crud import incomes as income_crud
from database import Base
from models.chart_of_accounts import AccountType
from schemas.chart_of_accounts import ChartOfAccountsCreate
from schemas.expenses import ExpenseCategoryCreate
from schemas.incomes import IncomeCategoryCreate

TENANT = "tenant-a"
OTHER_TENANT = "tenant-b"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    from fastapi.testclient import TestClient
    from database import get_db
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_account(db):
    def _make(code, account_type=AccountType.EXPENSE, tenant_id=TENANT, parent_id=None, name=None):
        return chart_crud.create_account(db, ChartOfAccountsCreate(
            account_code=code,
            account_name=name or f"Account {code}",
            account_type=account_type,
            parent_id=parent_id,
        ), tenant_id)
    return _make


@pytest.fixture
def expense_category(db):
    return expense_crud.create_category(db, ExpenseCategoryCreate(name="Supplies"), TENANT)


@pytest.fixture
def income_category(db):
    return income_crud.create_category(db, IncomeCategoryCreate(name="Sales"), TENANT)


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


JAN_1 = date(2024, 1, 1)
