from datetime import date
from decimal import Decimal

import pytest

from conftest import OTHER_TENANT, TENANT
from crud import chart_of_accounts as chart_crud
from crud import incomes as crud
from crud import ledger
from exceptions import CrossTenantReference, NotFound
from models.chart_of_accounts import AccountType
from schemas.incomes import IncomeCreate, IncomeUpdate


def _create(db, category, account, amount="250.00", on=date(2024, 3, 1)):
    return crud.create_income(db, IncomeCreate(
        category_id=category.id,
        account_id=account.id,
        date=on,
        amount=Decimal(amount),
    ), TENANT)


def _balance(db, account):
    return chart_crud.get_account(db, account.id, TENANT).balance


def test_create_income_posts_a_debit(db, make_account, income_category):
    account = make_account("1100", AccountType.ASSET)

    income = _create(db, income_category, account)

    assert _balance(db, account) == Decimal("250.00")
    entries = ledger.get_entries_by_reference(db, TENANT, crud.REF_TYPE, income.id)
    assert [(entry.debit, entry.credit) for entry in entries] == [(Decimal("250.00"), Decimal("0.00"))]
    assert entries[0].description == "Income: Sales"


def test_update_date_reposts(db, make_account, income_category):
    account = make_account("1100", AccountType.ASSET)
    income = _create(db, income_category, account)

    crud.update_income(db, income.id, IncomeUpdate(date=date(2024, 3, 20)), TENANT)

    entries = ledger.get_entries_by_reference(db, TENANT, crud.REF_TYPE, income.id)
    assert [entry.date for entry in entries] == [date(2024, 3, 20)]
    assert _balance(db, account) == Decimal("250.00")


def test_delete_income_reverses_the_posting(db, make_account, income_category):
    account = make_account("1100", AccountType.ASSET)
    income = _create(db, income_category, account)
    income_id = income.id

    crud.delete_income(db, income_id, TENANT)

    assert _balance(db, account) == Decimal("0.00")
    with pytest.raises(NotFound):
        crud.get_income(db, income_id, TENANT)


def test_cross_tenant_account_is_rejected(db, make_account, income_category):
    foreign_account = make_account("1100", AccountType.ASSET, tenant_id=OTHER_TENANT)

    with pytest.raises(CrossTenantReference):
        _create(db, income_category, foreign_account)

    assert crud.get_incomes(db, TENANT) == []


def test_summary_and_totals(db, make_account, income_category):
    account = make_account("1100", AccountType.ASSET)
    _create(db, income_category, account, "100.00", date(2024, 3, 1))
    _create(db, income_category, account, "50.50", date(2024, 3, 31))
    _create(db, income_category, account, "7.00", date(2024, 2, 28))

    summary = crud.get_summary(db, TENANT, date(2024, 3, 1), date(2024, 3, 31))
    assert summary.total == Decimal("150.50")
    assert summary.count == 2

    totals = crud.get_totals_by_category(db, TENANT, date(2024, 3, 1), date(2024, 3, 31))
    assert [(row.category.name, row.total) for row in totals] == [("Sales", Decimal("150.50"))]
