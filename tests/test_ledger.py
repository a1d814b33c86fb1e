import random
from datetime import date, timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError

from conftest import OTHER_TENANT, TENANT
from crud import chart_of_accounts as chart_crud
from crud import ledger
from exceptions import ImmutableJournalEntry, InvalidDateRange, NotFound, PostingIntegrityFailure
from models.chart_of_accounts import AccountType
from models.journal_entry import JournalEntry
from schemas.journal_entry import PostingEffect
from utils import transactions


def _balance(db, account_id, tenant_id=TENANT):
    return chart_crud.get_account(db, account_id, tenant_id).balance


def _entry_count(db, tenant_id=TENANT):
    return db.query(JournalEntry).filter(JournalEntry.tenant_id == tenant_id).count()


@pytest.fixture(autouse=True)
def no_retry_delay(monkeypatch):
    monkeypatch.setattr(transactions, "POSTING_RETRY_BACKOFF", 0)


def test_credit_lowers_balance_and_writes_one_entry(db, make_account):
    account = make_account("5100")

    entry = ledger.post_entry(
        db, TENANT, account.id, PostingEffect(credit=Decimal("150.00")),
        date(2024, 3, 1), "Expense: Supplies", "EXPENSE", 17, "user-1"
    )

    assert _balance(db, account.id) == Decimal("-150.00")
    assert entry.debit == Decimal("0.00")
    assert entry.credit == Decimal("150.00")
    assert entry.ref_type == "EXPENSE"
    assert entry.ref_id == "17"
    assert entry.created_by == "user-1"
    assert _entry_count(db) == 1


def test_debit_raises_balance(db, make_account):
    account = make_account("1100", AccountType.ASSET)

    ledger.post_entry(db, TENANT, account.id, PostingEffect(debit=Decimal("80.25")), date(2024, 3, 1), None, "INCOME", 1)

    assert _balance(db, account.id) == Decimal("80.25")


@pytest.mark.parametrize("debit, credit", [
    (Decimal("10.00"), Decimal("5.00")),
    (Decimal("0"), Decimal("0")),
    (Decimal("-1.00"), Decimal("0")),
])
def test_invalid_effects_are_rejected(debit, credit):
    with pytest.raises(ValidationError):
        PostingEffect(debit=debit, credit=credit)


def test_post_to_other_tenants_account_is_not_found(db, make_account):
    account = make_account("5100", tenant_id=OTHER_TENANT)

    with pytest.raises(NotFound):
        ledger.post_entry(db, TENANT, account.id, PostingEffect(credit=Decimal("5.00")), date(2024, 3, 1), None, "EXPENSE", 1)

    assert _balance(db, account.id, OTHER_TENANT) == Decimal("0.00")
    assert _entry_count(db, OTHER_TENANT) == 0


def test_reverse_posting_restores_balances(db, make_account):
    cash = make_account("1100", AccountType.ASSET)
    sales = make_account("4100", AccountType.INCOME)
    ledger.post_entry(db, TENANT, cash.id, PostingEffect(debit=Decimal("300.00")), date(2024, 3, 1), None, "INVOICE", 9)
    ledger.post_entry(db, TENANT, sales.id, PostingEffect(credit=Decimal("300.00")), date(2024, 3, 1), None, "INVOICE", 9)
    ledger.post_entry(db, TENANT, cash.id, PostingEffect(debit=Decimal("20.00")), date(2024, 3, 2), None, "INVOICE", 10)

    assert ledger.reverse_posting(db, TENANT, "INVOICE", 9) == 2

    assert _balance(db, cash.id) == Decimal("20.00")
    assert _balance(db, sales.id) == Decimal("0.00")
    assert [entry.ref_id for entry in ledger.get_journal_entries(db, TENANT)] == ["10"]


def test_reverse_unknown_reference_is_a_no_op(db, make_account):
    account = make_account("5100")
    ledger.post_entry(db, TENANT, account.id, PostingEffect(credit=Decimal("5.00")), date(2024, 3, 1), None, "EXPENSE", 1)

    assert ledger.reverse_posting(db, TENANT, "EXPENSE", 2) == 0
    assert ledger.reverse_posting(db, OTHER_TENANT, "EXPENSE", 1) == 0
    assert _balance(db, account.id) == Decimal("-5.00")


def test_repost_replaces_previous_effect(db, make_account):
    first = make_account("5100")
    second = make_account("5200")
    ledger.post_entry(db, TENANT, first.id, PostingEffect(credit=Decimal("150.00")), date(2024, 3, 1), None, "EXPENSE", 3)

    entry = ledger.repost(
        db, TENANT, "EXPENSE", 3, second.id,
        PostingEffect(credit=Decimal("200.00")), date(2024, 3, 4), "Corrected"
    )

    assert _balance(db, first.id) == Decimal("0.00")
    assert _balance(db, second.id) == Decimal("-200.00")
    assert [e.id for e in ledger.get_entries_by_reference(db, TENANT, "EXPENSE", 3)] == [entry.id]
    assert entry.description == "Corrected"


def test_balance_always_matches_journal(db, make_account):
    rng = random.Random(20240301)
    accounts = [make_account(code).id for code in ("5100", "5200", "5300")]
    live_refs = []

    for ref_id in range(60):
        if live_refs and rng.random() < 0.3:
            ledger.reverse_posting(db, TENANT, "TEST", live_refs.pop(rng.randrange(len(live_refs))))
        else:
            amount = Decimal(rng.randint(1, 100000)).scaleb(-2)
            effect = PostingEffect(debit=amount) if rng.random() < 0.5 else PostingEffect(credit=amount)
            ledger.post_entry(
                db, TENANT, rng.choice(accounts), effect,
                date(2024, 1, 1) + timedelta(days=rng.randint(0, 90)), None, "TEST", ref_id
            )
            live_refs.append(ref_id)

        for account_id in accounts:
            assert _balance(db, account_id) == ledger.sum_entries(db, TENANT, account_id)


def _operational_error():
    return OperationalError("INSERT INTO journal_entries", {}, Exception("database is locked"))


def test_failed_journal_write_leaves_no_trace(db, make_account, monkeypatch):
    account = make_account("5100")

    def failing_insert(session, entry):
        raise _operational_error()

    monkeypatch.setattr(ledger, "_new_journal_entry", failing_insert)

    with pytest.raises(PostingIntegrityFailure) as excinfo:
        ledger.post_entry(db, TENANT, account.id, PostingEffect(credit=Decimal("150.00")), date(2024, 3, 1), None, "EXPENSE", 1)

    assert excinfo.value.retryable is True
    assert _balance(db, account.id) == Decimal("0.00")
    assert _entry_count(db) == 0


def test_integrity_error_after_insert_rolls_back_both_halves(db, make_account, monkeypatch):
    account = make_account("5100")
    original = ledger._new_journal_entry

    def insert_then_fail(session, entry):
        original(session, entry)
        raise IntegrityError("INSERT INTO journal_entries", {}, Exception("constraint failed"))

    monkeypatch.setattr(ledger, "_new_journal_entry", insert_then_fail)

    with pytest.raises(PostingIntegrityFailure):
        ledger.post_entry(db, TENANT, account.id, PostingEffect(credit=Decimal("150.00")), date(2024, 3, 1), None, "EXPENSE", 1)

    assert _balance(db, account.id) == Decimal("0.00")
    assert _entry_count(db) == 0


def test_transient_error_is_retried_once_only_applied_once(db, make_account, monkeypatch):
    account = make_account("5100")
    original = chart_crud.adjust_balance
    calls = []

    def flaky_adjust(session, account_id, tenant_id, delta):
        calls.append(delta)
        if len(calls) == 1:
            raise _operational_error()
        return original(session, account_id, tenant_id, delta)

    monkeypatch.setattr(chart_crud, "adjust_balance", flaky_adjust)

    ledger.post_entry(db, TENANT, account.id, PostingEffect(credit=Decimal("150.00")), date(2024, 3, 1), None, "EXPENSE", 1)

    assert len(calls) == 2
    assert _balance(db, account.id) == Decimal("-150.00")
    assert _entry_count(db) == 1


def test_journal_entries_are_immutable(db, make_account):
    account = make_account("5100")
    entry = ledger.post_entry(db, TENANT, account.id, PostingEffect(credit=Decimal("150.00")), date(2024, 3, 1), None, "EXPENSE", 1)

    entry.credit = Decimal("1.00")
    with pytest.raises(ImmutableJournalEntry):
        db.flush()
    db.rollback()

    assert ledger.get_journal_entry(db, entry.id, TENANT).credit == Decimal("150.00")


def test_journal_entry_listing_filters(db, make_account):
    first = make_account("5100")
    second = make_account("5200")
    ledger.post_entry(db, TENANT, first.id, PostingEffect(credit=Decimal("1.00")), date(2024, 1, 10), None, "EXPENSE", 1)
    ledger.post_entry(db, TENANT, second.id, PostingEffect(credit=Decimal("2.00")), date(2024, 2, 10), None, "EXPENSE", 2)
    ledger.post_entry(db, TENANT, first.id, PostingEffect(debit=Decimal("3.00")), date(2024, 3, 10), None, "INCOME", 1)

    newest_first = ledger.get_journal_entries(db, TENANT)
    assert [entry.date for entry in newest_first] == [date(2024, 3, 10), date(2024, 2, 10), date(2024, 1, 10)]

    assert len(ledger.get_journal_entries(db, TENANT, account_id=first.id)) == 2
    assert len(ledger.get_journal_entries(db, TENANT, ref_type="EXPENSE")) == 2
    assert len(ledger.get_journal_entries(db, TENANT, start_date=date(2024, 2, 1), end_date=date(2024, 2, 28))) == 1
    assert ledger.get_journal_entries(db, OTHER_TENANT) == []

    with pytest.raises(InvalidDateRange):
        ledger.get_journal_entries(db, TENANT, start_date=date(2024, 3, 1), end_date=date(2024, 2, 1))
