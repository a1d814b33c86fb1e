from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from conftest import OTHER_TENANT, TENANT
from crud import ledger
from utils import transactions

HEADERS = {"X-Tenant-ID": TENANT, "X-User-ID": "user-1"}
OTHER_HEADERS = {"X-Tenant-ID": OTHER_TENANT}


def _create_account(client, code, account_type="EXPENSE", headers=HEADERS, **extra):
    response = client.post("/chart-of-accounts/", json={
        "account_code": code,
        "account_name": f"Account {code}",
        "account_type": account_type,
        **extra,
    }, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _create_expense(client, account_id, amount="150.00"):
    category = client.post("/expenses/categories", json={"name": "Supplies"}, headers=HEADERS)
    assert category.status_code == 201, category.text
    response = client.post("/expenses/", json={
        "category_id": category.json()["id"],
        "account_id": account_id,
        "date": "2024-03-01",
        "amount": amount,
    }, headers=HEADERS)
    return response


def test_root(client):
    assert client.get("/").json() == {"message": "Welcome to the Ledger API!"}


def test_tenant_header_is_required(client):
    assert client.get("/chart-of-accounts/").status_code == 422


def test_create_and_fetch_account(client):
    account = _create_account(client, "5100")

    assert Decimal(account["balance"]) == Decimal("0")
    assert account["is_system"] is False

    response = client.get(f"/chart-of-accounts/{account['id']}", headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["account_code"] == "5100"

    assert client.get(f"/chart-of-accounts/{account['id']}", headers=OTHER_HEADERS).status_code == 404


def test_duplicate_code_maps_to_conflict(client):
    _create_account(client, "5100")

    response = client.post("/chart-of-accounts/", json={
        "account_code": "5100", "account_name": "Again", "account_type": "EXPENSE",
    }, headers=HEADERS)

    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_CODE"
    assert response.json()["retryable"] is False


def test_cross_tenant_parent_maps_to_bad_request(client):
    parent = _create_account(client, "5000", headers=OTHER_HEADERS)

    response = client.post("/chart-of-accounts/", json={
        "account_code": "5100", "account_name": "Child", "account_type": "EXPENSE", "parent_id": parent["id"],
    }, headers=HEADERS)

    assert response.status_code == 400
    assert response.json()["code"] == "CROSS_TENANT_REFERENCE"


def test_seed_then_protect_system_accounts(client):
    first = client.post("/chart-of-accounts/seed", headers=HEADERS)
    second = client.post("/chart-of-accounts/seed", headers=HEADERS)

    assert first.json() == {"created": 18, "existing": 0}
    assert second.json() == {"created": 0, "existing": 18}

    page = client.get("/chart-of-accounts/", params={"account_type": "ASSET"}, headers=HEADERS).json()
    assert page["total"] == 5
    assets_root = page["items"][0]
    assert assets_root["account_code"] == "1000"

    response = client.delete(f"/chart-of-accounts/{assets_root['id']}", headers=HEADERS)
    assert response.status_code == 403
    assert response.json()["code"] == "SYSTEM_ACCOUNT_PROTECTED"

    response = client.patch(f"/chart-of-accounts/{assets_root['id']}", json={"account_name": "X"}, headers=HEADERS)
    assert response.status_code == 403

    tree = client.get("/chart-of-accounts/tree", headers=HEADERS).json()
    assert [node["account_code"] for node in tree] == ["1000", "2000", "3000", "4000", "5000"]
    assert [node["account_code"] for node in tree[0]["children"]] == ["1100", "1200", "1300", "1400"]


def test_update_and_delete_account(client):
    account = _create_account(client, "5100")

    response = client.patch(f"/chart-of-accounts/{account['id']}", json={"account_name": "Fuel"}, headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["account_name"] == "Fuel"

    assert client.delete(f"/chart-of-accounts/{account['id']}", headers=HEADERS).status_code == 204
    assert client.get(f"/chart-of-accounts/{account['id']}", headers=HEADERS).status_code == 404


def test_null_active_flag_is_ignored(client):
    account = _create_account(client, "5100")

    response = client.patch(f"/chart-of-accounts/{account['id']}", json={"is_active": None}, headers=HEADERS)

    assert response.status_code == 200
    assert response.json()["is_active"] is True


def test_expense_flow_through_ledger_and_statement(client):
    account = _create_account(client, "5100")

    response = _create_expense(client, account["id"])
    assert response.status_code == 201, response.text
    expense = response.json()

    balance = client.get(f"/chart-of-accounts/{account['id']}", headers=HEADERS).json()["balance"]
    assert Decimal(balance) == Decimal("-150.00")

    entries = client.get("/journal-entries/", params={"ref_type": "EXPENSE", "ref_id": expense["id"]}, headers=HEADERS).json()
    assert len(entries) == 1
    assert Decimal(entries[0]["credit"]) == Decimal("150.00")
    assert client.get(f"/journal-entries/{entries[0]['id']}", headers=OTHER_HEADERS).status_code == 404

    statement = client.get(
        f"/chart-of-accounts/{account['id']}/statement",
        params={"start_date": "2024-03-01", "end_date": "2024-03-31"},
        headers=HEADERS,
    ).json()
    assert Decimal(statement["opening_balance"]) == Decimal("0")
    assert Decimal(statement["closing_balance"]) == Decimal("-150.00")
    assert Decimal(statement["entries"][0]["running_balance"]) == Decimal("-150.00")

    response = client.delete(f"/chart-of-accounts/{account['id']}", headers=HEADERS)
    assert response.status_code == 409
    assert response.json()["code"] == "HAS_TRANSACTIONS"

    assert client.delete(f"/expenses/{expense['id']}", headers=HEADERS).status_code == 204
    balance = client.get(f"/chart-of-accounts/{account['id']}", headers=HEADERS).json()["balance"]
    assert Decimal(balance) == Decimal("0")


def test_expense_against_foreign_account(client):
    foreign = _create_account(client, "5100", headers=OTHER_HEADERS)

    response = _create_expense(client, foreign["id"])

    assert response.status_code == 400
    assert response.json()["code"] == "CROSS_TENANT_REFERENCE"


def test_statement_rejects_inverted_range(client):
    account = _create_account(client, "5100")

    response = client.get(
        f"/chart-of-accounts/{account['id']}/statement",
        params={"start_date": "2024-03-31", "end_date": "2024-03-01"},
        headers=HEADERS,
    )

    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_DATE_RANGE"


def test_storage_failure_is_reported_as_retryable(client, monkeypatch):
    monkeypatch.setattr(transactions, "POSTING_RETRY_BACKOFF", 0)
    account = _create_account(client, "5100")

    def failing_insert(session, entry):
        raise OperationalError("INSERT INTO journal_entries", {}, Exception("database is locked"))

    monkeypatch.setattr(ledger, "_new_journal_entry", failing_insert)

    response = _create_expense(client, account["id"])

    assert response.status_code == 503
    assert response.json() == {
        "detail": "Ledger transaction could not be committed; retry later",
        "code": "POSTING_INTEGRITY_FAILURE",
        "retryable": True,
    }
    assert client.get("/expenses/", headers=HEADERS).json() == []


@pytest.mark.parametrize("path", ["/expenses/summary", "/incomes/summary"])
def test_summaries_start_empty(client, path):
    response = client.get(path, params={"start_date": "2024-01-01", "end_date": "2024-12-31"}, headers=HEADERS)

    assert response.status_code == 200
    assert Decimal(response.json()["total"]) == Decimal("0")
    assert response.json()["count"] == 0


def test_account_history_lists_audit_rows(client):
    account = _create_account(client, "5100")
    client.patch(f"/chart-of-accounts/{account['id']}", json={"account_name": "Fuel"}, headers=HEADERS)
    client.patch(f"/chart-of-accounts/{account['id']}", json={"is_active": False}, headers=HEADERS)

    history = client.get(f"/chart-of-accounts/{account['id']}/history", headers=HEADERS).json()

    assert [row["action"] for row in history] == ["UPDATE", "UPDATE"]
    assert history[0]["old_values"]["account_name"] == "Account 5100"
    assert history[0]["new_values"]["account_name"] == "Fuel"
    assert history[1]["new_values"]["is_active"] is False
    assert history[0]["changed_by"] == "user-1"
    assert client.get(f"/chart-of-accounts/{account['id']}/history", headers=OTHER_HEADERS).json() == []


def test_entries_by_reference(client):
    account = _create_account(client, "5100")
    expense = _create_expense(client, account["id"], "42.00").json()

    entries = client.get(f"/journal-entries/by-reference/expense/{expense['id']}", headers=HEADERS).json()

    assert len(entries) == 1
    assert entries[0]["account_id"] == account["id"]
    assert entries[0]["ref_id"] == str(expense["id"])
