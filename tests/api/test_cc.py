"""
Tests for credit-card settlement endpoints.
"""

from decimal import Decimal

import pytest


def create_account(client, code, name, account_type):
    return client.post("/accounts", json={
        "code": code, "name": name, "account_type": account_type,
    }).json()["id"]


def charge(client, card_id, expense_id, amount):
    """Post a card charge and return the card line id."""
    txn = client.post("/transactions", json={
        "date": "2024-03-05",
        "description": "Supplies",
        "line1": {"account_id": expense_id, "amount": amount},
        "line2": {"account_id": card_id, "amount": f"-{amount}"},
    }).json()
    return next(l["id"] for l in txn["lines"] if l["account_id"] == card_id)


@pytest.fixture
def accounts(client):
    return {
        "bank": create_account(client, "1000", "Checking", "asset"),
        "visa": create_account(client, "2000", "Visa", "liability"),
        "amex": create_account(client, "2100", "Amex", "liability"),
        "expense": create_account(client, "50000", "Materials", "expense"),
    }


def test_balances_grouped_per_card(client, accounts):
    charge(client, accounts["visa"], accounts["expense"], "40.00")
    charge(client, accounts["visa"], accounts["expense"], "60.00")
    charge(client, accounts["amex"], accounts["expense"], "500.00")

    response = client.get("/cc/balances")

    assert response.status_code == 200
    data = response.json()
    assert [b["account_name"] for b in data] == ["Amex", "Visa"]
    assert Decimal(data[1]["unsettled_amount"]) == Decimal("100.00")


def test_settle_with_transfer(client, accounts):
    line_id = charge(client, accounts["visa"], accounts["expense"], "40.00")

    response = client.post("/cc/settle", json={
        "line_ids": [line_id],
        "pay_from_account_id": accounts["bank"],
        "date": "2024-03-20",
    })

    assert response.status_code == 200
    data = response.json()
    assert data["description"] == "CC settle: Visa"
    assert data["transfer_transaction_id"] is not None
    assert client.get("/cc/balances").json() == []


def test_mixed_cards_rejected(client, accounts):
    visa_line = charge(client, accounts["visa"], accounts["expense"], "40.00")
    amex_line = charge(client, accounts["amex"], accounts["expense"], "60.00")

    response = client.post("/cc/settle", json={"line_ids": [visa_line, amex_line]})

    assert response.status_code == 400
    assert "Amex, Visa" in response.json()["detail"]
    assert len(client.get("/cc/balances").json()) == 2


def test_empty_selection_returns_422(client):
    response = client.post("/cc/settle", json={"line_ids": []})
    assert response.status_code == 422
