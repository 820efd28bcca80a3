from datetime import date, datetime
from pathlib import Path

import pytest

from ledger.domain import CategoryBudget, Transaction
from ledger.transforms import (
    add_transaction,
    delete_transaction,
    expense_transactions,
    income_transactions,
    load_seed,
    signed_amount,
    transaction_from_dict,
    transaction_to_dict,
    update_budget,
    update_transaction,
)

SEED = Path(__file__).resolve().parents[1] / "data" / "seed.json"


def make_tx(id, amount, type):
    ts = datetime(2025, 9, 1, 10, 0)
    return Transaction(
        id=id, title="x", subtitle="Food", amount=amount, date=ts, icon="",
        color_hex="", type=type, user_id="u1", created_at=ts,
    )


def test_transaction_from_wire_shape():
    t = transaction_from_dict({
        "title": "Dining",
        "subtitle": "Dining",
        "amount": -25.5,
        "date": "2025-12-16T11:30:00Z",
        "icon": "fork.knife",
        "colorHex": "#FF6B6B",
        "note": None,
        "type": "expense",
        "userId": "u1",
        "createdAt": "2025-12-16T11:30:02Z",
        "source": "shortcuts",
    })
    assert t.id
    assert t.amount == -25.5
    assert t.date.year == 2025 and t.date.day == 16
    assert t.color_hex == "#FF6B6B"
    assert t.note is None
    assert t.user_id == "u1"


def test_transaction_from_dict_requires_user():
    with pytest.raises(KeyError):
        transaction_from_dict({"title": "x", "amount": 1, "date": "2025-01-01"})


def test_transaction_dict_keys_are_camel_case():
    data = transaction_to_dict(make_tx("t1", -5.0, "expense"))
    assert data["colorHex"] == ""
    assert data["userId"] == "u1"
    assert transaction_from_dict(data) == make_tx("t1", -5.0, "expense")


def test_signed_amount():
    assert signed_amount(25.5, "income") == 25.5
    assert signed_amount(-25.5, "Income") == 25.5
    assert signed_amount(25.5, "expense") == -25.5
    assert signed_amount(25.5, "anything") == -25.5


def test_load_seed():
    transactions, budgets, recurring, goals = load_seed(str(SEED))

    assert len(transactions) >= 5
    assert len(budgets) >= 3
    assert len(recurring) >= 1
    assert len(goals) >= 1
    assert isinstance(budgets[0].month_start_date, date)
    assert any(t.subtitle is None for t in transactions)


def test_add_update_delete_are_pure():
    t1 = make_tx("t1", -10.0, "expense")
    t2 = make_tx("t2", 20.0, "income")

    trans = (t1,)
    added = add_transaction(trans, t2)
    assert len(added) == 2
    assert trans == (t1,)

    changed = make_tx("t1", -99.0, "expense")
    updated = update_transaction(added, changed)
    assert updated[0].amount == -99.0
    assert added[0].amount == -10.0

    assert delete_transaction(updated, "t1") == (t2,)
    assert delete_transaction(updated, "missing") == updated


def test_update_budget():
    b1 = CategoryBudget(
        id="b1", category="Food", total_amount=300, icon="", color_hex="", frequency="Monthly",
        user_id="u1", month_start_date=date(2025, 9, 1), created_at=datetime(2025, 9, 1),
    )
    budgets = (b1,)
    new_budgets = update_budget(budgets, "b1", 500)

    assert new_budgets[0].total_amount == 500
    assert new_budgets[0].category == "Food"
    assert budgets[0].total_amount == 300


def test_split_by_type():
    trans = (make_tx("t1", -10.0, "expense"), make_tx("t2", 20.0, "income"))
    assert [t.id for t in income_transactions(trans)] == ["t2"]
    assert [t.id for t in expense_transactions(trans)] == ["t1"]
