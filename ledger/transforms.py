import json
from datetime import date, datetime
from typing import Any, Tuple
from uuid import uuid4

from ledger.domain import (
    EXPENSE,
    INCOME,
    CategoryBudget,
    RecurringTransaction,
    SavingGoal,
    Transaction,
)


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value))


def _parse_date(value: Any) -> date:
    return _parse_datetime(value).date()


def signed_amount(amount: float, type_: str) -> float:
    """Sign an amount by its type tag: income is positive, anything else negative."""
    if type_.lower() == INCOME:
        return abs(amount)
    return -abs(amount)


def transaction_from_dict(data: dict) -> Transaction:
    """Build a Transaction from its camelCase document shape.

    ``id`` is optional (a fresh one is generated); unknown keys such as
    ``source`` are ignored. ``createdAt`` falls back to ``date``.
    """
    when = _parse_datetime(data["date"])
    return Transaction(
        id=data.get("id") or uuid4().hex,
        title=data["title"],
        subtitle=data.get("subtitle"),
        amount=float(data["amount"]),
        date=when,
        icon=data.get("icon", ""),
        color_hex=data.get("colorHex", ""),
        note=data.get("note"),
        type=data.get("type", EXPENSE),
        user_id=data["userId"],
        created_at=_parse_datetime(data.get("createdAt", when)),
    )


def transaction_to_dict(t: Transaction) -> dict:
    return {
        "id": t.id,
        "title": t.title,
        "subtitle": t.subtitle,
        "amount": t.amount,
        "date": t.date.isoformat(),
        "icon": t.icon,
        "colorHex": t.color_hex,
        "note": t.note,
        "type": t.type,
        "userId": t.user_id,
        "createdAt": t.created_at.isoformat(),
    }


def budget_from_dict(data: dict) -> CategoryBudget:
    month_start = _parse_date(data["monthStartDate"])
    return CategoryBudget(
        id=data.get("id") or uuid4().hex,
        category=data["category"],
        total_amount=float(data["totalAmount"]),
        icon=data.get("icon", ""),
        color_hex=data.get("colorHex", ""),
        frequency=data.get("frequency", "Monthly"),
        type=data.get("type") or EXPENSE,
        user_id=data["userId"],
        month_start_date=month_start,
        created_at=_parse_datetime(data.get("createdAt", month_start)),
    )


def recurring_from_dict(data: dict) -> RecurringTransaction:
    start = _parse_date(data["startDate"])
    return RecurringTransaction(
        id=data.get("id") or uuid4().hex,
        name=data["name"],
        amount=float(data["amount"]),
        frequency=data.get("frequency", "Monthly"),
        start_date=start,
        icon=data.get("icon", ""),
        color_hex=data.get("colorHex", ""),
        note=data.get("note"),
        user_id=data["userId"],
        created_at=_parse_datetime(data.get("createdAt", start)),
    )


def goal_from_dict(data: dict) -> SavingGoal:
    target_date = _parse_date(data["targetDate"])
    return SavingGoal(
        id=data.get("id") or uuid4().hex,
        name=data["name"],
        target_amount=float(data["targetAmount"]),
        current_amount=float(data.get("currentAmount", 0.0)),
        target_date=target_date,
        icon=data.get("icon", ""),
        color_hex=data.get("colorHex", ""),
        user_id=data["userId"],
        created_at=_parse_datetime(data.get("createdAt", target_date)),
    )


def load_seed(
    path: str,
) -> Tuple[
    Tuple[Transaction, ...],
    Tuple[CategoryBudget, ...],
    Tuple[RecurringTransaction, ...],
    Tuple[SavingGoal, ...],
]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    transactions = tuple(transaction_from_dict(t) for t in data.get("transactions", []))
    budgets = tuple(budget_from_dict(b) for b in data.get("budgets", []))
    recurring = tuple(recurring_from_dict(r) for r in data.get("recurring", []))
    goals = tuple(goal_from_dict(g) for g in data.get("goals", []))

    return transactions, budgets, recurring, goals


def add_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    return trans + (t,)


def update_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    return tuple(t if existing.id == t.id else existing for existing in trans)


def delete_transaction(
    trans: Tuple[Transaction, ...], tid: str
) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.id != tid, trans))


def update_budget(
    budgets: Tuple[CategoryBudget, ...], bid: str, new_total: float
) -> Tuple[CategoryBudget, ...]:
    return tuple(
        CategoryBudget(
            id=b.id,
            category=b.category,
            total_amount=new_total if b.id == bid else b.total_amount,
            icon=b.icon,
            color_hex=b.color_hex,
            frequency=b.frequency,
            type=b.type,
            user_id=b.user_id,
            month_start_date=b.month_start_date,
            created_at=b.created_at,
        )
        for b in budgets
    )


def income_transactions(trans: Tuple[Transaction, ...]) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.type == INCOME, trans))


def expense_transactions(trans: Tuple[Transaction, ...]) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.type == EXPENSE, trans))
