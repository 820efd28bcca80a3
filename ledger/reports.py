from __future__ import annotations

from typing import Iterable

import pandas as pd

from ledger.aggregates import budget_usage
from ledger.domain import EXPENSE, INCOME, CategoryBudget, Transaction

TRANSACTION_COLUMNS = ["id", "date", "title", "category", "type", "amount", "note"]


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """One row per transaction, oldest first."""
    rows = [
        {
            "id": t.id,
            "date": t.date,
            "title": t.title,
            "category": t.subtitle,
            "type": t.type,
            "amount": float(t.amount),
            "note": t.note,
        }
        for t in transactions
    ]
    df = pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)
    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    return df.sort_values("date", kind="stable").reset_index(drop=True)


def monthly_income_vs_spend(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Income, spending and net per calendar month.

    Returns:
        DataFrame with columns: Month (``YYYY-MM``), Income, Spending, Net
    """
    data = transactions_frame(transactions)
    if data.empty:
        return pd.DataFrame(columns=["Month", "Income", "Spending", "Net"])

    data["Month"] = data["date"].dt.to_period("M")
    income_by_month = data[data["type"] == INCOME].groupby("Month")["amount"].sum()
    expense = data[data["type"] == EXPENSE].copy()
    expense["AbsAmount"] = expense["amount"].abs()
    spending_by_month = expense.groupby("Month")["AbsAmount"].sum()

    months = sorted(set(income_by_month.index) | set(spending_by_month.index))
    rows = []
    for month in months:
        income = float(income_by_month.get(month, 0.0))
        spending = float(spending_by_month.get(month, 0.0))
        rows.append({
            "Month": str(month),
            "Income": income,
            "Spending": spending,
            "Net": income - spending,
        })

    return pd.DataFrame(rows)


def budget_frame(budgets: Iterable[CategoryBudget], transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Budget performance per category.

    Returns:
        DataFrame with columns: Category, Budget, Spent, Remaining,
        Percent Used, Status
    """
    transactions = tuple(transactions)
    rows = []
    for budget in budgets:
        usage = budget_usage(budget, transactions)
        rows.append({
            "Category": budget.category,
            "Budget": budget.total_amount,
            "Spent": usage.spent,
            "Remaining": usage.remaining,
            "Percent Used": usage.fraction_used * 100.0,
            "Status": "Over" if usage.remaining < 0 else "Under",
        })
    return pd.DataFrame(
        rows, columns=["Category", "Budget", "Spent", "Remaining", "Percent Used", "Status"]
    )
