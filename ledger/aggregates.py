import calendar
from datetime import date, datetime
from math import fsum
from typing import Iterable, NamedTuple, Tuple

from ledger.domain import EXPENSE, INCOME, CategoryBudget, Transaction


class DailyBalance(NamedTuple):
    balance: float
    is_over_budget: bool


class MonthlySummary(NamedTuple):
    saved: float
    overspent: float


class BudgetUsage(NamedTuple):
    spent: float
    remaining: float
    fraction_used: float


def as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def same_month(a, b) -> bool:
    return a.year == b.year and a.month == b.month


def same_day(a, b) -> bool:
    return as_date(a) == as_date(b)


def matches_category(label, category: str) -> bool:
    """Case-insensitive comparison of a transaction label against a budget category."""
    if label is None:
        return False
    return label.casefold() == category.casefold()


def spent_in_category(budget: CategoryBudget, transactions: Iterable[Transaction]) -> float:
    return fsum(
        abs(t.amount)
        for t in transactions
        if t.type == EXPENSE and matches_category(t.subtitle, budget.category)
    )


def remaining_budget(budget: CategoryBudget, transactions: Iterable[Transaction]) -> float:
    return budget.total_amount - spent_in_category(budget, transactions)


def budget_usage(budget: CategoryBudget, transactions: Iterable[Transaction]) -> BudgetUsage:
    spent = spent_in_category(budget, transactions)
    fraction = spent / budget.total_amount if budget.total_amount > 0 else 0.0
    return BudgetUsage(spent=spent, remaining=budget.total_amount - spent, fraction_used=fraction)


def monthly_income(transactions: Iterable[Transaction], month) -> float:
    return fsum(
        t.amount for t in transactions if t.type == INCOME and same_month(t.date, month)
    )


def monthly_expense(transactions: Iterable[Transaction]) -> float:
    # All-time, not month scoped, unlike monthly_income.
    return fsum(abs(t.amount) for t in transactions if t.type == EXPENSE)


def net_cash_flow(transactions: Iterable[Transaction], month) -> float:
    return fsum(t.amount for t in transactions if same_month(t.date, month))


def days_in_month(month) -> int:
    return calendar.monthrange(month.year, month.month)[1]


def daily_budget_share(income: float, month) -> float:
    return income / days_in_month(month)


def net_on(day, transactions: Iterable[Transaction]) -> float:
    return fsum(t.amount for t in transactions if same_day(t.date, day))


def daily_balance(day, share: float, transactions: Iterable[Transaction]) -> DailyBalance:
    """A day's budget share minus the signed sum of that day's transactions.

    Income counts against the share and expenses add to it, so a payday
    reads as over budget.
    """
    balance = share - net_on(day, transactions)
    return DailyBalance(balance=balance, is_over_budget=balance < 0)


def monthly_summary(month, income: float, transactions: Tuple[Transaction, ...]) -> MonthlySummary:
    """Split a month's daily balances into total saved and total overspent."""
    share = daily_budget_share(income, month)
    saved = []
    overspent = []
    for day_number in range(1, days_in_month(month) + 1):
        status = daily_balance(date(month.year, month.month, day_number), share, transactions)
        if status.balance >= 0:
            saved.append(status.balance)
        else:
            overspent.append(-status.balance)
    return MonthlySummary(saved=fsum(saved), overspent=fsum(overspent))


def total_balance(transactions: Iterable[Transaction], initial_balance: float = 0.0) -> float:
    return initial_balance + fsum(t.amount for t in transactions)


def total_budget(budgets: Iterable[CategoryBudget]) -> float:
    return fsum(b.total_amount for b in budgets)


def total_spent(transactions: Iterable[Transaction]) -> float:
    return fsum(abs(t.amount) for t in transactions if t.amount < 0)


def income_left(transactions: Iterable[Transaction], planned_income: float, month) -> float:
    """Planned monthly income minus the month's expenses."""
    return planned_income - fsum(
        abs(t.amount) for t in transactions if t.type == EXPENSE and same_month(t.date, month)
    )


def format_currency(amount: float, symbol: str = "$") -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
