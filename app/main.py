from __future__ import annotations

import argparse
from datetime import date, datetime
from typing import List, Optional, Sequence

from ledger.aggregates import format_currency
from ledger.calendar_grid import DayCell
from ledger.categories import resolve
from ledger.goals import goal_monthly_contribution, goal_percent
from ledger.log import get_logger
from ledger.recurring import monthly_commitments
from ledger.services import LedgerSession
from ledger.settings import Settings, get_settings
from ledger.stores import InMemoryBudgetStore, InMemoryTransactionStore
from ledger.transforms import load_seed

WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def parse_month(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM, got {value!r}") from None


def render_grid(cells: Sequence[Optional[DayCell]]) -> str:
    lines = ["  ".join(f"{d:>8}" for d in WEEKDAYS)]
    week: List[str] = []
    for cell in cells:
        if cell is None:
            week.append(" " * 8)
        elif not cell.tracked:
            week.append(f"{cell.date.day:>2} {'-':>5}")
        else:
            week.append(f"{cell.date.day:>2}{cell.net_amount:>+6.0f}")
        if len(week) == 7:
            lines.append("  ".join(week))
            week = []
    if week:
        lines.append("  ".join(week))
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None, settings: Optional[Settings] = None) -> int:
    settings = settings or get_settings()
    parser = argparse.ArgumentParser(description="Show a month report for one user.")
    parser.add_argument("--seed", default=settings.seed_path, help="Seed JSON file")
    parser.add_argument("--month", type=parse_month, default=date.today().replace(day=1),
                        help="Month to report, YYYY-MM (default: current month)")
    parser.add_argument("--user", default=None, help="User id (default: owner of the first transaction)")
    args = parser.parse_args(argv)

    logger = get_logger("ledger.report", settings.log_level)
    transactions, budgets, recurring, goals = load_seed(args.seed)
    user_id = args.user or next((t.user_id for t in transactions), None)
    if user_id is None:
        print(f"No transactions in {args.seed}")
        return 1
    logger.info("loaded %d transactions and %d budgets from %s", len(transactions), len(budgets), args.seed)

    transaction_store = InMemoryTransactionStore()
    budget_store = InMemoryBudgetStore()
    for t in transactions:
        transaction_store.add(t)
    for b in budgets:
        budget_store.add(b)

    with LedgerSession(user_id, transaction_store, budget_store, settings, month_start=args.month) as session:
        print(f"Report for {user_id}, {args.month:%B %Y}")
        print()
        for name, value in session.overview().items():
            print(f"  {name.replace('_', ' ').title():<16} {format_currency(value):>14}")

        print("\nBudgets:")
        if not session.budgets:
            print("  No budgets for this month")
        for budget, remaining in session.budgets_with_remaining():
            print(f"  {budget.category:<16} {format_currency(remaining):>12} of {format_currency(budget.total_amount)}")

        print("\nLatest transactions:")
        for t in session.transactions[:5]:
            icon, _ = resolve(t, session.budgets)
            print(f"  {t.date:%Y-%m-%d}  {t.title:<20} {format_currency(t.amount):>12}  [{icon}]")

        user_goals = [g for g in goals if g.user_id == user_id]
        if user_goals:
            print("\nSaving goals:")
            for g in user_goals:
                per_month = goal_monthly_contribution(g, args.month)
                print(f"  {g.name:<16} {goal_percent(g):>3}%  {format_currency(per_month)}/mo to target")

        user_recurring = [r for r in recurring if r.user_id == user_id]
        if user_recurring:
            print(f"\nRecurring commitments: {format_currency(monthly_commitments(user_recurring))}/mo")

        print()
        print(render_grid(session.month_grid()))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
