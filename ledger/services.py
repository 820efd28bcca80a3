from datetime import date
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple

from ledger import aggregates
from ledger.calendar_grid import DayCell, build_month_grid, first_of_month
from ledger.domain import EXPENSE, CategoryBudget, Transaction
from ledger.functional import validate_transaction
from ledger.log import get_logger
from ledger.settings import Settings
from ledger.stores import BudgetStore, Subscription, TransactionStore

logger = get_logger(__name__)


class BudgetService:
    """Facade for month reports built from injected validators and calculators.

    validators: functions taking (month, transactions, budgets) -> Sequence[str]
    calculators: functions taking (month, transactions, budgets, acc) -> dict (partial results)
    """

    def __init__(
        self,
        validators: Sequence[Callable[..., Sequence[str]]],
        calculators: Sequence[Callable[..., Dict[str, Any]]],
    ):
        self.validators = validators
        self.calculators = calculators

    def monthly_report(
        self, month: date, transactions: Iterable[Transaction], budgets: Iterable[CategoryBudget]
    ) -> Dict[str, Any]:
        """Run validators and calculators and return an aggregated report with intermediate steps."""
        transactions = tuple(transactions)
        budgets = tuple(budgets)
        report = {
            "month": month.strftime("%Y-%m"),
            "validation": [],
            "steps": [],
            "result": {},
        }

        for v in self.validators:
            msgs = v(month, transactions, budgets)
            report["validation"].append({"validator": getattr(v, "__name__", str(v)), "messages": list(msgs)})

        # calculators run in order and see everything computed before them
        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(month, transactions, budgets, acc)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            if isinstance(out, dict):
                acc.update(out)

        report["result"] = acc
        return report


def invalid_transactions(month, transactions, budgets) -> Sequence[str]:
    return [
        result.get_error()["message"]
        for result in map(validate_transaction, transactions)
        if result.is_left()
    ]


def unbudgeted_categories(month, transactions, budgets) -> Sequence[str]:
    known = {b.category.casefold() for b in budgets}
    labels = sorted({
        t.subtitle for t in transactions
        if t.type == EXPENSE and t.subtitle and aggregates.same_month(t.date, month)
    })
    return [f"No budget for category {label}" for label in labels if label.casefold() not in known]


def income_and_cash_flow(month, transactions, budgets, acc) -> Dict[str, Any]:
    return {
        "monthly_income": aggregates.monthly_income(transactions, month),
        "net_cash_flow": aggregates.net_cash_flow(transactions, month),
    }


def all_time_expense(month, transactions, budgets, acc) -> Dict[str, Any]:
    return {"monthly_expense": aggregates.monthly_expense(transactions)}


def remaining_budgets(month, transactions, budgets, acc) -> Dict[str, Any]:
    return {
        "remaining": {b.category: aggregates.remaining_budget(b, transactions) for b in budgets},
        "total_budget": aggregates.total_budget(budgets),
    }


def saved_and_overspent(planned_income: float) -> Callable[..., Dict[str, Any]]:
    # daily shares come from planned income, not the income recorded so far
    def saved_and_overspent(month, transactions, budgets, acc) -> Dict[str, Any]:
        summary = aggregates.monthly_summary(month, planned_income, transactions)
        return {"saved": summary.saved, "overspent": summary.overspent}

    return saved_and_overspent


def default_budget_service(planned_income: float = 5000.0) -> BudgetService:
    return BudgetService(
        validators=[invalid_transactions, unbudgeted_categories],
        calculators=[
            income_and_cash_flow,
            all_time_expense,
            remaining_budgets,
            saved_and_overspent(planned_income),
        ],
    )


class LedgerSession:
    """One user's live view of their ledger.

    Stores are injected; the session subscribes on ``start()`` and keeps the
    latest snapshots. Figures are recomputed from those snapshots on every
    call; until a store delivers, its list is empty.
    """

    def __init__(
        self,
        user_id: str,
        transaction_store: TransactionStore,
        budget_store: BudgetStore,
        settings: Settings,
        month_start: Optional[date] = None,
        tracked_since: Optional[date] = None,
    ):
        self.user_id = user_id
        self.transaction_store = transaction_store
        self.budget_store = budget_store
        self.settings = settings
        self.month_start = first_of_month(month_start or date.today())
        self.tracked_since = tracked_since
        self._transactions: Optional[Subscription[Transaction]] = None
        self._budgets: Optional[Subscription[CategoryBudget]] = None

    def start(self) -> "LedgerSession":
        if self._transactions is None:
            self._transactions = self.transaction_store.subscribe(self.user_id).start()
            self._budgets = self.budget_store.subscribe(self.user_id, self.month_start).start()
            logger.info("session started for user %s (budgets for %s)", self.user_id, self.month_start)
        return self

    def stop(self) -> None:
        if self._transactions is None:
            return
        self._transactions.stop()
        self._budgets.stop()
        self._transactions = None
        self._budgets = None
        logger.info("session stopped for user %s", self.user_id)

    def __enter__(self) -> "LedgerSession":
        return self.start()

    def __exit__(self, *exc) -> None:
        self.stop()

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        if self._transactions is None or self._transactions.latest is None:
            return ()
        return self._transactions.latest

    @property
    def budgets(self) -> Tuple[CategoryBudget, ...]:
        if self._budgets is None or self._budgets.latest is None:
            return ()
        return self._budgets.latest

    def overview(self, month: Optional[date] = None) -> Dict[str, float]:
        month = month or self.month_start
        transactions = self.transactions
        return {
            "total_balance": aggregates.total_balance(transactions, self.settings.initial_balance),
            "monthly_income": aggregates.monthly_income(transactions, month),
            "monthly_expense": aggregates.monthly_expense(transactions),
            "net_cash_flow": aggregates.net_cash_flow(transactions, month),
            "income_left": aggregates.income_left(transactions, self.settings.monthly_income, month),
            "total_budget": aggregates.total_budget(self.budgets),
        }

    def budgets_with_remaining(self) -> Tuple[Tuple[CategoryBudget, float], ...]:
        transactions = self.transactions
        return tuple((b, aggregates.remaining_budget(b, transactions)) for b in self.budgets)

    def month_grid(self, anchor: Optional[date] = None) -> Tuple[Optional[DayCell], ...]:
        return build_month_grid(anchor or self.month_start, self.transactions, self.tracked_since)

    def daily_balance(self, day: date) -> aggregates.DailyBalance:
        share = aggregates.daily_budget_share(self.settings.monthly_income, day)
        return aggregates.daily_balance(day, share, self.transactions)

    def monthly_report(self, month: Optional[date] = None, service: Optional[BudgetService] = None) -> Dict[str, Any]:
        service = service or default_budget_service(self.settings.monthly_income)
        return service.monthly_report(month or self.month_start, self.transactions, self.budgets)
