from math import fsum
from typing import Callable, Iterable, NamedTuple, Optional, Tuple

from ledger.aggregates import matches_category, same_month
from ledger.domain import EXPENSE, INCOME, Transaction

Predicate = Callable[[Transaction], bool]

TYPE_FILTERS = {"All": None, "Income": INCOME, "Expense": EXPENSE}
SORT_KEYS = ("date", "amount", "category")


class TransactionStats(NamedTuple):
    count: int
    total: float
    average: float


def by_month(month) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return same_month(t.date, month)

    return _filter


def by_category(label: Optional[str]) -> Predicate:
    # None selects every category
    def _filter(t: Transaction) -> bool:
        return label is None or matches_category(t.subtitle, label)

    return _filter


def by_type(selected: str) -> Predicate:
    if selected not in TYPE_FILTERS:
        raise ValueError(f"unknown type filter {selected!r}; expected one of {sorted(TYPE_FILTERS)}")
    wanted = TYPE_FILTERS[selected]

    def _filter(t: Transaction) -> bool:
        return wanted is None or t.type == wanted

    return _filter


def by_search(text: str) -> Predicate:
    needle = text.casefold()

    def _filter(t: Transaction) -> bool:
        if not needle:
            return True
        return needle in t.title.casefold() or needle in (t.note or "").casefold()

    return _filter


def filter_transactions(
    trans: Iterable[Transaction], *predicates: Predicate
) -> Tuple[Transaction, ...]:
    return tuple(t for t in trans if all(p(t) for p in predicates))


def sort_transactions(
    trans: Iterable[Transaction], sort_by: str = "date", ascending: bool = False
) -> Tuple[Transaction, ...]:
    """Sort for listing; newest or largest first unless ``ascending``."""
    if sort_by == "amount":
        key = lambda t: abs(t.amount)
    elif sort_by == "category":
        key = lambda t: t.subtitle or ""
    elif sort_by == "date":
        key = lambda t: t.date
    else:
        raise ValueError(f"unknown sort key {sort_by!r}; expected one of {SORT_KEYS}")
    return tuple(sorted(trans, key=key, reverse=not ascending))


def transaction_stats(trans: Iterable[Transaction]) -> TransactionStats:
    amounts = [t.amount for t in trans]
    total = fsum(amounts)
    average = total / len(amounts) if amounts else 0.0
    return TransactionStats(count=len(amounts), total=total, average=average)
