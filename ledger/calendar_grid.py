from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from math import fsum
from typing import Iterable, Iterator, Optional, Tuple

from ledger.aggregates import as_date, days_in_month
from ledger.domain import Transaction


@dataclass(frozen=True)
class DayCell:
    date: date
    net_amount: float
    tracked: bool = True


def first_of_month(anchor) -> date:
    return date(anchor.year, anchor.month, 1)


def shift_month(anchor, months: int) -> date:
    """First day of the month ``months`` away from ``anchor``."""
    index = anchor.year * 12 + (anchor.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def leading_blanks(anchor) -> int:
    # date.weekday() is Monday=0; shift so Sunday=0.
    return (first_of_month(anchor).weekday() + 1) % 7


def iter_month_days(anchor) -> Iterator[date]:
    first = first_of_month(anchor)
    for day in range(1, days_in_month(first) + 1):
        yield first.replace(day=day)


def net_by_day(transactions: Iterable[Transaction], anchor) -> dict[date, float]:
    totals: dict[date, list[float]] = defaultdict(list)
    for t in transactions:
        d = as_date(t.date)
        if d.year == anchor.year and d.month == anchor.month:
            totals[d].append(t.amount)
    return {d: fsum(amounts) for d, amounts in totals.items()}


def build_month_grid(
    anchor,
    transactions: Iterable[Transaction],
    tracked_since: Optional[date] = None,
) -> Tuple[Optional[DayCell], ...]:
    """Grid cells for the month containing ``anchor``.

    Blanks are ``None``. Days before ``tracked_since`` keep their date but
    are flagged ``tracked=False`` with a zero amount.
    """
    since = as_date(tracked_since) if tracked_since is not None else None
    totals = net_by_day(transactions, anchor)

    cells: list[Optional[DayCell]] = [None] * leading_blanks(anchor)
    for day in iter_month_days(anchor):
        if since is not None and day < since:
            cells.append(DayCell(date=day, net_amount=0.0, tracked=False))
        else:
            cells.append(DayCell(date=day, net_amount=totals.get(day, 0.0)))
    return tuple(cells)
