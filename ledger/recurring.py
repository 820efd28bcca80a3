from math import fsum
from typing import Iterable

from ledger.domain import RecurringTransaction

# Occurrences per month for each template frequency.
PER_MONTH = {
    "Weekly": 52 / 12,
    "Bi-Weekly": 26 / 12,
    "Monthly": 1.0,
    "Yearly": 1 / 12,
}


def monthly_equivalent(template: RecurringTransaction) -> float:
    """The template's amount normalized to one month.

    Templates are never applied to the ledger; this is for planning only.
    """
    try:
        factor = PER_MONTH[template.frequency]
    except KeyError:
        raise ValueError(
            f"unknown frequency {template.frequency!r}; expected one of {sorted(PER_MONTH)}"
        ) from None
    return template.amount * factor


def monthly_commitments(templates: Iterable[RecurringTransaction]) -> float:
    return fsum(monthly_equivalent(t) for t in templates)
