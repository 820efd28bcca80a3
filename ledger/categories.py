from typing import Iterable, Optional, Tuple

from ledger.domain import CategoryBudget, Transaction
from ledger.functional import find_budget

FALLBACK_ICON = "questionmark.circle.fill"
FALLBACK_COLOR = "#808080"

# Presets applied to transactions created outside the app, e.g. via shortcuts.
PRESET_ICONS = {
    "Dining": "fork.knife",
    "Groceries": "cart.fill",
    "Transportation": "car.fill",
    "Shopping": "bag.fill",
    "Entertainment": "tv.fill",
    "Utilities": "bolt.fill",
    "Health": "heart.fill",
    "Salary": "dollarsign.circle.fill",
    "Freelance": "laptopcomputer",
}
PRESET_COLORS = {
    "Dining": "#FF6B6B",
    "Groceries": "#4ECDC4",
    "Transportation": "#45B7D1",
    "Shopping": "#FFA07A",
    "Entertainment": "#98D8C8",
    "Utilities": "#FFD93D",
    "Health": "#6BCF7F",
    "Salary": "#4CAF50",
    "Freelance": "#2196F3",
}
PRESET_FALLBACK_ICON = "dollarsign.circle"
PRESET_FALLBACK_COLOR = "#757575"


def resolve(transaction: Transaction, budgets: Iterable[CategoryBudget]) -> Tuple[str, str]:
    """Icon and color of the budget owning ``transaction``, or the fallback pair."""
    return (
        find_budget(budgets, transaction.subtitle)
        .map(lambda b: (b.icon, b.color_hex))
        .get_or_else((FALLBACK_ICON, FALLBACK_COLOR))
    )


def default_icon(category: Optional[str]) -> str:
    return PRESET_ICONS.get(category or "", PRESET_FALLBACK_ICON)


def default_color(category: Optional[str]) -> str:
    return PRESET_COLORS.get(category or "", PRESET_FALLBACK_COLOR)
