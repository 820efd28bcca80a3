from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

EXPENSE = "expense"
INCOME = "income"

FREQUENCIES = ("Weekly", "Bi-Weekly", "Monthly", "Yearly")


@dataclass(frozen=True)
class Transaction:
    id: str
    title: str
    subtitle: Optional[str]  # category label, join key to CategoryBudget.category
    amount: float            # + for income, - for expense
    date: datetime
    icon: str
    color_hex: str
    type: str                # "expense" or "income"
    user_id: str
    created_at: datetime
    note: Optional[str] = None


# A budget for one category in one calendar month
@dataclass(frozen=True)
class CategoryBudget:
    id: str
    category: str
    total_amount: float
    icon: str
    color_hex: str
    frequency: str
    user_id: str
    month_start_date: date
    created_at: datetime
    type: str = EXPENSE


@dataclass(frozen=True)
class RecurringTransaction:
    id: str
    name: str
    amount: float
    frequency: str
    start_date: date
    icon: str
    color_hex: str
    user_id: str
    created_at: datetime
    note: Optional[str] = None


@dataclass(frozen=True)
class SavingGoal:
    id: str
    name: str
    target_amount: float
    current_amount: float
    target_date: date
    icon: str
    color_hex: str
    user_id: str
    created_at: datetime

    @property
    def progress(self) -> float:
        if self.target_amount <= 0:
            return 0.0
        return self.current_amount / self.target_amount

