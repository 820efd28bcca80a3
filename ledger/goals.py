from datetime import date

from ledger.domain import SavingGoal


def goal_remaining(goal: SavingGoal) -> float:
    return max(goal.target_amount - goal.current_amount, 0.0)


def months_until(target: date, today: date) -> int:
    return (target.year - today.year) * 12 + (target.month - today.month)


def goal_monthly_contribution(goal: SavingGoal, today: date) -> float:
    """Amount to set aside each month to hit the target by its date.

    Whole months only; a target in the current month or in the past needs
    everything that is left right away.
    """
    remaining = goal_remaining(goal)
    months = months_until(goal.target_date, today)
    if months <= 0:
        return remaining
    return remaining / months


def goal_percent(goal: SavingGoal) -> int:
    # Truncated like the progress label shown next to each goal.
    return int(goal.progress * 100)
