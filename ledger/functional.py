from abc import ABC, abstractmethod
from typing import Callable, Generic, Iterable, Optional, TypeVar

from ledger.domain import EXPENSE, INCOME, CategoryBudget, Transaction

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> Maybe[U]:
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> Maybe[U]:
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"


class Either(Generic[E, T], ABC):

    @abstractmethod
    def is_left(self) -> bool:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass

    def is_right(self) -> bool:
        return not self.is_left()


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def is_left(self) -> bool:
        return False

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def is_left(self) -> bool:
        return True

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"


def find_budget(budgets: Iterable[CategoryBudget], label: Optional[str]) -> Maybe[CategoryBudget]:
    """First budget whose category equals ``label``, ignoring case."""
    if label is None:
        return Nothing()
    wanted = label.casefold()
    for b in budgets:
        if b.category.casefold() == wanted:
            return Some(b)
    return Nothing()


def validate_transaction(t: Transaction) -> Either[dict, Transaction]:
    if not t.user_id:
        return Left({
            "error": "missing_user",
            "message": f"Transaction {t.id} has no owning user",
        })

    if t.type not in (EXPENSE, INCOME):
        return Left({
            "error": "unknown_type",
            "message": f"Transaction type {t.type!r} is not 'expense' or 'income'",
            "type": t.type,
        })

    if t.type == INCOME and t.amount < 0:
        return Left({
            "error": "sign_mismatch",
            "message": f"Income transaction {t.title} cannot have negative amount",
            "type": t.type,
            "amount": t.amount,
        })
    elif t.type == EXPENSE and t.amount > 0:
        return Left({
            "error": "sign_mismatch",
            "message": f"Expense transaction {t.title} cannot have positive amount",
            "type": t.type,
            "amount": t.amount,
        })

    return Right(t)
