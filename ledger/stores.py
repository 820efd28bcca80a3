import asyncio
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import date, datetime
from typing import AsyncIterator, Callable, Dict, Generic, List, Optional, Tuple, TypeVar
from uuid import uuid4

from ledger.domain import CategoryBudget, RecurringTransaction, SavingGoal, Transaction
from ledger.errors import MissingIdError, MissingUserError, NotFoundError
from ledger.events import (
    BUDGETS_CHANGED,
    GOALS_CHANGED,
    RECURRING_CHANGED,
    TRANSACTIONS_CHANGED,
    Event,
    EventBus,
    topic,
)
from ledger.log import get_logger

logger = get_logger(__name__)

R = TypeVar('R')
Snapshot = Tuple[R, ...]

_CLOSED = object()


class Subscription(Generic[R]):
    """Live view over one user's records.

    Nothing is delivered until ``start()``; the current snapshot is then
    delivered at once and again after every write, until ``stop()``.
    """

    def __init__(
        self,
        bus: EventBus,
        name: str,
        fetch: Callable[[], Snapshot],
        on_snapshot: Optional[Callable[[Snapshot], None]] = None,
    ):
        self._bus = bus
        self._name = name
        self._fetch = fetch
        self._callbacks: List[Callable[[Snapshot], None]] = [on_snapshot] if on_snapshot else []
        self._queues: List[asyncio.Queue] = []
        self.latest: Optional[Snapshot] = None
        self.active = False

    def start(self) -> "Subscription[R]":
        if not self.active:
            self._bus.subscribe(self._name, self._handle)
            self.active = True
            self._deliver(self._fetch())
        return self

    def stop(self) -> None:
        if not self.active:
            return
        self._bus.unsubscribe(self._name, self._handle)
        self.active = False
        for queue in self._queues:
            queue.put_nowait(_CLOSED)

    def add_listener(self, callback: Callable[[Snapshot], None]) -> None:
        self._callbacks.append(callback)
        if self.latest is not None:
            callback(self.latest)

    def snapshots(self) -> AsyncIterator[Snapshot]:
        """Async iterator over snapshots, starting with the latest one; ends on ``stop()``."""
        queue: asyncio.Queue = asyncio.Queue()
        if self.latest is not None:
            queue.put_nowait(self.latest)
        if not self.active:
            queue.put_nowait(_CLOSED)
        self._queues.append(queue)
        return self._drain(queue)

    async def _drain(self, queue: asyncio.Queue) -> AsyncIterator[Snapshot]:
        try:
            while True:
                item = await queue.get()
                if item is _CLOSED:
                    return
                yield item
        finally:
            if queue in self._queues:
                self._queues.remove(queue)

    def _handle(self, event: Event, payload: dict) -> None:
        self._deliver(self._fetch())

    def _deliver(self, snapshot: Snapshot) -> None:
        self.latest = snapshot
        for callback in self._callbacks:
            callback(snapshot)
        for queue in self._queues:
            queue.put_nowait(snapshot)


class TransactionStore(ABC):

    @abstractmethod
    def subscribe(self, user_id: str) -> Subscription[Transaction]:
        pass

    @abstractmethod
    def add(self, transaction: Transaction) -> Transaction:
        pass

    @abstractmethod
    def update(self, transaction: Transaction) -> Transaction:
        pass

    @abstractmethod
    def delete(self, user_id: str, transaction_id: str) -> None:
        pass


class BudgetStore(ABC):

    @abstractmethod
    def subscribe(self, user_id: str, month_start_date: date) -> Subscription[CategoryBudget]:
        pass

    @abstractmethod
    def add(self, budget: CategoryBudget) -> CategoryBudget:
        pass

    @abstractmethod
    def update(self, budget: CategoryBudget) -> CategoryBudget:
        pass

    @abstractmethod
    def delete(self, user_id: str, budget_id: str) -> None:
        pass


class _InMemoryCollection(Generic[R]):
    collection = ""
    event_name = ""

    def __init__(self, bus: Optional[EventBus] = None):
        self.bus = bus or EventBus()
        self._records: Dict[str, Dict[str, R]] = {}

    def _order(self, records: List[R]) -> List[R]:
        return sorted(records, key=lambda r: r.created_at)

    def _snapshot(self, user_id: str, pred: Callable[[R], bool] = lambda r: True) -> Snapshot:
        records = [r for r in self._records.get(user_id, {}).values() if pred(r)]
        return tuple(self._order(records))

    def _subscribe(self, user_id: str, pred: Callable[[R], bool] = lambda r: True) -> Subscription[R]:
        return Subscription(
            self.bus,
            topic(self.event_name, user_id),
            lambda: self._snapshot(user_id, pred),
        )

    def _notify(self, user_id: str) -> None:
        self.bus.publish(topic(self.event_name, user_id), {"user_id": user_id})

    def add(self, record: R) -> R:
        if not record.user_id:
            raise MissingUserError(f"cannot add {self.collection} record without a user id")
        stored = replace(record, id=record.id or uuid4().hex, created_at=datetime.now())
        self._records.setdefault(stored.user_id, {})[stored.id] = stored
        logger.debug("added %s %s for user %s", self.collection, stored.id, stored.user_id)
        self._notify(stored.user_id)
        return stored

    def update(self, record: R) -> R:
        if not record.id:
            raise MissingIdError(f"cannot update {self.collection} record without an id")
        user_records = self._records.get(record.user_id, {})
        if record.id not in user_records:
            raise NotFoundError(self.collection, record.id)
        user_records[record.id] = record
        logger.debug("updated %s %s for user %s", self.collection, record.id, record.user_id)
        self._notify(record.user_id)
        return record

    def delete(self, user_id: str, record_id: str) -> None:
        user_records = self._records.get(user_id, {})
        if record_id not in user_records:
            raise NotFoundError(self.collection, record_id)
        del user_records[record_id]
        logger.debug("deleted %s %s for user %s", self.collection, record_id, user_id)
        self._notify(user_id)


class InMemoryTransactionStore(_InMemoryCollection[Transaction], TransactionStore):
    collection = "transactions"
    event_name = TRANSACTIONS_CHANGED

    def _order(self, records):
        return sorted(records, key=lambda t: t.date, reverse=True)

    def subscribe(self, user_id: str) -> Subscription[Transaction]:
        return self._subscribe(user_id)


class InMemoryBudgetStore(_InMemoryCollection[CategoryBudget], BudgetStore):
    collection = "budgets"
    event_name = BUDGETS_CHANGED

    def _order(self, records):
        return sorted(records, key=lambda b: b.category)

    def subscribe(self, user_id: str, month_start_date: date) -> Subscription[CategoryBudget]:
        return self._subscribe(user_id, lambda b: b.month_start_date == month_start_date)


class InMemoryRecurringStore(_InMemoryCollection[RecurringTransaction]):
    collection = "recurring"
    event_name = RECURRING_CHANGED

    def subscribe(self, user_id: str) -> Subscription[RecurringTransaction]:
        return self._subscribe(user_id)


class InMemoryGoalStore(_InMemoryCollection[SavingGoal]):
    collection = "goals"
    event_name = GOALS_CHANGED

    def subscribe(self, user_id: str) -> Subscription[SavingGoal]:
        return self._subscribe(user_id)
