from datetime import date, datetime

import pytest

from ledger.domain import CategoryBudget, SavingGoal, Transaction
from ledger.errors import MissingIdError, MissingUserError, NotFoundError, StoreError
from ledger.events import EventBus
from ledger.stores import InMemoryBudgetStore, InMemoryGoalStore, InMemoryTransactionStore


def make_tx(id, amount, when, user_id="u1"):
    ts = datetime.fromisoformat(when)
    return Transaction(
        id=id, title=id, subtitle="Food", amount=amount, date=ts, icon="", color_hex="",
        type="income" if amount > 0 else "expense", user_id=user_id, created_at=ts,
    )


def make_budget(id, category, month, user_id="u1"):
    return CategoryBudget(
        id=id, category=category, total_amount=100, icon="", color_hex="", frequency="Monthly",
        user_id=user_id, month_start_date=month, created_at=datetime(2025, 1, 1),
    )


def test_subscription_delivers_full_snapshots():
    store = InMemoryTransactionStore()
    received = []
    sub = store.subscribe("u1")
    sub.add_listener(received.append)
    assert received == []

    sub.start()
    assert received == [()]

    store.add(make_tx("t1", -5.0, "2025-09-01T10:00:00"))
    store.add(make_tx("t2", -7.0, "2025-09-03T10:00:00"))
    assert [len(s) for s in received] == [0, 1, 2]
    # newest first
    assert [t.id for t in sub.latest] == ["t2", "t1"]


def test_stop_ends_delivery():
    store = InMemoryTransactionStore()
    received = []
    sub = store.subscribe("u1")
    sub.add_listener(received.append)
    sub.start()
    sub.stop()
    sub.stop()
    store.add(make_tx("t1", -5.0, "2025-09-01T10:00:00"))
    assert received == [()]
    assert not sub.active


def test_users_are_isolated():
    store = InMemoryTransactionStore()
    mine = store.subscribe("u1").start()
    theirs = store.subscribe("u2").start()
    store.add(make_tx("t1", -5.0, "2025-09-01T10:00:00", user_id="u2"))
    assert mine.latest == ()
    assert len(theirs.latest) == 1


def test_add_assigns_id_and_creation_time():
    store = InMemoryTransactionStore()
    stored = store.add(make_tx("", -5.0, "2020-01-01T10:00:00"))
    assert stored.id
    assert stored.created_at.year >= 2025


def test_update_and_delete():
    store = InMemoryTransactionStore()
    sub = store.subscribe("u1").start()
    stored = store.add(make_tx("t1", -5.0, "2025-09-01T10:00:00"))

    store.update(make_tx(stored.id, -50.0, "2025-09-01T10:00:00"))
    assert sub.latest[0].amount == -50.0

    store.delete("u1", stored.id)
    assert sub.latest == ()


def test_store_errors():
    store = InMemoryTransactionStore()
    with pytest.raises(MissingUserError):
        store.add(make_tx("t1", -5.0, "2025-09-01T10:00:00", user_id=""))
    with pytest.raises(MissingIdError):
        store.update(make_tx("", -5.0, "2025-09-01T10:00:00"))
    with pytest.raises(NotFoundError) as excinfo:
        store.update(make_tx("ghost", -5.0, "2025-09-01T10:00:00"))
    assert excinfo.value.record_id == "ghost"
    with pytest.raises(StoreError):
        store.delete("u1", "ghost")


def test_budget_subscription_is_scoped_to_month():
    store = InMemoryBudgetStore()
    september = store.subscribe("u1", date(2025, 9, 1)).start()
    store.add(make_budget("b1", "Groceries", date(2025, 9, 1)))
    store.add(make_budget("b2", "Dining", date(2025, 9, 1)))
    store.add(make_budget("b3", "Dining", date(2025, 8, 1)))
    assert [b.category for b in september.latest] == ["Dining", "Groceries"]


def test_stores_can_share_a_bus():
    bus = EventBus()
    transactions = InMemoryTransactionStore(bus)
    goals = InMemoryGoalStore(bus)
    tx_sub = transactions.subscribe("u1").start()
    goal_sub = goals.subscribe("u1").start()
    goals.add(SavingGoal(
        id="g1", name="Trip", target_amount=1000, current_amount=100, target_date=date(2026, 1, 1),
        icon="", color_hex="", user_id="u1", created_at=datetime(2025, 1, 1),
    ))
    assert tx_sub.latest == ()
    assert goal_sub.latest[0].progress == 0.1


@pytest.mark.asyncio
async def test_snapshots_async_iterator():
    store = InMemoryTransactionStore()
    sub = store.subscribe("u1").start()
    stream = sub.snapshots()
    store.add(make_tx("t1", -5.0, "2025-09-01T10:00:00"))
    store.add(make_tx("t2", 8.0, "2025-09-02T10:00:00"))
    sub.stop()

    received = [snapshot async for snapshot in stream]
    assert [len(s) for s in received] == [0, 1, 2]


@pytest.mark.asyncio
async def test_snapshots_of_stopped_subscription_ends_immediately():
    sub = InMemoryTransactionStore().subscribe("u1")
    received = [snapshot async for snapshot in sub.snapshots()]
    assert received == []


def test_recurring_store_orders_by_creation():
    from ledger.domain import RecurringTransaction
    from ledger.stores import InMemoryRecurringStore

    store = InMemoryRecurringStore()
    sub = store.subscribe("u1").start()
    for name in ("Rent", "Gym"):
        store.add(RecurringTransaction(
            id="", name=name, amount=10.0, frequency="Monthly", start_date=date(2025, 1, 1),
            icon="", color_hex="", user_id="u1", created_at=datetime(2025, 1, 1),
        ))
    assert [r.name for r in sub.latest] == ["Rent", "Gym"]
