from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

__all__ = [
    'EventBus', 'Event', 'topic',
    'TRANSACTIONS_CHANGED', 'BUDGETS_CHANGED', 'RECURRING_CHANGED', 'GOALS_CHANGED',
]

TRANSACTIONS_CHANGED = "TRANSACTIONS_CHANGED"
BUDGETS_CHANGED = "BUDGETS_CHANGED"
RECURRING_CHANGED = "RECURRING_CHANGED"
GOALS_CHANGED = "GOALS_CHANGED"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], object]


def topic(name: str, user_id: str, scope: str = "") -> str:
    """Per-user event name, optionally narrowed by a scope such as a month."""
    parts = [name, user_id] + ([scope] if scope else [])
    return ":".join(parts)


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[object]:
        handlers = list(self._subscribers.get(name, ()))
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in handlers]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(name)
        if handlers and handler in handlers:
            handlers.remove(handler)
            if not handlers:
                del self._subscribers[name]

    def subscriber_count(self, name: str) -> int:
        return len(self._subscribers.get(name, ()))
