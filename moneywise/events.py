from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

__all__ = [
    'Event', 'EventBus', 'MUTATION_EVENTS',
    'TRANSACTION_ADDED', 'TRANSACTION_UPDATED', 'TRANSACTION_DELETED',
    'CATEGORY_ADDED', 'CATEGORY_UPDATED', 'CATEGORY_DELETED', 'DATA_IMPORTED',
]

TRANSACTION_ADDED = "TRANSACTION_ADDED"
TRANSACTION_UPDATED = "TRANSACTION_UPDATED"
TRANSACTION_DELETED = "TRANSACTION_DELETED"
CATEGORY_ADDED = "CATEGORY_ADDED"
CATEGORY_UPDATED = "CATEGORY_UPDATED"
CATEGORY_DELETED = "CATEGORY_DELETED"
DATA_IMPORTED = "DATA_IMPORTED"

MUTATION_EVENTS = (
    TRANSACTION_ADDED,
    TRANSACTION_UPDATED,
    TRANSACTION_DELETED,
    CATEGORY_ADDED,
    CATEGORY_UPDATED,
    CATEGORY_DELETED,
    DATA_IMPORTED,
)


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    """Synchronous in-process publish/subscribe; handlers run in subscription order."""

    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def subscribe_all(self, names, handler: Handler) -> None:
        for name in names:
            self.subscribe(name, handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = self._subscribers.get(name)
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in list(handlers)]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)
