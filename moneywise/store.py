"""The finance store: sole owner of the persisted aggregate.

All mutations go through :class:`FinanceStore`. Each one replaces the
in-memory tuples, publishes an event and the store's own subscriber
writes the whole document back to storage.
"""

import logging
from datetime import date
from typing import Optional, Tuple
from uuid import uuid4

from moneywise import transforms
from moneywise.config import STORAGE_KEY
from moneywise.domain import Category, FinanceData, Transaction, default_finance_data
from moneywise.events import (
    CATEGORY_ADDED,
    CATEGORY_DELETED,
    CATEGORY_UPDATED,
    DATA_IMPORTED,
    MUTATION_EVENTS,
    TRANSACTION_ADDED,
    TRANSACTION_DELETED,
    TRANSACTION_UPDATED,
    Event,
    EventBus,
)
from moneywise.functional import Either, Maybe, safe_category
from moneywise.serialization import (
    backup_filename,
    csv_filename,
    dump_json,
    parse_finance_data,
    to_csv,
)
from moneywise.storage import StorageBackend

logger = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid4())


class FinanceStore:

    def __init__(self, storage: StorageBackend, key: str = STORAGE_KEY, bus: Optional[EventBus] = None):
        self.storage = storage
        self.key = key
        self.bus = bus or EventBus()
        self.data = default_finance_data()
        self.bus.subscribe_all(MUTATION_EVENTS, self._persist_handler)

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self.data.transactions

    @property
    def categories(self) -> Tuple[Category, ...]:
        return self.data.categories

    def load(self) -> FinanceData:
        """Read the persisted document, falling back to defaults on any problem."""
        try:
            text = self.storage.get(self.key)
        except (OSError, UnicodeDecodeError):
            logger.warning("Could not read %r from storage, starting with defaults", self.key, exc_info=True)
            text = None

        if text is None:
            logger.info("No stored data under %r, starting with defaults", self.key)
            self.data = default_finance_data()
            return self.data

        parsed = parse_finance_data(text)
        if parsed.is_left():
            logger.warning("Stored data unusable (%s), starting with defaults", parsed.get_error()["error"])
        self.data = parsed.get_or_else(default_finance_data())
        logger.info(
            "Loaded %d transactions and %d categories",
            len(self.data.transactions), len(self.data.categories),
        )
        return self.data

    def save(self) -> None:
        try:
            self.storage.set(self.key, dump_json(self.data))
        except OSError:
            logger.exception("Failed to persist finance data under %r", self.key)

    def _persist_handler(self, event: Event, payload: dict) -> dict:
        self.save()
        return {"saved": event.name}

    def _commit(self, data: FinanceData, event_name: str, payload: dict) -> None:
        self.data = data
        self.bus.publish(event_name, payload)

    # transactions

    def add_transaction(
        self,
        amount: float,
        type: str,
        category_id: str,
        note: str = "",
        date: Optional[str] = None,
        is_recurring: Optional[bool] = None,
        recurring_frequency: Optional[str] = None,
        next_due_date: Optional[str] = None,
    ) -> Transaction:
        t = Transaction(
            id=new_id(),
            amount=amount,
            type=type,
            category_id=category_id,
            note=note,
            date=date or _today(),
            is_recurring=is_recurring,
            recurring_frequency=recurring_frequency,
            next_due_date=next_due_date,
        )
        self._commit(
            FinanceData(transforms.add_transaction(self.data.transactions, t), self.data.categories),
            TRANSACTION_ADDED,
            {"id": t.id, "amount": t.amount, "type": t.type, "category_id": t.category_id},
        )
        return t

    def update_transaction(self, tid: str, **changes) -> None:
        if not any(t.id == tid for t in self.data.transactions):
            return
        self._commit(
            FinanceData(transforms.update_transaction(self.data.transactions, tid, changes), self.data.categories),
            TRANSACTION_UPDATED,
            {"id": tid, "fields": sorted(changes)},
        )

    def delete_transaction(self, tid: str) -> None:
        if not any(t.id == tid for t in self.data.transactions):
            return
        self._commit(
            FinanceData(transforms.delete_transaction(self.data.transactions, tid), self.data.categories),
            TRANSACTION_DELETED,
            {"id": tid},
        )

    # categories

    def add_category(
        self,
        name: str,
        color: str,
        icon: str,
        type: str,
        budget: Optional[float] = None,
    ) -> Category:
        c = Category(id=new_id(), name=name, color=color, icon=icon, type=type, budget=budget)
        self._commit(
            FinanceData(self.data.transactions, transforms.add_category(self.data.categories, c)),
            CATEGORY_ADDED,
            {"id": c.id, "name": c.name},
        )
        return c

    def update_category(self, cid: str, **changes) -> None:
        if not any(c.id == cid for c in self.data.categories):
            return
        self._commit(
            FinanceData(self.data.transactions, transforms.update_category(self.data.categories, cid, changes)),
            CATEGORY_UPDATED,
            {"id": cid, "fields": sorted(changes)},
        )

    def delete_category(self, cid: str) -> None:
        if not any(c.id == cid for c in self.data.categories):
            return
        self._commit(
            FinanceData(self.data.transactions, transforms.delete_category(self.data.categories, cid)),
            CATEGORY_DELETED,
            {"id": cid},
        )

    def find_category(self, cid: str) -> Maybe[Category]:
        return safe_category(self.data.categories, cid)

    # import / export

    def import_json(self, text: str) -> Either[dict, FinanceData]:
        """Replace the whole aggregate with a backup document.

        On failure the current data is left untouched and the Left is returned.
        """
        result = parse_finance_data(text)
        if result.is_right():
            data = result.get_or_else(self.data)
            self._commit(
                data,
                DATA_IMPORTED,
                {"transactions": len(data.transactions), "categories": len(data.categories)},
            )
            logger.info("Imported %d transactions and %d categories", len(data.transactions), len(data.categories))
        return result

    def export_json(self) -> str:
        return dump_json(self.data)

    def export_csv(self) -> str:
        return to_csv(self.data)

    def backup_filename(self, today: Optional[date] = None) -> str:
        return backup_filename(today)

    def csv_filename(self, today: Optional[date] = None) -> str:
        return csv_filename(today)


def _today() -> str:
    return date.today().isoformat()
