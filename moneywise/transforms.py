from dataclasses import replace
from typing import Any, Dict, Tuple

from moneywise.domain import (
    EXPENSE,
    INCOME,
    TRANSACTION_FIELDS,
    Category,
    Transaction,
)


def add_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    # newest first
    return (t,) + trans


def update_transaction(
    trans: Tuple[Transaction, ...], tid: str, changes: Dict[str, Any]
) -> Tuple[Transaction, ...]:
    fields = _transaction_changes(changes)
    return tuple(replace(t, **fields) if t.id == tid else t for t in trans)


def delete_transaction(
    trans: Tuple[Transaction, ...], tid: str
) -> Tuple[Transaction, ...]:
    return tuple(t for t in trans if t.id != tid)


def add_category(
    cats: Tuple[Category, ...], c: Category
) -> Tuple[Category, ...]:
    return cats + (c,)


def update_category(
    cats: Tuple[Category, ...], cid: str, changes: Dict[str, Any]
) -> Tuple[Category, ...]:
    fields = {k: v for k, v in changes.items() if k != "id"}
    return tuple(replace(c, **fields) if c.id == cid else c for c in cats)


def delete_category(
    cats: Tuple[Category, ...], cid: str
) -> Tuple[Category, ...]:
    # transactions pointing at cid are left alone
    return tuple(c for c in cats if c.id != cid)


def _transaction_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Accept both python and wire (camelCase) field names; ``id`` is immutable."""
    out = {}
    for key, value in changes.items():
        if key == "id":
            continue
        out[TRANSACTION_FIELDS.get(key, key)] = value
    return out


def income_transactions(trans: Tuple[Transaction, ...]) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.type == INCOME, trans))


def expense_transactions(trans: Tuple[Transaction, ...]) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.type == EXPENSE, trans))


def total_amount(trans: Tuple[Transaction, ...]) -> float:
    return sum(t.amount for t in trans)
