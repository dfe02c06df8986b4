from collections import defaultdict
from functools import lru_cache
from typing import Dict, Iterable, Iterator, List, NamedTuple, Tuple

import pandas as pd

from moneywise.domain import EXPENSE, INCOME, Category, Transaction
from moneywise.functional import safe_category
from moneywise.periods import (
    DateRange,
    by_date_range,
    by_search,
    by_type,
    month_key,
    transaction_moment,
)

UNKNOWN_NAME = "Unknown"
UNKNOWN_COLOR = "#64748b"
BREAKDOWN_LIMIT = 6


class BalanceSummary(NamedTuple):
    income: float
    expense: float
    balance: float


class BreakdownSlice(NamedTuple):
    category_id: str
    name: str
    color: str
    value: float
    percentage: float  # share of the returned slices, not of all spending


def in_range(trans: Iterable[Transaction], rng: DateRange) -> Tuple[Transaction, ...]:
    return tuple(filter(by_date_range(rng), trans))


def summarize(trans: Iterable[Transaction], rng: DateRange) -> BalanceSummary:
    income = 0
    expense = 0
    for t in in_range(trans, rng):
        if t.type == INCOME:
            income += t.amount
        elif t.type == EXPENSE:
            expense += t.amount
    return BalanceSummary(income, expense, income - expense)


def category_name(cats: Iterable[Category], cat_id: str) -> str:
    return safe_category(cats, cat_id).map(lambda c: c.name).get_or_else(UNKNOWN_NAME)


def category_breakdown(
    trans: Iterable[Transaction],
    cats: Tuple[Category, ...],
    rng: DateRange,
    limit: int = BREAKDOWN_LIMIT,
) -> Tuple[BreakdownSlice, ...]:
    totals: Dict[str, float] = defaultdict(int)
    for t in in_range(trans, rng):
        if t.type == EXPENSE:
            totals[t.category_id] += t.amount

    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)[: max(0, limit)]
    shown_total = sum(value for _, value in ordered)

    slices = []
    for cat_id, value in ordered:
        cat = safe_category(cats, cat_id)
        slices.append(BreakdownSlice(
            category_id=cat_id,
            name=cat.map(lambda c: c.name).get_or_else(UNKNOWN_NAME),
            color=cat.map(lambda c: c.color).get_or_else(UNKNOWN_COLOR),
            value=value,
            percentage=(value / shown_total * 100) if shown_total else 0.0,
        ))
    return tuple(slices)


def iter_transactions(trans: Iterable[Transaction], pred) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def lazy_top_categories(
    trans: Iterable[Transaction], cats: Tuple[Category, ...], k: int
) -> Iterator[Tuple[str, float]]:
    """All-time expense totals per category, largest first, ``k`` at most."""
    totals: Dict[str, float] = defaultdict(int)
    for t in iter_transactions(trans, lambda t: t.type == EXPENSE):
        totals[t.category_id] += t.amount

    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    for cat_id, total in ordered[: max(0, k)]:
        yield category_name(cats, cat_id), total


@lru_cache(maxsize=32)
def monthly_expense_totals(trans: Tuple[Transaction, ...]) -> Dict[str, float]:
    """Expense sum per ``YYYY-MM`` for every month that has expenses.

    Cached on the transaction tuple; callers must not mutate the result.
    """
    monthly: Dict[str, float] = defaultdict(int)
    for t in trans:
        key = month_key(t)
        if t.type == EXPENSE and key:
            monthly[key] += t.amount
    return dict(sorted(monthly.items()))


def monthly_trend(trans: Iterable[Transaction]) -> pd.DataFrame:
    rows = [
        {"month": month_key(t), "type": t.type, "amount": t.amount}
        for t in trans
        if t.type in (INCOME, EXPENSE) and month_key(t)
    ]
    if not rows:
        return pd.DataFrame(columns=["month", INCOME, EXPENSE])

    df = pd.DataFrame(rows)
    pivot = df.pivot_table(index="month", columns="type", values="amount", aggfunc="sum", fill_value=0)
    pivot = pivot.reindex(columns=[INCOME, EXPENSE], fill_value=0)
    return pivot.sort_index().reset_index().rename_axis(None, axis=1)


def transaction_view(
    trans: Iterable[Transaction],
    cats: Tuple[Category, ...],
    rng: DateRange,
    type_filter: str = "all",
    search: str = "",
) -> List[Transaction]:
    """Transactions shown in the list: in range, filtered, newest date first."""
    matched = filter(by_search(search, cats), filter(by_type(type_filter), in_range(trans, rng)))
    return sorted(matched, key=transaction_moment, reverse=True)


def group_by_day(trans: Iterable[Transaction]) -> Dict[str, List[Transaction]]:
    groups: Dict[str, List[Transaction]] = {}
    for t in trans:
        moment = transaction_moment(t)
        if moment is None:
            continue
        groups.setdefault(moment.date().isoformat(), []).append(t)
    return groups
