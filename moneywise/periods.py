"""Date handling: parsing stored dates, range presets and transaction predicates."""

import calendar
from datetime import date, datetime, time, timedelta
from typing import Callable, NamedTuple, Optional

from moneywise.domain import Category, Transaction

PERIODS = ("today", "week", "month", "year")
DEFAULT_PERIOD = "month"


class DateRange(NamedTuple):
    start: datetime
    end: datetime

    def __contains__(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def parse_date(value: str) -> datetime:
    """Parse a stored transaction date into a naive local datetime.

    Accepts plain ISO dates ("2024-01-05") and full ISO timestamps,
    including a trailing "Z".
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def transaction_moment(t: Transaction) -> Optional[datetime]:
    """The transaction's date, or None when the stored value cannot be read.

    Undated transactions fall outside every range and month.
    """
    try:
        return parse_date(t.date)
    except (TypeError, ValueError, AttributeError):
        return None


def _start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min)


def _end_of_day(d: date) -> datetime:
    return datetime.combine(d, time.max)


def period_range(period: str, now: Optional[datetime] = None) -> DateRange:
    """Concrete bounds for a preset, evaluated at ``now``.

    The end bound is always the end of the current day. Unknown names
    fall back to the current month.
    """
    now = now or datetime.now()
    end = _end_of_day(now.date())

    if period == "today":
        start = _start_of_day(now.date())
    elif period == "week":
        start = now - timedelta(days=7)
    elif period == "year":
        start = datetime(now.year, 1, 1)
    else:
        start = datetime(now.year, now.month, 1)

    return DateRange(start, end)


def custom_range(start: date, end: date) -> DateRange:
    return DateRange(_start_of_day(start), _end_of_day(end))


def calendar_month_range(now: Optional[datetime] = None) -> DateRange:
    """First to last day of the month containing ``now``."""
    now = now or datetime.now()
    last_day = calendar.monthrange(now.year, now.month)[1]
    return DateRange(
        datetime(now.year, now.month, 1),
        _end_of_day(date(now.year, now.month, last_day)),
    )


def month_key(t: Transaction) -> Optional[str]:
    moment = transaction_moment(t)
    return moment.strftime("%Y-%m") if moment else None


def by_category(cat_id: str):
    def _filter(t: Transaction) -> bool:
        return t.category_id == cat_id

    return _filter


def by_type(kind: str):
    def _filter(t: Transaction) -> bool:
        return kind == "all" or t.type == kind

    return _filter


def by_date_range(rng: DateRange) -> Callable[[Transaction], bool]:
    def _filter(t: Transaction) -> bool:
        moment = transaction_moment(t)
        return moment is not None and moment in rng

    return _filter


def since(moment: datetime) -> Callable[[Transaction], bool]:
    def _filter(t: Transaction) -> bool:
        when = transaction_moment(t)
        return when is not None and when >= moment

    return _filter


def by_search(text: str, cats: tuple[Category, ...]):
    """Case-insensitive match on note, category name or the amount digits."""
    needle = text.strip().lower()
    names = {c.id: c.name.lower() for c in cats}

    def _filter(t: Transaction) -> bool:
        if not needle:
            return True
        return (
            needle in t.note.lower()
            or needle in names.get(t.category_id, "")
            or needle in format_amount(t.amount)
        )

    return _filter


def format_amount(amount: float) -> str:
    """Render a number the way the stored documents show it: 1000, 12.5."""
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))
