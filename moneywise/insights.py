"""Budget and spending insights derived from the transaction history.

Every function here is read-only over the collections it is given and
takes an optional ``now`` so results can be pinned in tests.
"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, NamedTuple, Optional, Tuple

from moneywise.aggregation import in_range, monthly_expense_totals
from moneywise.domain import EXPENSE, Category, Transaction
from moneywise.periods import calendar_month_range, since
from moneywise.transforms import expense_transactions, income_transactions, total_amount

WARNING_THRESHOLD = 75
EMERGENCY_MONTHS = 3
UNUSUAL_FACTOR = 2
UNUSUAL_WINDOW_DAYS = 7
MAX_ALERTS = 3

WEEK_MS = 7 * 24 * 60 * 60 * 1000


class BudgetWarning(NamedTuple):
    category: Category
    spent: float
    percentage: float          # uncapped
    display_percentage: float  # capped at 100 for progress bars
    over_budget: bool


class EmergencyFund(NamedTuple):
    target: float
    current: float
    progress: float
    avg_monthly: float
    remaining: float


class SavingTip(NamedTuple):
    tip: str
    savings: int


class SpendingAlert(NamedTuple):
    transaction: Transaction
    category: Category
    avg_amount: float
    deviation: float  # amount as a percentage of the category mean


class FinancialInsights(NamedTuple):
    budget_warnings: Tuple[BudgetWarning, ...]
    emergency_fund: Optional[EmergencyFund]
    weekly_tip: SavingTip
    unusual_spending: Tuple[SpendingAlert, ...]


WEEKLY_TIPS: Tuple[SavingTip, ...] = (
    SavingTip("Skip 2 takeout meals this week", 400),
    SavingTip("Use public transport twice instead of cab", 300),
    SavingTip("Make coffee at home for a week", 500),
    SavingTip("Cancel one unused subscription", 200),
    SavingTip("Pack lunch for 3 days this week", 450),
    SavingTip("Avoid impulse purchases for 7 days", 600),
    SavingTip("Use coupons for your next grocery run", 250),
    SavingTip("Walk for short distances instead of rides", 150),
)


def budget_warnings(
    trans: Tuple[Transaction, ...],
    cats: Tuple[Category, ...],
    now: Optional[datetime] = None,
) -> Tuple[BudgetWarning, ...]:
    """Expense categories at or above 75% of their budget this calendar month.

    The window is always the whole current month, independent of the
    period picked in the UI.
    """
    month = in_range(trans, calendar_month_range(now))
    warnings: List[BudgetWarning] = []

    for cat in cats:
        if cat.type != EXPENSE or not cat.budget:
            continue
        spent = sum(t.amount for t in month if t.category_id == cat.id and t.type == EXPENSE)
        percentage = spent / cat.budget * 100
        if percentage >= WARNING_THRESHOLD:
            warnings.append(BudgetWarning(
                category=cat,
                spent=spent,
                percentage=percentage,
                display_percentage=min(percentage, 100),
                over_budget=percentage >= 100,
            ))

    return tuple(sorted(warnings, key=lambda w: w.percentage, reverse=True))


def emergency_fund(trans: Tuple[Transaction, ...]) -> Optional[EmergencyFund]:
    """Three months of average spending as a savings target.

    Only months with at least one expense count towards the average.
    Returns None when there is no expense history at all.
    """
    trans = tuple(trans)
    months = monthly_expense_totals(trans)
    if not months:
        return None

    avg_monthly = sum(months.values()) / len(months)
    target = avg_monthly * EMERGENCY_MONTHS

    current = max(0, total_amount(income_transactions(trans)) - total_amount(expense_transactions(trans)))

    progress = min(current / target * 100, 100) if target > 0 else 0
    return EmergencyFund(
        target=target,
        current=current,
        progress=progress,
        avg_monthly=avg_monthly,
        remaining=max(0, target - current),
    )


def weekly_tip(now: Optional[datetime] = None) -> SavingTip:
    now = now or datetime.now()
    week_number = int(now.timestamp() * 1000) // WEEK_MS
    return WEEKLY_TIPS[week_number % len(WEEKLY_TIPS)]


def unusual_spending(
    trans: Tuple[Transaction, ...],
    cats: Tuple[Category, ...],
    now: Optional[datetime] = None,
) -> Tuple[SpendingAlert, ...]:
    """Recent expenses more than twice their category's average amount."""
    now = now or datetime.now()
    recent = since(now - timedelta(days=UNUSUAL_WINDOW_DAYS))

    by_category: Dict[str, List[Transaction]] = defaultdict(list)
    for t in trans:
        if t.type == EXPENSE:
            by_category[t.category_id].append(t)

    alerts: List[SpendingAlert] = []
    for cat in cats:
        if cat.type != EXPENSE:
            continue
        history = by_category.get(cat.id, [])
        if len(history) < 2:
            continue

        avg = sum(t.amount for t in history) / len(history)
        threshold = avg * UNUSUAL_FACTOR
        for t in history:
            if recent(t) and t.amount > threshold:
                alerts.append(SpendingAlert(t, cat, avg, t.amount / avg * 100))

    alerts.sort(key=lambda a: a.deviation, reverse=True)
    return tuple(alerts[:MAX_ALERTS])


def has_signal(insights: FinancialInsights) -> bool:
    return bool(
        insights.budget_warnings
        or insights.emergency_fund is not None
        or insights.unusual_spending
    )


def should_show_insights(insights: FinancialInsights, trans: Tuple[Transaction, ...]) -> bool:
    # the weekly tip alone is enough once any history exists
    return has_signal(insights) or len(trans) > 0
