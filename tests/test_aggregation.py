from datetime import date, datetime

from moneywise.aggregation import (
    UNKNOWN_COLOR,
    UNKNOWN_NAME,
    category_breakdown,
    group_by_day,
    lazy_top_categories,
    monthly_expense_totals,
    monthly_trend,
    summarize,
    transaction_view,
)
from moneywise.domain import DEFAULT_CATEGORIES
from moneywise.periods import PERIODS, custom_range, period_range

from factories import make_cat, make_tx

JANUARY = custom_range(date(2024, 1, 1), date(2024, 1, 31))


def test_january_scenario():
    trans = (
        make_tx("t1", 1000, "income", "1", "2024-01-05"),
        make_tx("t2", 300, "expense", "6", "2024-01-10"),
    )
    summary = summarize(trans, JANUARY)
    assert summary.balance == 700
    assert summary.income == 1000
    assert summary.expense == 300


def test_summary_ignores_out_of_range():
    trans = (
        make_tx("t1", 1000, "income", "1", "2024-01-05"),
        make_tx("t2", 300, "expense", "6", "2024-02-10"),
        make_tx("t3", 50, "expense", "6", "2023-12-31"),
    )
    assert summarize(trans, JANUARY) == (1000, 0, 1000)


def test_balance_equals_income_minus_expense_for_every_preset():
    now = datetime(2024, 6, 15, 9, 0)
    trans = (
        make_tx("a", 500, "income", "1", "2024-06-15"),
        make_tx("b", 120, "expense", "5", "2024-06-14"),
        make_tx("c", 80, "expense", "6", "2024-06-01"),
        make_tx("d", 2000, "income", "2", "2024-02-01"),
        make_tx("e", 40, "expense", "7", "2023-12-01"),
    )
    for preset in PERIODS:
        s = summarize(trans, period_range(preset, now))
        assert s.balance == s.income - s.expense


def test_breakdown_groups_sorts_and_resolves():
    cats = DEFAULT_CATEGORIES
    trans = (
        make_tx("t1", 100, "expense", "5", "2024-01-02"),
        make_tx("t2", 300, "expense", "6", "2024-01-03"),
        make_tx("t3", 100, "expense", "5", "2024-01-04"),
        make_tx("t4", 5000, "income", "1", "2024-01-04"),
    )
    slices = category_breakdown(trans, cats, JANUARY)

    assert [s.category_id for s in slices] == ["6", "5"]
    assert slices[0].name == "Transport"
    assert slices[0].color == "#3b82f6"
    assert slices[0].value == 300
    assert slices[0].percentage == 60
    assert slices[1].percentage == 40


def test_breakdown_unknown_category_fallback():
    slices = category_breakdown((make_tx("t1", 10, "expense", "gone", "2024-01-02"),), (), JANUARY)
    assert slices[0].name == UNKNOWN_NAME
    assert slices[0].color == UNKNOWN_COLOR


def test_breakdown_truncates_to_six_and_uses_shown_total():
    cats = tuple(make_cat(str(i), f"C{i}") for i in range(8))
    trans = tuple(
        make_tx(f"t{i}", (i + 1) * 10, "expense", str(i), "2024-01-10")
        for i in range(8)
    )
    slices = category_breakdown(trans, cats, JANUARY)

    assert len(slices) == 6
    assert [s.value for s in slices] == [80, 70, 60, 50, 40, 30]
    shown_total = sum(s.value for s in slices)
    assert slices[0].percentage == 80 / shown_total * 100
    assert abs(sum(s.percentage for s in slices) - 100) < 1e-9


def test_breakdown_empty():
    assert category_breakdown((), DEFAULT_CATEGORIES, JANUARY) == ()


def test_lazy_top_categories_order_and_limit():
    cats = (make_cat("c1", "Food"), make_cat("c2", "Transport"), make_cat("c3", "Salary", type="income"))
    trans = (
        make_tx("t1", 300, "expense", "c1", "2025-01-01"),
        make_tx("t2", 200, "expense", "c2", "2025-01-02"),
        make_tx("t3", 5000, "income", "c3", "2025-01-03"),
        make_tx("t4", 700, "expense", "c1", "2025-01-04"),
        make_tx("t5", 100, "expense", "missing", "2025-01-05"),
    )
    assert list(lazy_top_categories(trans, cats, 2)) == [("Food", 1000), ("Transport", 200)]
    assert list(lazy_top_categories(trans, cats, 5))[-1] == (UNKNOWN_NAME, 100)
    assert list(lazy_top_categories(trans, cats, 0)) == []


def test_monthly_expense_totals():
    trans = (
        make_tx("t1", 100, "expense", "5", "2024-01-02"),
        make_tx("t2", 200, "expense", "6", "2024-01-15"),
        make_tx("t3", 50, "expense", "5", "2024-02-05"),
        make_tx("t4", 300, "income", "1", "2024-01-20"),
    )
    assert monthly_expense_totals(trans) == {"2024-01": 300, "2024-02": 50}


def test_monthly_trend_frame():
    trans = (
        make_tx("t1", 1000, "income", "1", "2024-01-05"),
        make_tx("t2", 300, "expense", "6", "2024-01-10"),
        make_tx("t3", 50, "expense", "6", "2024-02-10"),
    )
    df = monthly_trend(trans)
    assert list(df.columns) == ["month", "income", "expense"]
    assert df["month"].tolist() == ["2024-01", "2024-02"]
    assert df["income"].tolist() == [1000, 0]
    assert df["expense"].tolist() == [300, 50]


def test_monthly_views_skip_unreadable_dates():
    trans = (
        make_tx("t1", 100, "expense", "5", "2024-01-02"),
        make_tx("t2", 999, "expense", "5", "not a date"),
        make_tx("t3", 500, "income", "1", None),
    )
    assert monthly_expense_totals(trans) == {"2024-01": 100}

    df = monthly_trend(trans)
    assert df["month"].tolist() == ["2024-01"]
    assert df["income"].tolist() == [0]
    assert df["expense"].tolist() == [100]

    assert list(group_by_day(trans)) == ["2024-01-02"]
    assert summarize(trans, period_range("year", datetime(2024, 6, 1))).income == 0


def test_monthly_trend_empty():
    assert monthly_trend(()).empty


def test_transaction_view_filters_and_sorts():
    cats = DEFAULT_CATEGORIES
    trans = (
        make_tx("t1", 40, "expense", "5", "2024-01-03", "Coffee"),
        make_tx("t2", 1000, "income", "1", "2024-01-10"),
        make_tx("t3", 60, "expense", "6", "2024-01-07", "Bus"),
        make_tx("t4", 70, "expense", "6", "2023-12-30", "Old"),
    )
    assert [t.id for t in transaction_view(trans, cats, JANUARY)] == ["t2", "t3", "t1"]
    assert [t.id for t in transaction_view(trans, cats, JANUARY, "expense")] == ["t3", "t1"]
    assert [t.id for t in transaction_view(trans, cats, JANUARY, search="transport")] == ["t3"]


def test_group_by_day_keeps_order():
    trans = [
        make_tx("t1", 1, "expense", "5", "2024-01-10"),
        make_tx("t2", 2, "expense", "5", "2024-01-10T18:00:00"),
        make_tx("t3", 3, "expense", "5", "2024-01-09"),
    ]
    groups = group_by_day(trans)
    assert list(groups) == ["2024-01-10", "2024-01-09"]
    assert [t.id for t in groups["2024-01-10"]] == ["t1", "t2"]
