from datetime import date

import plotly.graph_objects as go

from moneywise.aggregation import category_breakdown, monthly_trend
from moneywise.charts import category_donut, monthly_trend_chart
from moneywise.config import format_currency
from moneywise.domain import DEFAULT_CATEGORIES
from moneywise.icons import ICON_GLYPHS, ICON_NAMES, icon_glyph
from moneywise.periods import custom_range

from factories import make_tx


def test_every_default_category_icon_is_mapped():
    for cat in DEFAULT_CATEGORIES:
        assert cat.icon in ICON_GLYPHS


def test_unknown_icon_falls_back():
    assert icon_glyph("NoSuchIcon") == ICON_GLYPHS["Circle"]
    assert icon_glyph("Car") == "🚗"
    assert len(ICON_NAMES) == 20


def test_format_currency():
    assert format_currency(8000, "₹") == "₹8,000"
    assert format_currency(-1250.4, "$") == "-$1,250"


def test_category_donut_uses_category_colors():
    trans = (
        make_tx("t1", 300, "expense", "6", "2024-01-10"),
        make_tx("t2", 100, "expense", "5", "2024-01-11"),
    )
    slices = category_breakdown(trans, DEFAULT_CATEGORIES, custom_range(date(2024, 1, 1), date(2024, 1, 31)))
    fig = category_donut(slices)

    assert isinstance(fig, go.Figure)
    pie = fig.data[0]
    assert list(pie.labels) == ["Transport", "Food & Dining"]
    assert list(pie.marker.colors) == ["#3b82f6", "#ef4444"]


def test_monthly_trend_chart_has_both_series():
    trans = (
        make_tx("t1", 1000, "income", "1", "2024-01-05"),
        make_tx("t2", 300, "expense", "6", "2024-02-10"),
    )
    fig = monthly_trend_chart(monthly_trend(trans))
    assert sorted(trace.name for trace in fig.data) == ["expense", "income"]
