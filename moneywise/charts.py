from typing import Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from moneywise.aggregation import BreakdownSlice
from moneywise.domain import EXPENSE, INCOME


def category_donut(slices: Sequence[BreakdownSlice], template: str = "plotly_dark") -> go.Figure:
    """Expense breakdown as a donut, one slice per category in its own color."""
    fig = go.Figure(go.Pie(
        labels=[s.name for s in slices],
        values=[s.value for s in slices],
        marker=dict(colors=[s.color for s in slices]),
        hole=0.6,
        sort=False,
        textinfo="percent",
    ))
    fig.update_layout(template=template, margin=dict(t=10, b=10, l=10, r=10), showlegend=True)
    return fig


def monthly_trend_chart(trend: pd.DataFrame, template: str = "plotly_dark") -> go.Figure:
    long = trend.melt(id_vars="month", value_vars=[INCOME, EXPENSE], var_name="type", value_name="amount")
    fig = px.line(
        long,
        x="month",
        y="amount",
        color="type",
        markers=True,
        color_discrete_map={INCOME: "#10b981", EXPENSE: "#ef4444"},
        template=template,
    )
    fig.update_layout(margin=dict(t=30, b=10, l=10, r=10), legend_title_text="")
    return fig
