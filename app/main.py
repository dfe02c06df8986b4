import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date, datetime

from dotenv import load_dotenv

load_dotenv()

import pandas as pd
import plotly.express as px
import streamlit as st

from moneywise.aggregation import (
    category_breakdown,
    category_name,
    group_by_day,
    in_range,
    lazy_top_categories,
    monthly_trend,
    summarize,
    transaction_view,
)
from moneywise.charts import category_donut, monthly_trend_chart
from moneywise.config import DATA_DIR, configure_logging, ensure_data_directories, format_currency
from moneywise.domain import EXPENSE, INCOME, QUICK_AMOUNTS, RECURRING_FREQUENCIES
from moneywise.functional import Right, check_budget, validate_entry
from moneywise.icons import ICON_NAMES, icon_glyph
from moneywise.insights import should_show_insights
from moneywise.periods import DEFAULT_PERIOD, PERIODS, calendar_month_range, custom_range, period_range, transaction_moment
from moneywise.serialization import decode_backup
from moneywise.services import InsightService
from moneywise.storage import JsonFileStorage
from moneywise.store import FinanceStore

configure_logging()

st.set_page_config(page_title="MoneyWise", page_icon="💰", layout="wide")


if "store" not in st.session_state:
    ensure_data_directories()
    store = FinanceStore(JsonFileStorage(DATA_DIR))
    store.load()
    st.session_state.store = store

store: FinanceStore = st.session_state.store

if "period" not in st.session_state:
    st.session_state.period = DEFAULT_PERIOD
if "edit_id" not in st.session_state:
    st.session_state.edit_id = None
if "flash" not in st.session_state:
    st.session_state.flash = None

if st.session_state.flash:
    st.toast(st.session_state.flash)
    st.session_state.flash = None


def flash(message: str) -> None:
    st.session_state.flash = message


def category_label(cat) -> str:
    return f"{icon_glyph(cat.icon)} {cat.name}"


def transaction_row(t) -> str:
    name = category_name(store.categories, t.category_id)
    cat = store.find_category(t.category_id).get_or_else(None)
    glyph = icon_glyph(cat.icon if cat else "")
    sign = "+" if t.type == INCOME else "-"
    note = t.note or "No note"
    recurring = f" 🔁 {t.recurring_frequency}" if t.is_recurring else ""
    return f"{glyph} **{name}** · {note}{recurring} · {sign}{format_currency(t.amount)}"


def day_label(key: str) -> str:
    d = date.fromisoformat(key)
    today = date.today()
    if d == today:
        return "Today"
    if (today - d).days == 1:
        return "Yesterday"
    return d.strftime("%d %b")


st.sidebar.markdown("## 💰 MoneyWise")
menu = st.sidebar.radio(
    "Menu",
    ["🏠 Overview", "🧾 Transactions", "🗂 Categories", "💾 Backup", "📊 Analytics"],
)

period_labels = {"today": "Today", "week": "Week", "month": "Month", "year": "Year", "custom": "Custom"}
st.session_state.period = st.sidebar.radio(
    "Period",
    list(PERIODS) + ["custom"],
    index=(list(PERIODS) + ["custom"]).index(st.session_state.period),
    format_func=lambda p: period_labels[p],
    horizontal=True,
)
if st.session_state.period == "custom":
    today = date.today()
    picked = st.sidebar.date_input("Range", value=(today.replace(day=1), today))
    if isinstance(picked, tuple) and len(picked) == 2:
        date_range = custom_range(picked[0], picked[1])
    else:
        date_range = period_range(DEFAULT_PERIOD)
else:
    date_range = period_range(st.session_state.period)


if menu == "🏠 Overview":
    st.title("🏠 Overview")

    summary = summarize(store.transactions, date_range)
    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Balance", format_currency(summary.balance))
    with k2:
        st.metric("Income", format_currency(summary.income))
    with k3:
        st.metric("Expenses", format_currency(summary.expense))

    insights = InsightService().financial_insights(store.transactions, store.categories)
    if should_show_insights(insights, store.transactions):
        st.header("💡 Financial Insights")

        if insights.budget_warnings:
            with st.container(border=True):
                st.subheader("⚠️ Budget Alerts")
                for w in insights.budget_warnings:
                    badge = "🔴 over budget" if w.over_budget else f"{round(w.percentage)}%"
                    st.write(
                        f"**{w.category.name}** · {format_currency(w.spent)} / "
                        f"{format_currency(w.category.budget)} · {badge}"
                    )
                    st.progress(w.display_percentage / 100)

        fund = insights.emergency_fund
        if fund is not None:
            with st.container(border=True):
                st.subheader("🛡️ Emergency Fund Goal")
                st.write(f"Target (3× monthly expenses): **{format_currency(fund.target)}**")
                st.progress(fund.progress / 100)
                st.caption(f"Current: {format_currency(fund.current)} · {round(fund.progress)}% achieved")
                if fund.progress < 100:
                    st.caption(f"💡 You need {format_currency(fund.remaining)} more to reach your goal.")
                else:
                    st.caption("✨ Great job! You've built a solid emergency fund.")

        with st.container(border=True):
            st.subheader("📈 Weekly Saving Tip")
            st.write(insights.weekly_tip.tip)
            st.caption(f"Potential savings: {format_currency(insights.weekly_tip.savings)}/week")

        if insights.unusual_spending:
            with st.container(border=True):
                st.subheader("🚨 Unusual Spending Detected")
                for alert in insights.unusual_spending:
                    t = alert.transaction
                    st.write(
                        f"**{alert.category.name}** · {t.note or 'No note'} · "
                        f"{transaction_moment(t).strftime('%d %b')} · {format_currency(t.amount)} "
                        f"(avg {format_currency(alert.avg_amount)})"
                    )

    st.header("🍩 Expense Breakdown")
    slices = category_breakdown(store.transactions, store.categories, date_range)
    if slices:
        col_chart, col_legend = st.columns([2, 3])
        with col_chart:
            st.plotly_chart(category_donut(slices), use_container_width=True)
        with col_legend:
            for s in slices[:4]:
                st.markdown(
                    f"<span style='color:{s.color}'>●</span> {s.name} · **{round(s.percentage)}%**",
                    unsafe_allow_html=True,
                )
    else:
        st.info("No expenses yet")

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")

    editing = None
    if st.session_state.edit_id:
        editing = next((t for t in store.transactions if t.id == st.session_state.edit_id), None)

    st.subheader("✏️ Edit Transaction" if editing else "➕ Add Transaction")

    kind = st.radio(
        "Type",
        [EXPENSE, INCOME],
        index=[EXPENSE, INCOME].index(editing.type) if editing and editing.type in (EXPENSE, INCOME) else 0,
        format_func=str.capitalize,
        horizontal=True,
        key=f"entry_type_{st.session_state.edit_id}",
    )
    amount_key = f"entry_amount_{st.session_state.edit_id}"
    if amount_key not in st.session_state:
        st.session_state[amount_key] = str(editing.amount) if editing else ""

    def set_amount(value):
        st.session_state[amount_key] = str(value)

    amount_text = st.text_input("Amount", key=amount_key)
    quick_cols = st.columns(len(QUICK_AMOUNTS))
    for col, amt in zip(quick_cols, QUICK_AMOUNTS):
        col.button(str(amt), key=f"quick_{amt}", on_click=set_amount, args=(amt,))

    options = [c for c in store.categories if c.type == kind]
    current_idx = None
    if editing:
        current_idx = next((i for i, c in enumerate(options) if c.id == editing.category_id), None)
    picked_cat = st.selectbox(
        "Category",
        options,
        index=current_idx,
        format_func=category_label,
        placeholder="Select a category",
        key=f"entry_cat_{st.session_state.edit_id}_{kind}",
    )
    entry_date = st.date_input(
        "Date",
        value=(transaction_moment(editing) or datetime.now()).date() if editing else date.today(),
        key=f"entry_date_{st.session_state.edit_id}",
    )
    note = st.text_input("Note", value=editing.note if editing else "", key=f"entry_note_{st.session_state.edit_id}")
    recurring = st.checkbox(
        "Recurring",
        value=bool(editing.is_recurring) if editing else False,
        key=f"entry_rec_{st.session_state.edit_id}",
    )
    frequency = None
    if recurring:
        frequency = st.selectbox(
            "Frequency",
            RECURRING_FREQUENCIES,
            index=RECURRING_FREQUENCIES.index(editing.recurring_frequency)
            if editing and editing.recurring_frequency in RECURRING_FREQUENCIES else 2,
            key=f"entry_freq_{st.session_state.edit_id}",
        )

    check = validate_entry(amount_text, picked_cat.id if picked_cat else None)
    if check.is_left() and amount_text:
        st.caption(check.get_error()["message"])

    save_col, cancel_col = st.columns([1, 5])
    if save_col.button("Save" if editing else "Add", type="primary", disabled=check.is_left()):
        fields = dict(
            amount=check.get_or_else(0.0),
            type=kind,
            category_id=picked_cat.id,
            note=note,
            date=entry_date.isoformat(),
            is_recurring=recurring or None,
            recurring_frequency=frequency,
        )
        if editing:
            store.update_transaction(editing.id, **fields)
            flash("Transaction updated!")
        else:
            store.add_transaction(**fields)
            flash("Transaction added!")
        st.session_state.pop(amount_key, None)
        st.session_state.edit_id = None
        st.rerun()
    if editing and cancel_col.button("Cancel"):
        st.session_state.edit_id = None
        st.rerun()

    st.divider()

    search = st.text_input("🔍 Search transactions")
    type_filter = st.radio("Show", ["all", INCOME, EXPENSE], format_func=str.capitalize, horizontal=True)
    shown = transaction_view(store.transactions, store.categories, date_range, type_filter, search)

    if not shown:
        st.info("No transactions found")
    for day, txns in group_by_day(shown).items():
        st.markdown(f"**{day_label(day)}**")
        for t in txns:
            row, edit_col, del_col = st.columns([8, 1, 1])
            row.markdown(transaction_row(t))
            if edit_col.button("✏️", key=f"edit_{t.id}"):
                st.session_state.edit_id = t.id
                st.rerun()
            if del_col.button("🗑️", key=f"del_{t.id}"):
                st.session_state.confirm_delete = t.id

    pending = st.session_state.get("confirm_delete")
    if pending:
        st.warning("Delete this transaction? This action cannot be undone.")
        yes, no = st.columns([1, 5])
        if yes.button("Delete", type="primary"):
            store.delete_transaction(pending)
            st.session_state.confirm_delete = None
            flash("Transaction deleted")
            st.rerun()
        if no.button("Keep"):
            st.session_state.confirm_delete = None
            st.rerun()

elif menu == "🗂 Categories":
    st.title("🗂 Categories")

    month_trans = in_range(store.transactions, calendar_month_range())
    rows = []
    for c in store.categories:
        status = check_budget(c, month_trans)
        rows.append({
            "Icon": icon_glyph(c.icon),
            "Name": c.name,
            "Type": c.type,
            "Budget": format_currency(c.budget) if c.budget else "-",
            "Status": "🔴 exceeded" if status.is_left() else "✅",
        })
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

    st.subheader("➕ Add Category")
    with st.form("category_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Name")
            ctype = st.selectbox("Type", [EXPENSE, INCOME])
            budget = st.number_input("Monthly budget (0 for none)", min_value=0.0, step=500.0)
        with col2:
            color = st.color_picker("Color", "#64748b")
            icon = st.selectbox("Icon", ICON_NAMES, format_func=lambda n: f"{icon_glyph(n)} {n}")
        if st.form_submit_button("Add Category") and name.strip():
            store.add_category(
                name=name.strip(),
                color=color,
                icon=icon,
                type=ctype,
                budget=budget if ctype == EXPENSE and budget > 0 else None,
            )
            flash("Category added!")
            st.rerun()

    st.subheader("🛠 Edit or Delete")
    if store.categories:
        cat = st.selectbox("Category", store.categories, format_func=category_label)
        with st.form(f"edit_category_{cat.id}"):
            new_name = st.text_input("Name", value=cat.name)
            new_budget = st.number_input(
                "Monthly budget (0 for none)", min_value=0.0, value=float(cat.budget or 0), step=500.0
            )
            if st.form_submit_button("Save"):
                store.update_category(
                    cat.id,
                    name=new_name.strip() or cat.name,
                    budget=new_budget if cat.type == EXPENSE and new_budget > 0 else None,
                )
                flash("Category updated!")
                st.rerun()
        if st.button("Delete category", key=f"del_cat_{cat.id}"):
            store.delete_category(cat.id)
            flash(f"Deleted {cat.name}; its transactions now show as Unknown")
            st.rerun()

elif menu == "💾 Backup":
    st.title("💾 Backup & Restore")

    col_json, col_csv = st.columns(2)
    with col_json:
        st.download_button(
            "⬇ Download JSON backup",
            store.export_json(),
            file_name=store.backup_filename(),
            mime="application/json",
        )
    with col_csv:
        st.download_button(
            "⬇ Export CSV",
            store.export_csv(),
            file_name=store.csv_filename(),
            mime="text/csv",
        )

    with st.expander("Copy raw data"):
        st.code(store.export_json(), language="json")

    st.subheader("Restore Backup")
    st.caption("Restoring replaces all current transactions and categories.")
    uploaded = st.file_uploader("Backup file", type=["json"])
    pasted = st.text_area("…or paste backup JSON", height=200)
    if st.button("Restore", type="primary", disabled=not (uploaded or pasted.strip())):
        text = decode_backup(uploaded.getvalue()) if uploaded else Right(pasted)
        result = text.bind(store.import_json)
        if result.is_right():
            flash("Data restored!")
            st.rerun()
        else:
            st.error(f"Import failed: invalid backup file format ({result.get_error()['message']})")

elif menu == "📊 Analytics":
    st.title("📊 Analytics")

    st.subheader("Income vs expenses by month")
    trend = monthly_trend(store.transactions)
    if trend.empty:
        st.info("No transactions yet")
    else:
        st.plotly_chart(monthly_trend_chart(trend), use_container_width=True)
        st.table(trend)

    st.divider()

    st.subheader("Top expense categories (all time)")
    k = st.number_input("Show top-K categories:", min_value=1, max_value=20, value=5)
    top_cats = list(lazy_top_categories(store.transactions, store.categories, k))
    if top_cats:
        df_top = pd.DataFrame([{"Category": n, "Amount": v} for n, v in top_cats])
        fig_top = px.bar(df_top, x="Category", y="Amount", template="plotly_dark")
        st.plotly_chart(fig_top, use_container_width=True)
    else:
        st.info("No data to analyze")

    st.divider()

    with st.expander("Insight derivation steps"):
        rpt = InsightService().report(store.transactions, store.categories, datetime.now())
        for step in rpt["steps"]:
            st.write(step["derivation"], step["output"])
