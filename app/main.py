"""
Streamlit Frontend for the Expense Ledger

A single screen: add an expense, pick a time window, see the total,
the per-category breakdown, a chart and the list of expenses.

All logic lives in the LedgerController. This page only reads its derived
view and forwards button presses to it.

Run with:
    streamlit run app/main.py
"""

import asyncio

import streamlit as st

from expense_ledger.aggregation import format_amount
from expense_ledger.config import get_settings
from expense_ledger.models.expense import FilterWindow, ValidationResult
from expense_ledger.orchestrator import LedgerController, create_ledger_controller
from expense_ledger.validation import ExpenseInputValidator


# Page configuration
st.set_page_config(
    page_title="Student Expense Tracker",
    page_icon="💸",
    layout="centered",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_controller() -> LedgerController:
    """Get or create the ledger controller for this browser session."""
    if "ledger" not in st.session_state:
        controller = create_ledger_controller()
        run_async(controller.startup())
        st.session_state.ledger = controller
    return st.session_state.ledger


def main():
    """Main application entry point."""
    try:
        controller = get_controller()
    except Exception as e:
        st.error(f"Could not open the expense database: {e}")
        st.stop()

    symbol = get_settings().app.currency_symbol
    controller.refresh()

    st.title("Student Expense Tracker")

    render_entry_form(controller)
    render_window_selector(controller)
    render_summary(controller, symbol)
    render_category_chart(controller)
    render_expense_list(controller, symbol)

    st.caption("Enter your expenses and they'll be saved locally with SQLite.")


def render_entry_form(controller: LedgerController):
    """Render the add-expense form."""
    with st.form("add_expense", clear_on_submit=True):
        amount = st.text_input("Amount", placeholder="Amount (e.g. 12.50)")
        category = st.text_input("Category", placeholder="Category (Food, Books, Rent...)")
        note = st.text_input("Note", placeholder="Note (optional)")
        submitted = st.form_submit_button("Add Expense", type="primary")

    if submitted:
        result = run_async(controller.submit_new(amount, category, note))
        if result.failed:
            st.error(f"Could not save the expense: {result.error_message}")
        elif result.rejected and get_settings().app.debug_mode:
            summary = ExpenseInputValidator().get_user_friendly_summary(
                ValidationResult(is_valid=False, issues=result.issues)
            )
            st.warning(summary)


def render_window_selector(controller: LedgerController):
    """Render the All / This Week / This Month selector."""
    windows = list(FilterWindow)
    selected = st.radio(
        "Show",
        options=windows,
        index=windows.index(controller.window),
        format_func=lambda w: w.label,
        horizontal=True,
    )
    if selected != controller.window:
        controller.set_window(selected)


def render_summary(controller: LedgerController, symbol: str):
    """Render the total and the per-category subtotals."""
    view = controller.view

    st.metric("Total Spending", format_amount(view.total_spend, symbol))

    if view.error:
        st.error(view.error)

    for category, amount in view.by_category.items():
        st.markdown(f"**{category}**: {format_amount(amount, symbol)}")


def render_category_chart(controller: LedgerController):
    """Render the spending-by-category chart."""
    st.subheader("Spending by Category")

    view = controller.view
    if view.is_empty:
        st.caption("No data to display yet.")
        return

    series = view.chart_series()
    st.bar_chart({slice_.label: slice_.value for slice_ in series})


def render_expense_list(controller: LedgerController, symbol: str):
    """Render the visible expenses with a delete button each."""
    view = controller.view
    if view.is_empty:
        st.info("No expenses yet.")
        return

    st.caption(f"{view.record_count} expenses")
    for record in view.visible_records:
        col1, col2 = st.columns([6, 1])
        with col1:
            st.markdown(f"**{format_amount(record.amount, symbol)}** · {record.category}")
            caption = record.date_iso
            if record.note:
                caption = f"{caption} · {record.note}"
            st.caption(caption)
        with col2:
            if st.button("✕", key=f"delete_{record.id}", help="Delete this expense"):
                result = run_async(controller.request_delete(record.id))
                if result.failed:
                    st.error(f"Could not delete: {result.error_message}")
                else:
                    st.rerun()


if __name__ == "__main__":
    main()
