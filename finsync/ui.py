"""Streamlit UI components for FinSync.

This module contains the rendering pieces shared by the dashboard and the
Transactions, Categories and Goals pages: summary cards, alerts, category
breakdowns, goal cards, filters, lists and the create/edit forms.  All
form state lives in a :class:`~finsync.view_state.ViewState`; components
return the next state instead of writing individual session keys.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Dict, List, Mapping, Optional

import pandas as pd
import streamlit as st
from streamlit.errors import StreamlitAPIException

from .alerts import DANGER, Alert
from .config import PAYMENT_METHODS
from .filters import ALL, PERIOD_LABELS, PERIODS, FilterState
from .formatting import escape_dollar_for_markdown, format_currency, format_percentage, signed_currency
from .goals import evaluate_goal
from .models import TRANSACTION_KINDS, ValidationError, parse_date
from .session import FinanceSession
from .view_state import ViewState, close_form, open_form
from . import visualization as viz

KIND_LABELS = {'income': 'Income', 'expense': 'Expense', 'save': 'Save', 'spend': 'Spend'}


class FinanceUI:
    """UI components for the personal finance pages."""

    def setup_page_config(self, page_title: str = "FinSync", page_icon: str = "💰") -> None:
        """Configure Streamlit page settings; must run before other st calls."""
        try:
            st.set_page_config(
                page_title=page_title,
                page_icon=page_icon,
                layout="wide",
                initial_sidebar_state="expanded",
            )
        except StreamlitAPIException:
            # Already configured earlier in this run.
            pass

    def render_header(self) -> None:
        col1, col2 = st.columns([3, 1])
        with col1:
            st.title("💰 FinSync")
            st.markdown("Personal finance control: transactions, limits and goals")
        with col2:
            st.metric(label="Today", value=date.today().strftime("%d %b %Y"))

    # Dashboard -------------------------------------------------------------

    def render_alerts(self, alerts: List[Alert]) -> None:
        for alert in alerts:
            message = escape_dollar_for_markdown(alert.message)
            if alert.level == DANGER:
                st.error(message, icon="🚨")
            else:
                st.warning(message, icon="⚠️")

    def render_summary_cards(self, summary: Dict[str, float]) -> None:
        col1, col2, col3 = st.columns(3)
        col1.metric("💰 Income", format_currency(summary['income']))
        col2.metric("💸 Expenses", format_currency(summary['expenses']))
        col3.metric(
            "📈 Balance",
            format_currency(summary['balance']),
            delta=f"{summary['savings_rate']:.1f}% saved" if summary['income'] > 0 else None,
        )

    def render_category_breakdown(self, spending: pd.DataFrame) -> None:
        st.subheader("💳 Spending by Category")
        if spending.empty:
            st.info("No expenses in the selected period.")
            return
        col1, col2 = st.columns([2, 1])
        with col1:
            st.plotly_chart(viz.create_category_spending_chart(spending), use_container_width=True)
        with col2:
            for row in spending.itertuples(index=False):
                label = f"**{row.Category}**: {format_currency(row.Spent)} ({row.Share:.1f}%)"
                if pd.notna(row.Limit) and row.Limit:
                    label += f"  \nLimit: {format_currency(row.Limit)}"
                    if row.Spent > row.Limit:
                        label += " (exceeded!)"
                st.markdown(escape_dollar_for_markdown(label))

    def render_limit_bars(self, spending: pd.DataFrame) -> None:
        """Progress bars for categories that have a limit."""
        limited = spending[pd.to_numeric(spending['Limit'], errors='coerce').fillna(0) > 0]
        if limited.empty:
            st.info("No category limits configured.")
            return
        for row in limited.itertuples(index=False):
            st.markdown(escape_dollar_for_markdown(
                f"**{row.Category}** {format_currency(row.Spent)} / {format_currency(row.Limit)}"
                f" ({row.Percentage:.0f}%)"
            ))
            st.progress(min(row.Percentage, 100.0) / 100.0)

    def render_goal_summary(self, goals, today: Optional[date] = None, limit: int = 3) -> None:
        st.subheader("🎯 Goals")
        if not goals:
            st.info("No goals yet. Create one on the Goals page.")
            return
        for goal in goals[:limit]:
            result = evaluate_goal(goal, today)
            done = " ✅" if result.completed else ""
            st.markdown(f"**{goal.title}**{done} {format_percentage(result.progress)}")
            st.progress(result.bar_width / 100.0)

    # Filters ---------------------------------------------------------------

    def render_period_filter(self, filters: FilterState, container=None) -> FilterState:
        target = container or st.sidebar
        period = target.selectbox(
            "Period",
            options=list(PERIODS),
            index=list(PERIODS).index(filters.period),
            format_func=lambda p: PERIOD_LABELS[p],
        )
        return FilterState(**{**filters.to_dict(), 'period': period})

    def render_transaction_filters(self, filters: FilterState, categories: List[str]) -> FilterState:
        col1, col2, col3 = st.columns(3)
        kinds = [ALL, *TRANSACTION_KINDS]
        category_options = [ALL, *categories]
        if filters.category not in category_options:
            category_options.append(filters.category)
        payment_options = [ALL, *PAYMENT_METHODS]
        if filters.payment_method not in payment_options:
            payment_options.append(filters.payment_method)
        with col1:
            kind = st.selectbox(
                "Type", kinds, index=kinds.index(filters.kind),
                format_func=lambda k: 'All' if k == ALL else KIND_LABELS[k],
            )
        with col2:
            category = st.selectbox(
                "Category", category_options, index=category_options.index(filters.category),
                format_func=lambda c: 'All' if c == ALL else c,
            )
        with col3:
            payment = st.selectbox(
                "Payment method", payment_options, index=payment_options.index(filters.payment_method),
                format_func=lambda p: 'All' if p == ALL else p,
            )
        return FilterState(kind=kind, category=category, payment_method=payment, period=filters.period)

    # Lists -----------------------------------------------------------------

    def render_transaction_list(
        self,
        frame: pd.DataFrame,
        on_edit: Callable[[str], None],
        on_delete: Callable[[str], None],
    ) -> None:
        if frame.empty:
            st.info("No transactions match the current filters.")
            return
        for row in frame.to_dict('records'):
            col1, col2, col3, col4 = st.columns([4, 2, 1, 1])
            with col1:
                st.markdown(f"**{row['Description'] or row['Category']}**")
                st.caption(f"{row['Category']} • {row['Date']:%d/%m/%Y} • {row['Payment Method'] or '-'}")
            with col2:
                st.markdown(escape_dollar_for_markdown(signed_currency(row['Amount'], row['Kind'])))
            with col3:
                if st.button("✏️", key=f"edit_txn_{row['id']}", help="Edit"):
                    on_edit(row['id'])
            with col4:
                if st.button("🗑️", key=f"delete_txn_{row['id']}", help="Delete"):
                    on_delete(row['id'])

    # Forms -----------------------------------------------------------------

    def _submit(
        self,
        save: Callable[[Mapping[str, object], Optional[str]], bool],
        form: Mapping[str, object],
        state: ViewState,
        session: FinanceSession,
    ) -> ViewState:
        """Validate and save a form. Returns the next view state."""
        try:
            saved = save(form, state.editing_id)
        except ValidationError as exc:
            st.error(f"Invalid {exc.field.replace('_', ' ')}: {exc.message}")
            return state
        if not saved:
            st.error(f"Could not save: {session.last_error}")
            return state
        return close_form(state)

    def render_transaction_form(self, state: ViewState, session: FinanceSession) -> ViewState:
        form = state.form
        title = "Edit transaction" if state.editing_id else "New transaction"
        st.subheader(f"➕ {title}")
        kind = st.radio(
            "Type", TRANSACTION_KINDS, horizontal=True,
            index=TRANSACTION_KINDS.index(form.get('kind') or 'expense'),
            format_func=lambda k: KIND_LABELS[k],
        )
        categories = session.category_names(kind)
        with st.form("transaction_form"):
            amount = st.text_input("Amount", value=_amount_text(form.get('amount')))
            description = st.text_input("Description", value=form.get('description') or '')
            current_category = form.get('category') or ''
            options = categories + ([current_category] if current_category and current_category not in categories else [])
            category = st.selectbox(
                "Category", options,
                index=options.index(current_category) if current_category in options else 0,
            ) if options else st.text_input("Category", value=current_category)
            method = form.get('payment_method') or ''
            methods = PAYMENT_METHODS + ([method] if method and method not in PAYMENT_METHODS else [])
            payment_method = st.selectbox(
                "Payment method", methods,
                index=methods.index(method) if method in methods else 0,
            )
            when = st.date_input("Date", value=_form_date(form.get('date')))
            col1, col2 = st.columns(2)
            submitted = col1.form_submit_button("Save" if state.editing_id else "Add")
            cancelled = col2.form_submit_button("Cancel")
        if cancelled:
            return close_form(state)
        if submitted:
            values = {
                'kind': kind,
                'amount': amount,
                'description': description,
                'category': category,
                'date': when,
                'payment_method': payment_method,
            }
            return self._submit(session.save_transaction, values, state, session)
        return state

    def render_category_form(self, state: ViewState, session: FinanceSession) -> ViewState:
        form = state.form
        st.subheader("🏷️ " + ("Edit category" if state.editing_id else "New category"))
        with st.form("category_form"):
            name = st.text_input("Name", value=form.get('name') or '')
            kind = st.selectbox(
                "Type", TRANSACTION_KINDS,
                index=TRANSACTION_KINDS.index(form.get('kind') or 'expense'),
                format_func=lambda k: KIND_LABELS[k],
            )
            limit = st.text_input(
                "Monthly limit (expenses only)", value=_amount_text(form.get('limit')),
            )
            color = st.color_picker("Color", value=form.get('color') or '#EF4444')
            col1, col2 = st.columns(2)
            submitted = col1.form_submit_button("Save" if state.editing_id else "Add")
            cancelled = col2.form_submit_button("Cancel")
        if cancelled:
            return close_form(state)
        if submitted:
            values = {'name': name, 'kind': kind, 'limit': limit, 'color': color}
            return self._submit(session.save_category, values, state, session)
        return state

    def render_goal_form(self, state: ViewState, session: FinanceSession) -> ViewState:
        form = state.form
        st.subheader("🎯 " + ("Edit goal" if state.editing_id else "New goal"))
        with st.form("goal_form"):
            title = st.text_input("Title", value=form.get('title') or '')
            target = st.text_input("Target amount", value=_amount_text(form.get('target_amount')))
            current = st.text_input("Current amount", value=_amount_text(form.get('current_amount')))
            deadline = st.date_input("Deadline", value=_form_date(form.get('deadline')))
            kind = st.selectbox(
                "Type", ['save', 'spend'],
                index=['save', 'spend'].index(form.get('kind') or 'save'),
                format_func=lambda k: KIND_LABELS[k],
            )
            col1, col2 = st.columns(2)
            submitted = col1.form_submit_button("Save" if state.editing_id else "Add")
            cancelled = col2.form_submit_button("Cancel")
        if cancelled:
            return close_form(state)
        if submitted:
            values = {
                'title': title,
                'target_amount': target,
                'current_amount': current,
                'deadline': deadline,
                'kind': kind,
            }
            return self._submit(session.save_goal, values, state, session)
        return state

    def render_goal_card(self, goal, session: FinanceSession, state: ViewState, today: Optional[date] = None) -> ViewState:
        result = evaluate_goal(goal, today)
        with st.container(border=True):
            col1, col2 = st.columns([3, 1])
            with col1:
                icon = "✅" if result.completed else "🎯"
                st.markdown(f"{icon} **{goal.title}** ({KIND_LABELS.get(goal.kind, goal.kind)})")
                st.progress(result.bar_width / 100.0)
                st.markdown(escape_dollar_for_markdown(
                    f"{format_currency(goal.current_amount)} of {format_currency(goal.target_amount)}"
                    f" ({result.progress:.1f}%)"
                ))
                if result.completed:
                    st.success("Goal reached!")
                elif result.days_left > 0:
                    st.caption(f"{result.days_left} days remaining")
                else:
                    st.caption("⏰ Deadline passed")
            with col2:
                contribution = st.text_input("Add amount", key=f"contribute_{goal.id}")
                if st.button("➕ Add", key=f"contribute_btn_{goal.id}") and contribution:
                    try:
                        if session.contribute_to_goal(goal.id, contribution):
                            st.rerun()
                        st.error(f"Could not update goal: {session.last_error}")
                    except ValidationError as exc:
                        st.error(exc.message)
                if st.button("✏️ Edit", key=f"edit_goal_{goal.id}"):
                    state = open_form(state, 'goal', goal)
                if st.button("🗑️ Delete", key=f"delete_goal_{goal.id}"):
                    if session.delete_goal(goal.id):
                        st.rerun()
                    st.error(f"Could not delete goal: {session.last_error}")
        return state


def _amount_text(value) -> str:
    """Prefill text for an amount field; stored numbers are shown with cents."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:.2f}"
    return str(value or '')


def _form_date(value) -> date:
    if not value:
        return date.today()
    try:
        return parse_date(value)
    except ValidationError:
        return date.today()

