"""Dashboard page: period totals, alerts, category spending and goals.

Run with ``python run_dashboard.py`` or ``streamlit run finsync/Home.py``.
"""

from __future__ import annotations

from datetime import date

import streamlit as st

from .alerts import build_alerts
from .analytics import FinanceAnalytics
from .filters import PERIOD_LABELS, FilterState, apply_filters
from .shared_sidebar import render_shared_sidebar, set_view_state
from .view_state import set_tab
from . import visualization as viz


def main() -> None:
    sidebar_data = render_shared_sidebar()
    session = sidebar_data['session']
    state = sidebar_data['view_state']
    ui = sidebar_data['ui']
    set_view_state(set_tab(state, 'dashboard'))

    ui.render_header()
    today = date.today()
    frame = session.transactions_frame()
    categories = session.snapshot.categories

    ui.render_alerts(build_alerts(frame, categories, state.filters, today))

    st.subheader(f"📊 {PERIOD_LABELS[state.filters.period]}")
    period_frame = apply_filters(frame, FilterState(period=state.filters.period), today)
    analytics = FinanceAnalytics(period_frame)
    summary = analytics.calculate_summary()
    ui.render_summary_cards(summary)

    spending = analytics.calculate_category_spending(categories, include_empty=False)
    ui.render_category_breakdown(spending)

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(viz.create_summary_bar_chart(summary), use_container_width=True)
    with col2:
        st.plotly_chart(viz.create_category_share_chart(spending), use_container_width=True)

    col1, col2 = st.columns(2)
    with col1:
        ui.render_goal_summary(session.snapshot.goals, today)
    with col2:
        st.subheader("📆 Monthly history")
        monthly = FinanceAnalytics(frame).calculate_monthly_breakdown()
        st.plotly_chart(viz.create_monthly_chart(monthly), use_container_width=True)


if __name__ == "__main__":
    main()
