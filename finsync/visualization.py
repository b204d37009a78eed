"""Plotly visualisation helpers for FinSync.

Each function takes a frame produced by :mod:`finsync.analytics` or
:mod:`finsync.goals` and returns a `plotly.graph_objects.Figure` that
Streamlit renders via ``st.plotly_chart``.  Empty inputs produce an empty
figure with a "No data to display" title instead of raising.
"""

from __future__ import annotations

from typing import Dict

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_summary_bar_chart(summary: Dict[str, float], title: str | None = None) -> go.Figure:
    """Income, expenses and balance side by side.

    Parameters
    ----------
    summary : dict
        Output of :meth:`FinanceAnalytics.calculate_summary`.
    title : str, optional
        Chart title.
    """
    labels = ["Income", "Expenses", "Balance"]
    values = [summary.get('income', 0.0), summary.get('expenses', 0.0), summary.get('balance', 0.0)]
    colors = ['#10B981', '#EF4444', '#3B82F6' if values[2] >= 0 else '#DC2626']
    fig = go.Figure(go.Bar(x=labels, y=values, marker_color=colors))
    fig.update_layout(title=title or "Period summary", yaxis_title="Amount", showlegend=False)
    return fig


def create_category_spending_chart(spending: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Grouped bars of spend against limit per category.

    Parameters
    ----------
    spending : pandas.DataFrame
        Output of :meth:`FinanceAnalytics.calculate_category_spending`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Bars coloured with each category's colour; limits drawn as outlines.
    """
    if spending.empty:
        return _empty_figure()
    fig = go.Figure()
    fig.add_trace(go.Bar(
        name='Spent',
        x=spending['Category'],
        y=spending['Spent'],
        marker_color=spending['Color'].tolist(),
    ))
    limits = pd.to_numeric(spending['Limit'], errors='coerce')
    fig.add_trace(go.Bar(
        name='Limit',
        x=spending['Category'],
        y=limits,
        marker_color='rgba(0,0,0,0)',
        marker_line_color='#6B7280',
        marker_line_width=1.5,
    ))
    fig.update_layout(
        title=title or "Spending by category",
        barmode='overlay',
        xaxis_tickangle=-30,
        yaxis_title="Amount",
    )
    return fig


def create_category_share_chart(spending: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Pie of each category's share of total expenses."""
    spending = spending[spending['Spent'] > 0] if not spending.empty else spending
    if spending.empty:
        return _empty_figure()
    fig = px.pie(
        spending,
        values='Spent',
        names='Category',
        color='Category',
        color_discrete_map=dict(zip(spending['Category'], spending['Color'])),
    )
    fig.update_traces(textposition='inside', textinfo='percent+label')
    fig.update_layout(title=title or "Share of expenses")
    return fig


def create_goal_progress_chart(progress: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Horizontal progress bars; bar length is capped at 100%.

    Parameters
    ----------
    progress : pandas.DataFrame
        Output of :func:`finsync.goals.goal_progress_frame`.
    """
    if progress.empty:
        return _empty_figure()
    widths = progress['Progress'].clip(upper=100.0)
    colors = ['#10B981' if status == 'Completed' else '#3B82F6' for status in progress['Status']]
    fig = go.Figure(go.Bar(
        x=widths,
        y=progress['Goal'],
        orientation='h',
        marker_color=colors,
        text=[f"{value:.1f}%" for value in progress['Progress']],
        textposition='auto',
    ))
    fig.update_layout(
        title=title or "Goal progress",
        xaxis=dict(range=[0, 100], title="Progress (%)"),
        yaxis=dict(autorange='reversed'),
    )
    return fig


def create_monthly_chart(monthly: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Monthly income vs expenses with the balance as a line."""
    if monthly.empty:
        return _empty_figure()
    fig = go.Figure()
    fig.add_trace(go.Bar(name='Income', x=monthly['Month'], y=monthly['Income'], marker_color='#10B981'))
    fig.add_trace(go.Bar(name='Expenses', x=monthly['Month'], y=monthly['Expenses'], marker_color='#EF4444'))
    fig.add_trace(go.Scatter(
        name='Balance', x=monthly['Month'], y=monthly['Balance'],
        mode='lines+markers', line=dict(color='#3B82F6'),
    ))
    fig.update_layout(
        title=title or "Monthly income vs expenses",
        barmode='group',
        hovermode='x unified',
        xaxis_title="Month",
        yaxis_title="Amount",
    )
    return fig
