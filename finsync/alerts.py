"""Threshold alerts for category limits and expense trends."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

import pandas as pd

from .analytics import FinanceAnalytics
from .config import ALERT_WARNING_PERCENT, EXPENSE_TREND_TOLERANCE
from .filters import FilterState, apply_filters, previous_period_bounds
from .models import Category

WARNING = 'warning'
DANGER = 'danger'


@dataclass(frozen=True)
class Alert:
    level: str
    message: str
    category: Optional[str] = None


def generate_alerts(
    category_spending: pd.DataFrame,
    total_expenses: float,
    previous_expenses: Optional[float] = None,
    warning_percent: float = ALERT_WARNING_PERCENT,
    trend_tolerance: float = EXPENSE_TREND_TOLERANCE,
) -> List[Alert]:
    """Build alerts from a category breakdown and period expense totals.

    ``category_spending`` is the frame from
    :meth:`FinanceAnalytics.calculate_category_spending`.  The trend alert is
    only produced when ``previous_expenses`` is a positive prior-period
    total.
    """
    alerts: List[Alert] = []

    if not category_spending.empty:
        for row in category_spending.itertuples(index=False):
            if pd.isna(row.Limit) or float(row.Limit) <= 0:
                continue
            if row.Percentage >= warning_percent:
                alerts.append(Alert(
                    level=WARNING,
                    message=f"You have spent {row.Percentage:.0f}% of the {row.Category} limit",
                    category=row.Category,
                ))

    if previous_expenses is not None and previous_expenses > 0:
        if total_expenses > previous_expenses * (1 + trend_tolerance):
            increase = (total_expenses / previous_expenses - 1) * 100
            alerts.append(Alert(
                level=DANGER,
                message=f"You spent {increase:.0f}% more than in the previous period",
            ))

    return alerts


def build_alerts(
    data: pd.DataFrame,
    categories: Iterable[Category],
    filters: Optional[FilterState] = None,
    today: Optional[date] = None,
) -> List[Alert]:
    """Alerts for the selected period of the unfiltered frame ``data``.

    Only the period filter applies; the baseline is the preceding calendar
    period taken from the same frame.
    """
    filters = filters or FilterState()
    period_only = FilterState(period=filters.period)
    current = FinanceAnalytics(apply_filters(data, period_only, today))
    summary = current.calculate_summary()
    spending = current.calculate_category_spending(categories)

    previous_expenses = None
    bounds = previous_period_bounds(filters.period, today)
    if bounds is not None:
        previous_expenses = FinanceAnalytics(data).calculate_period_expenses(*bounds)

    return generate_alerts(spending, summary['expenses'], previous_expenses)
