"""Transaction filtering by kind, category, payment method and period.

Periods follow calendar boundaries: ``week`` starts on the most recent
Sunday, ``month`` on the first of the current month and ``year`` on
January 1.  Each period ends where the next one starts, so entries dated
later than the current period are left out.  Every filter is an
independent row mask, so applying them in any order gives the same rows.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Any, Dict, Mapping, Optional, Tuple

import pandas as pd

from .config import DEFAULT_PERIOD
from .models import TRANSACTION_KINDS

ALL = 'all'
PERIODS = (ALL, 'week', 'month', 'year')
PERIOD_LABELS = {
    ALL: 'All time',
    'week': 'This week',
    'month': 'This month',
    'year': 'This year',
}

DateRange = Tuple[Optional[date], Optional[date]]


@dataclass(frozen=True)
class FilterState:
    """Active filter selection. ``'all'`` disables a filter."""

    kind: str = ALL
    category: str = ALL
    payment_method: str = ALL
    period: str = DEFAULT_PERIOD

    def __post_init__(self) -> None:
        if self.kind not in (ALL, *TRANSACTION_KINDS):
            raise ValueError(f"Unknown kind filter: {self.kind}")
        if self.period not in PERIODS:
            raise ValueError(f"Unknown period filter: {self.period}")

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> 'FilterState':
        """Build from cached data, falling back to defaults for bad values."""
        if not isinstance(raw, Mapping):
            return cls()
        values = {
            key: str(raw[key])
            for key in ('kind', 'category', 'payment_method', 'period')
            if raw.get(key)
        }
        try:
            return cls(**values)
        except ValueError:
            return cls()


def _today(today: Optional[date]) -> date:
    return today or date.today()


def period_bounds(period: str, today: Optional[date] = None) -> DateRange:
    """Return ``(start, end_exclusive)`` for the current calendar period."""
    today = _today(today)
    if period == 'week':
        # date.weekday(): Monday=0 .. Sunday=6; weeks start on Sunday here.
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        return start, start + timedelta(days=7)
    if period == 'month':
        start = today.replace(day=1)
        return start, _add_months(start, 1)
    if period == 'year':
        start = today.replace(month=1, day=1)
        return start, start.replace(year=start.year + 1)
    if period == ALL:
        return None, None
    raise ValueError(f"Unknown period: {period}")


def previous_period_bounds(period: str, today: Optional[date] = None) -> Optional[DateRange]:
    """Return the calendar period just before the current one, or ``None`` for ``all``."""
    if period == ALL:
        return None
    start, _ = period_bounds(period, today)
    if period == 'week':
        return start - timedelta(days=7), start
    if period == 'month':
        return _add_months(start, -1), start
    return start.replace(year=start.year - 1), start


def _add_months(first_of_month: date, months: int) -> date:
    index = first_of_month.year * 12 + (first_of_month.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def filter_by_period(data: pd.DataFrame, period: str, today: Optional[date] = None) -> pd.DataFrame:
    """Keep transactions inside the current ``period``; later-dated entries are excluded."""
    return filter_by_date_range(data, *period_bounds(period, today))


def filter_by_date_range(data: pd.DataFrame, start: Optional[date], end: Optional[date]) -> pd.DataFrame:
    """Keep transactions with ``start <= Date < end``; ``None`` leaves a side open."""
    if data.empty:
        return data.copy()
    dates = pd.to_datetime(data['Date'], errors='coerce')
    mask = pd.Series(True, index=data.index)
    if start is not None:
        mask &= dates >= pd.Timestamp(start)
    if end is not None:
        mask &= dates < pd.Timestamp(end)
    return data[mask].copy()


def apply_filters(
    data: pd.DataFrame,
    filters: Optional[FilterState] = None,
    today: Optional[date] = None,
    sort: bool = False,
) -> pd.DataFrame:
    """Apply every active filter in ``filters`` to the analysis frame."""
    filters = filters or FilterState()
    filtered = filter_by_period(data, filters.period, today)

    if filters.kind != ALL:
        filtered = filtered[filtered['Kind'] == filters.kind]
    if filters.category != ALL:
        filtered = filtered[filtered['Category'] == filters.category]
    if filters.payment_method != ALL:
        filtered = filtered[filtered['Payment Method'] == filters.payment_method]

    if sort and not filtered.empty:
        # Stable sort keeps store order for same-day transactions.
        filtered = filtered.sort_values('Date', ascending=False, kind='mergesort')
    return filtered
