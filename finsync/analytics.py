"""Aggregations over the transaction analysis frame.

This module contains the summary calculations behind the dashboard:
income, expense and balance totals, spending per category against the
category's monthly limit, and expense totals for an arbitrary date range
(used as the baseline for trend alerts).
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from .config import ORPHAN_CATEGORY_COLOR
from .filters import filter_by_date_range
from .models import TRANSACTION_COLUMNS, Category

CATEGORY_SPENDING_COLUMNS = ['Category', 'Color', 'Spent', 'Limit', 'Percentage', 'Share', 'Over Limit']


def _safe_percentage(numerator, denominator):
    """``numerator / denominator * 100`` with 0 wherever the denominator is 0 or missing."""
    numerator = np.asarray(numerator, dtype=float)
    denominator = np.nan_to_num(np.asarray(denominator, dtype=float), nan=0.0)
    with np.errstate(divide='ignore', invalid='ignore'):
        ratio = np.where(denominator != 0, numerator / np.where(denominator != 0, denominator, 1.0) * 100.0, 0.0)
    return ratio


class FinanceAnalytics:
    """Totals and category breakdowns for a (usually pre-filtered) frame."""

    def __init__(self, data: pd.DataFrame):
        self.data = data.copy() if data is not None else pd.DataFrame(columns=TRANSACTION_COLUMNS)
        self._prepare_data()

    def _prepare_data(self) -> None:
        for column in TRANSACTION_COLUMNS:
            if column not in self.data.columns:
                self.data[column] = pd.Series(dtype=object)
        self.data['Date'] = pd.to_datetime(self.data['Date'], errors='coerce')
        self.data['Amount'] = pd.to_numeric(self.data['Amount'], errors='coerce').fillna(0.0)
        self.data['Category'] = self.data['Category'].fillna('').astype(str)
        self.data['Kind'] = self.data['Kind'].fillna('').astype(str)

    def _expense_rows(self, df: Optional[pd.DataFrame] = None) -> pd.DataFrame:
        source = df if df is not None else self.data
        return source[source['Kind'] == 'expense']

    def _income_rows(self, df: Optional[pd.DataFrame] = None) -> pd.DataFrame:
        source = df if df is not None else self.data
        return source[source['Kind'] == 'income']

    def calculate_summary(self) -> Dict[str, float]:
        """Income, expense and balance totals for the frame."""
        income = float(self._income_rows()['Amount'].sum())
        expenses = float(self._expense_rows()['Amount'].sum())
        balance = income - expenses
        savings_rate = (balance / income * 100) if income > 0 else 0.0
        return {
            'income': income,
            'expenses': expenses,
            'balance': balance,
            'savings_rate': savings_rate,
            'transaction_count': int(len(self.data)),
        }

    def spending_by_category(self) -> pd.Series:
        """Expense totals keyed by category name, in first-seen order."""
        expenses = self._expense_rows()
        if expenses.empty:
            return pd.Series(dtype=float)
        return expenses.groupby('Category', sort=False)['Amount'].sum()

    def calculate_category_spending(
        self,
        categories: Iterable[Category],
        include_empty: bool = True,
    ) -> pd.DataFrame:
        """Spending against limit for every expense category.

        Rows follow the order of ``categories``; expense transactions whose
        category name matches no known category are appended after them.
        ``Percentage`` is spend over limit and is 0 when there is no limit.
        """
        spent = self.spending_by_category()
        total_expenses = float(spent.sum()) if not spent.empty else 0.0

        rows: List[Dict[str, object]] = []
        known = set()
        for category in categories:
            if category.kind != 'expense' or category.name in known:
                continue
            known.add(category.name)
            rows.append({
                'Category': category.name,
                'Color': category.color,
                'Spent': float(spent.get(category.name, 0.0)),
                'Limit': category.limit,
            })
        for name, amount in spent.items():
            if name not in known:
                rows.append({
                    'Category': name,
                    'Color': ORPHAN_CATEGORY_COLOR,
                    'Spent': float(amount),
                    'Limit': None,
                })

        breakdown = pd.DataFrame(rows, columns=['Category', 'Color', 'Spent', 'Limit'])
        if breakdown.empty:
            return pd.DataFrame(columns=CATEGORY_SPENDING_COLUMNS)

        limits = pd.to_numeric(breakdown['Limit'], errors='coerce')
        breakdown['Spent'] = breakdown['Spent'].astype(float)
        breakdown['Percentage'] = _safe_percentage(breakdown['Spent'], limits)
        breakdown['Share'] = _safe_percentage(breakdown['Spent'], np.full(len(breakdown), total_expenses))
        breakdown['Over Limit'] = (limits.fillna(0) > 0) & (breakdown['Spent'] > limits.fillna(0))

        if not include_empty:
            breakdown = breakdown[breakdown['Spent'] > 0]
        return breakdown[CATEGORY_SPENDING_COLUMNS].reset_index(drop=True)

    def calculate_period_expenses(self, start: Optional[date], end: Optional[date]) -> float:
        """Total expenses with ``start <= Date < end``."""
        in_range = filter_by_date_range(self.data, start, end)
        return float(self._expense_rows(in_range)['Amount'].sum())

    def calculate_monthly_breakdown(self) -> pd.DataFrame:
        """Income and expenses per calendar month, oldest first."""
        if self.data.empty:
            return pd.DataFrame(columns=['Month', 'Income', 'Expenses', 'Balance'])
        data = self.data.dropna(subset=['Date']).copy()
        data['Month'] = data['Date'].dt.to_period('M').astype(str)
        data['Income'] = np.where(data['Kind'] == 'income', data['Amount'], 0.0)
        data['Expenses'] = np.where(data['Kind'] == 'expense', data['Amount'], 0.0)
        monthly = data.groupby('Month')[['Income', 'Expenses']].sum().reset_index()
        monthly['Balance'] = monthly['Income'] - monthly['Expenses']
        return monthly
