"""Formatting utilities for currency and percentage display."""

from __future__ import annotations

from typing import Union

from .config import CURRENCY_SYMBOL


def format_currency(amount: Union[float, int], include_sign: bool = True, symbol: str | None = None) -> str:
    """Format a currency amount with thousands separators.

    Args:
        amount: The amount to format
        include_sign: Whether to include the currency symbol
        symbol: Override for the configured currency symbol

    Returns:
        Formatted currency string (e.g., "R$ 1,234.56" or "1,234.56")

    Example:
        >>> format_currency(-1234.5, symbol="$")
        '-$ 1,234.50'
    """
    formatted = f"{abs(amount):,.2f}"
    sign = "-" if amount < 0 else ""
    if not include_sign:
        return f"{sign}{formatted}"
    return f"{sign}{symbol or CURRENCY_SYMBOL} {formatted}"


def escape_dollar_for_markdown(text: str) -> str:
    """Escape dollar signs so Streamlit markdown does not start LaTeX math."""
    return text.replace("$", "\\$")


def format_percentage(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f}%"


def signed_currency(amount: float, kind: str) -> str:
    """Prefix income with ``+`` and expenses with ``-`` as in the transaction list."""
    prefix = "+" if kind == "income" else "-"
    return f"{prefix}{format_currency(abs(amount))}"
