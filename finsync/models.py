"""Record types and form validation.

Transactions, categories and goals are plain dataclasses.  The ``*_from_form``
helpers turn raw form input (strings straight from the UI) into records and
raise :class:`ValidationError` before anything reaches the store.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from .config import DEFAULT_CATEGORY_COLOR

TRANSACTION_KINDS = ("income", "expense")
GOAL_KINDS = ("save", "spend")

TRANSACTION_COLUMNS = ["id", "Date", "Kind", "Amount", "Description", "Category", "Payment Method"]

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")
_GROUPED = {sep: re.compile(r"^\d{1,3}(?:" + re.escape(sep) + r"\d{3})+$") for sep in (",", ".")}


class ValidationError(ValueError):
    """Raised when form input cannot become a record."""

    def __init__(self, field_name: str, message: str):
        super().__init__(f"{field_name}: {message}")
        self.field = field_name
        self.message = message


@dataclass
class Transaction:
    kind: str
    amount: float
    category: str
    date: date
    description: str = ""
    payment_method: str = ""
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class Category:
    name: str
    kind: str
    limit: Optional[float] = None  # monthly ceiling, expense categories only
    color: str = DEFAULT_CATEGORY_COLOR
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class Goal:
    title: str
    target_amount: float
    deadline: date
    current_amount: float = 0.0
    kind: str = "save"
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


def record_to_dict(record: Any) -> Dict[str, Any]:
    """Serialize a record with ISO dates, e.g. for prefilling edit forms."""
    data = asdict(record)
    for key, value in data.items():
        if isinstance(value, date):
            data[key] = value.isoformat()
    return data


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _normalize_separators(text: str, original: Any, field_name: str) -> str:
    """Rewrite ``text`` with a dot decimal mark and no digit grouping.

    When both ``,`` and ``.`` appear the last one is the decimal mark
    (``1.234,56`` and ``1,234.56`` are both 1234.56).  A lone separator
    followed by exactly three digits (``1.500``, ``2,000``) could be either,
    so it is rejected.
    """
    invalid = ValidationError(field_name, f"'{original}' is not a valid number")
    sign = ""
    if text[:1] in ("-", "+"):
        sign, text = text[0], text[1:]
    if "," in text and "." in text:
        decimal = "," if text.rfind(",") > text.rfind(".") else "."
        group = "." if decimal == "," else ","
        whole, _, fraction = text.rpartition(decimal)
        if not (whole.isdigit() or _GROUPED[group].match(whole)) or not fraction.isdigit():
            raise invalid
        return f"{sign}{whole.replace(group, '')}.{fraction}"
    for separator in (",", "."):
        if separator not in text:
            continue
        grouped = _GROUPED[separator].match(text)
        if grouped and text.count(separator) > 1:
            return sign + text.replace(separator, "")
        if grouped and not text.startswith("0"):
            raise ValidationError(
                field_name,
                f"'{original}' is ambiguous; write it without grouping or with cents (e.g. 1500 or 1500,00)",
            )
        whole, _, fraction = text.partition(separator)
        if separator in fraction:
            raise invalid
        return f"{sign}{whole}.{fraction}"
    return sign + text


def parse_amount(value: Any, field_name: str = "amount") -> float:
    """Parse user-entered numbers in either ``1.234,56`` or ``1,234.56`` style."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(field_name, "is required")
    if isinstance(value, bool):
        raise ValidationError(field_name, "must be a number")
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = str(value).strip().replace(" ", "")
        for symbol in ("R$", "$"):
            cleaned = cleaned.replace(symbol, "")
        cleaned = _normalize_separators(cleaned, value, field_name)
        try:
            number = float(cleaned)
        except ValueError:
            raise ValidationError(field_name, f"'{value}' is not a valid number") from None
    if pd.isna(number) or number in (float("inf"), float("-inf")):
        raise ValidationError(field_name, "must be a finite number")
    return number


def parse_date(value: Any, field_name: str = "date") -> date:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(field_name, "is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(field_name, f"'{value}' is not a YYYY-MM-DD date") from None


def _required_text(form: Mapping[str, Any], key: str) -> str:
    text = str(form.get(key) or "").strip()
    if not text:
        raise ValidationError(key, "is required")
    return text


def _choice(form: Mapping[str, Any], key: str, options: Iterable[str], default: Optional[str] = None) -> str:
    value = str(form.get(key) or default or "").strip().lower()
    if value not in options:
        raise ValidationError(key, f"must be one of {', '.join(options)}")
    return value


# ---------------------------------------------------------------------------
# Form parsing
# ---------------------------------------------------------------------------


def transaction_from_form(form: Mapping[str, Any]) -> Transaction:
    kind = _choice(form, "kind", TRANSACTION_KINDS)
    amount = parse_amount(form.get("amount"))
    if amount <= 0:
        raise ValidationError("amount", "must be greater than zero")
    return Transaction(
        kind=kind,
        amount=amount,
        category=_required_text(form, "category"),
        date=parse_date(form.get("date")),
        description=str(form.get("description") or "").strip(),
        payment_method=str(form.get("payment_method") or "").strip(),
    )


def category_from_form(form: Mapping[str, Any]) -> Category:
    name = _required_text(form, "name")
    kind = _choice(form, "kind", TRANSACTION_KINDS)
    raw_limit = form.get("limit")
    limit: Optional[float] = None
    if raw_limit not in (None, "") and not (isinstance(raw_limit, str) and not raw_limit.strip()):
        limit = parse_amount(raw_limit, "limit")
        if limit <= 0:
            raise ValidationError("limit", "must be greater than zero")
        if kind != "expense":
            raise ValidationError("limit", "only expense categories can have a limit")
    color = str(form.get("color") or DEFAULT_CATEGORY_COLOR).strip()
    if not _HEX_COLOR.match(color):
        raise ValidationError("color", f"'{color}' is not a #RRGGBB color")
    return Category(name=name, kind=kind, limit=limit, color=color)


def goal_from_form(form: Mapping[str, Any]) -> Goal:
    title = _required_text(form, "title")
    target = parse_amount(form.get("target_amount"), "target_amount")
    if target <= 0:
        raise ValidationError("target_amount", "must be greater than zero")
    raw_current = form.get("current_amount")
    current = 0.0
    if raw_current not in (None, "") and not (isinstance(raw_current, str) and not raw_current.strip()):
        current = parse_amount(raw_current, "current_amount")
        if current < 0:
            raise ValidationError("current_amount", "cannot be negative")
    return Goal(
        title=title,
        target_amount=target,
        current_amount=current,
        deadline=parse_date(form.get("deadline"), "deadline"),
        kind=_choice(form, "kind", GOAL_KINDS, default="save"),
    )


def transactions_to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Build the analysis frame used by the filter and aggregation code."""
    rows: List[Dict[str, Any]] = [
        {
            "id": t.id,
            "Date": pd.Timestamp(t.date),
            "Kind": t.kind,
            "Amount": float(t.amount),
            "Description": t.description,
            "Category": t.category,
            "Payment Method": t.payment_method,
        }
        for t in transactions
    ]
    frame = pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)
    frame["Date"] = pd.to_datetime(frame["Date"])
    frame["Amount"] = pd.to_numeric(frame["Amount"], errors="coerce").fillna(0.0)
    return frame
