from datetime import date

import pytest

from finsync.formatting import format_currency
from finsync.models import (
    TRANSACTION_COLUMNS,
    Transaction,
    ValidationError,
    category_from_form,
    goal_from_form,
    parse_amount,
    transaction_from_form,
    transactions_to_frame,
)


def test_parse_amount_accepts_decimal_comma_and_currency():
    assert parse_amount("1.234,56") == pytest.approx(1234.56)
    assert parse_amount("R$ 50") == 50.0
    assert parse_amount(12) == 12.0


@pytest.mark.parametrize("raw, expected", [
    ("1,234.56", 1234.56),
    ("1.234,56", 1234.56),
    ("1.234.567", 1234567.0),
    ("2,000,000", 2000000.0),
    ("12,5", 12.5),
    ("12.5", 12.5),
    ("0,500", 0.5),
    ("-1.234,50", -1234.5),
])
def test_parse_amount_uses_last_separator_as_decimal_mark(raw, expected):
    assert parse_amount(raw) == pytest.approx(expected)


def test_parse_amount_reads_displayed_currency():
    assert parse_amount(format_currency(1234.56, include_sign=False)) == pytest.approx(1234.56)
    assert parse_amount(format_currency(1234.56, symbol="R$")) == pytest.approx(1234.56)


@pytest.mark.parametrize("raw", ["1.500", "2,000", "1,2,3", "1.2,3.4", "12,34.5"])
def test_parse_amount_rejects_ambiguous_or_misgrouped_numbers(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)


def test_ambiguous_limit_is_not_stored():
    with pytest.raises(ValidationError) as excinfo:
        category_from_form({"name": "Moradia", "kind": "expense", "limit": "1.500"})
    assert excinfo.value.field == "limit"


@pytest.mark.parametrize("raw", ["", "  ", None, "abc", True])
def test_parse_amount_rejects_bad_input(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)


def test_transaction_from_form_builds_record():
    txn = transaction_from_form({
        'kind': 'Expense',
        'amount': '45,90',
        'category': ' Alimentação ',
        'date': '2024-01-12',
        'description': 'Mercado',
    })
    assert txn.kind == 'expense'
    assert txn.amount == pytest.approx(45.9)
    assert txn.category == 'Alimentação'
    assert txn.date == date(2024, 1, 12)
    assert txn.payment_method == ''


def test_transaction_amount_must_be_positive():
    with pytest.raises(ValidationError) as excinfo:
        transaction_from_form({'kind': 'income', 'amount': '0', 'category': 'Salário', 'date': '2024-01-01'})
    assert excinfo.value.field == 'amount'


def test_transaction_requires_known_kind_and_date():
    with pytest.raises(ValidationError):
        transaction_from_form({'kind': 'transfer', 'amount': '10', 'category': 'X', 'date': '2024-01-01'})
    with pytest.raises(ValidationError) as excinfo:
        transaction_from_form({'kind': 'income', 'amount': '10', 'category': 'X', 'date': '12/01/2024'})
    assert excinfo.value.field == 'date'


def test_category_limit_only_for_expenses():
    with pytest.raises(ValidationError) as excinfo:
        category_from_form({'name': 'Salário', 'kind': 'income', 'limit': '100'})
    assert excinfo.value.field == 'limit'

    category = category_from_form({'name': 'Lazer', 'kind': 'expense', 'limit': '', 'color': '#F59E0B'})
    assert category.limit is None
    assert category.color == '#F59E0B'


def test_category_rejects_bad_color_and_non_positive_limit():
    with pytest.raises(ValidationError):
        category_from_form({'name': 'Lazer', 'kind': 'expense', 'color': 'orange'})
    with pytest.raises(ValidationError):
        category_from_form({'name': 'Lazer', 'kind': 'expense', 'limit': '-5'})


def test_goal_from_form_defaults():
    goal = goal_from_form({'title': 'Viagem', 'target_amount': '5000', 'deadline': date(2025, 6, 1)})
    assert goal.current_amount == 0.0
    assert goal.kind == 'save'
    assert goal.deadline == date(2025, 6, 1)


def test_goal_target_must_be_positive():
    with pytest.raises(ValidationError) as excinfo:
        goal_from_form({'title': 'Viagem', 'target_amount': '0', 'deadline': '2025-06-01'})
    assert excinfo.value.field == 'target_amount'


def test_transactions_to_frame_columns():
    empty = transactions_to_frame([])
    assert list(empty.columns) == TRANSACTION_COLUMNS
    assert empty.empty

    frame = transactions_to_frame([
        Transaction(kind='expense', amount=10, category='Lazer', date=date(2024, 3, 1), id='a'),
    ])
    assert frame.loc[0, 'Amount'] == 10.0
    assert frame.loc[0, 'Date'].year == 2024
