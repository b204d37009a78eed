from datetime import date

import pytest

from finsync.db import FinanceStore, StoreError
from finsync.models import ValidationError
from finsync.session import FinanceSession


@pytest.fixture
def session(tmp_path):
    session = FinanceSession(FinanceStore(tmp_path / "finsync.db"))
    session.reload()
    return session


def _expense_form(**overrides):
    form = {
        'kind': 'expense',
        'amount': '120,50',
        'category': 'Alimentação',
        'date': date(2024, 2, 5),
        'description': 'Mercado',
        'payment_method': 'PIX',
    }
    form.update(overrides)
    return form


def test_reload_loads_seeded_categories(session):
    assert session.snapshot.categories
    assert 'Alimentação' in session.category_names('expense')
    assert 'Salário' in session.category_names('income')


def test_save_transaction_creates_and_reloads(session):
    assert session.save_transaction(_expense_form())
    [txn] = session.snapshot.transactions
    assert txn.amount == pytest.approx(120.5)

    frame = session.transactions_frame()
    assert list(frame['Category']) == ['Alimentação']


def test_save_transaction_updates_existing(session):
    session.save_transaction(_expense_form())
    txn_id = session.snapshot.transactions[0].id
    assert session.save_transaction(_expense_form(amount='80'), txn_id)
    [txn] = session.snapshot.transactions
    assert txn.id == txn_id
    assert txn.amount == 80.0


def test_invalid_form_raises_before_write(session):
    with pytest.raises(ValidationError):
        session.save_transaction(_expense_form(amount='-3'))
    assert session.store.transactions.get_all() == []


def test_store_failure_keeps_snapshot(session, monkeypatch):
    session.save_transaction(_expense_form())
    before = session.snapshot

    def boom(*args, **kwargs):
        raise StoreError("database is locked")

    monkeypatch.setattr(session.store.transactions, 'get_all', boom)
    assert session.reload() is False
    assert session.snapshot is before
    assert 'locked' in session.last_error

    monkeypatch.setattr(session.store.transactions, 'create', boom)
    assert session.save_transaction(_expense_form()) is False
    assert session.snapshot is before


def test_duplicate_category_reports_error(session):
    assert session.save_category({'name': 'Alimentação', 'kind': 'expense'}) is False
    assert session.last_error


def test_delete_and_contribute_to_goal(session):
    assert session.save_goal({'title': 'Viagem', 'target_amount': '5000', 'current_amount': '1000', 'deadline': '2030-01-01'})
    goal = session.snapshot.goals[0]

    assert session.contribute_to_goal(goal.id, '250')
    assert session.snapshot.goals[0].current_amount == 1250.0

    assert session.contribute_to_goal(goal.id, -5000)
    assert session.snapshot.goals[0].current_amount == 0.0

    assert session.delete_goal(goal.id)
    assert session.snapshot.goals == []
