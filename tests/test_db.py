import sqlite3
from datetime import date

import pytest

from finsync.config import DEFAULT_CATEGORIES
from finsync.db import (
    DuplicateRecordError,
    FinanceStore,
    RecordNotFoundError,
    StoreError,
    TransactionStore,
    init_db,
)
from finsync.models import Category, Goal, Transaction


def _txn(day, amount=10.0, kind='expense', category='Lazer'):
    return Transaction(kind=kind, amount=amount, category=category, date=day)


def test_init_seeds_default_categories_once(tmp_path):
    db_path = tmp_path / "finsync.db"
    store = FinanceStore(db_path)
    assert len(store.categories.get_all()) == len(DEFAULT_CATEGORIES)

    FinanceStore(db_path)
    assert len(store.categories.get_all()) == len(DEFAULT_CATEGORIES)


def test_init_without_seeding(tmp_path):
    store = FinanceStore(tmp_path / "finsync.db", seed_categories=False)
    assert store.categories.get_all() == []


def test_create_assigns_id_and_timestamps(tmp_path):
    store = FinanceStore(tmp_path / "finsync.db", seed_categories=False)
    created = store.transactions.create(Transaction(
        kind='expense', amount=25.0, category='Lazer', date=date(2024, 1, 10), description='Cinema',
    ))
    assert created.id
    assert created.created_at and created.updated_at
    assert created.date == date(2024, 1, 10)
    assert store.transactions.get(created.id) == created


def test_transactions_newest_first(tmp_path):
    store = FinanceStore(tmp_path / "finsync.db", seed_categories=False)
    store.transactions.create(_txn(date(2024, 1, 10)))
    store.transactions.create(_txn(date(2024, 3, 5)))
    store.transactions.create(_txn(date(2024, 2, 1)))
    dates = [t.date for t in store.transactions.get_all()]
    assert dates == [date(2024, 3, 5), date(2024, 2, 1), date(2024, 1, 10)]


def test_field_names_are_translated_to_columns(tmp_path):
    db_path = tmp_path / "finsync.db"
    store = FinanceStore(db_path, seed_categories=False)
    store.transactions.create(_txn(date(2024, 1, 10), kind='income', category='Salário'))
    store.categories.create(Category(name='Lazer', kind='expense', limit=500.0))
    store.goals.create(Goal(title='Viagem', target_amount=5000.0, deadline=date(2025, 1, 1)))

    with sqlite3.connect(db_path) as conn:
        assert conn.execute("SELECT type, transaction_date FROM transactions").fetchone() == ('income', '2024-01-10')
        assert conn.execute("SELECT type, limit_amount FROM categories").fetchone() == ('expense', 500.0)
        assert conn.execute("SELECT name FROM goals").fetchone() == ('Viagem',)

    goal = store.goals.get_all()[0]
    assert goal.title == 'Viagem'
    assert goal.deadline == date(2025, 1, 1)


def test_update_applies_partial_changes(tmp_path):
    store = FinanceStore(tmp_path / "finsync.db", seed_categories=False)
    created = store.transactions.create(_txn(date(2024, 1, 10)))
    updated = store.transactions.update(created.id, {'amount': 99.5, 'date': date(2024, 1, 11)})
    assert updated.amount == 99.5
    assert updated.date == date(2024, 1, 11)
    assert updated.category == created.category


def test_update_rejects_missing_ids_and_readonly_fields(tmp_path):
    store = FinanceStore(tmp_path / "finsync.db", seed_categories=False)
    created = store.transactions.create(_txn(date(2024, 1, 10)))
    with pytest.raises(RecordNotFoundError):
        store.transactions.update('missing', {'amount': 1.0})
    with pytest.raises(ValueError):
        store.transactions.update(created.id, {'id': 'other'})
    with pytest.raises(ValueError):
        store.transactions.update(created.id, {'colour': 'red'})


def test_delete_is_idempotent(tmp_path):
    store = FinanceStore(tmp_path / "finsync.db", seed_categories=False)
    created = store.goals.create(Goal(title='Carro', target_amount=1000.0, deadline=date(2025, 1, 1)))
    assert store.goals.delete(created.id) is True
    assert store.goals.delete(created.id) is False
    assert store.goals.get_all() == []


def test_duplicate_category_name_and_kind_rejected(tmp_path):
    store = FinanceStore(tmp_path / "finsync.db")
    with pytest.raises(DuplicateRecordError):
        store.categories.create(Category(name='Alimentação', kind='expense'))
    # Same name, other kind is allowed.
    store.categories.create(Category(name='Alimentação', kind='income'))


def test_missing_tables_raise_store_error(tmp_path):
    store = TransactionStore(tmp_path / "empty.db")
    with pytest.raises(StoreError):
        store.get_all()


def test_migration_adds_missing_columns(tmp_path):
    db_path = tmp_path / "old.db"
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            "CREATE TABLE categories (id TEXT PRIMARY KEY, name TEXT NOT NULL, limit_amount REAL, "
            "color TEXT NOT NULL DEFAULT '#EF4444', created_at TEXT NOT NULL, updated_at TEXT NOT NULL)"
        )
        conn.execute(
            "INSERT INTO categories VALUES ('c1', 'Lazer', 500, '#F59E0B', '2024-01-01', '2024-01-01')"
        )

    init_db(db_path, seed_categories=False)

    store = FinanceStore(db_path, initialize=False)
    [category] = store.categories.get_all()
    assert category.kind == 'expense'
    assert category.limit == 500.0


def test_clear_removes_every_row(tmp_path):
    store = FinanceStore(tmp_path / "finsync.db")
    assert store.categories.clear() == len(DEFAULT_CATEGORIES)
    assert store.categories.get_all() == []
