"""Dispatch user actions to the store and keep a reloaded snapshot.

Every successful write is followed by a full reload of all three
collections.  A failed store call is logged and leaves the previous
snapshot in place; validation errors are raised to the caller before any
write happens.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional

import pandas as pd

from .db import FinanceStore, StoreError, TableStore
from .models import (
    Category,
    Goal,
    Transaction,
    category_from_form,
    goal_from_form,
    parse_amount,
    record_to_dict,
    transaction_from_form,
    transactions_to_frame,
)

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    transactions: List[Transaction] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    goals: List[Goal] = field(default_factory=list)


class FinanceSession:
    """One user's view of the store."""

    def __init__(self, store: FinanceStore):
        self.store = store
        self.snapshot = Snapshot()
        self.last_error: Optional[str] = None

    # Loading ---------------------------------------------------------------

    def reload(self) -> bool:
        """Re-fetch every collection. Keeps the old snapshot on failure."""
        try:
            snapshot = Snapshot(
                transactions=self.store.transactions.get_all(),
                categories=self.store.categories.get_all(),
                goals=self.store.goals.get_all(),
            )
        except StoreError as exc:
            logger.exception("Failed to load records")
            self.last_error = str(exc)
            return False
        self.snapshot = snapshot
        self.last_error = None
        return True

    def transactions_frame(self) -> pd.DataFrame:
        return transactions_to_frame(self.snapshot.transactions)

    def category_names(self, kind: Optional[str] = None) -> List[str]:
        names = [c.name for c in self.snapshot.categories if kind is None or c.kind == kind]
        return list(dict.fromkeys(names))

    # Writes ----------------------------------------------------------------

    def _run(self, description: str, action: Callable[[], Any]) -> bool:
        try:
            action()
        except StoreError as exc:
            logger.exception("Failed to %s", description)
            self.last_error = str(exc)
            return False
        return self.reload()

    def _save(self, table: TableStore, record: Any, record_id: Optional[str], label: str) -> bool:
        if record_id is None:
            return self._run(f"create {label}", lambda: table.create(record))
        changes = {
            key: value
            for key, value in record_to_dict(record).items()
            if key not in ('id', 'created_at', 'updated_at')
        }
        return self._run(f"update {label} {record_id}", lambda: table.update(record_id, changes))

    def save_transaction(self, form: Mapping[str, Any], record_id: Optional[str] = None) -> bool:
        record = transaction_from_form(form)
        return self._save(self.store.transactions, record, record_id, 'transaction')

    def save_category(self, form: Mapping[str, Any], record_id: Optional[str] = None) -> bool:
        record = category_from_form(form)
        return self._save(self.store.categories, record, record_id, 'category')

    def save_goal(self, form: Mapping[str, Any], record_id: Optional[str] = None) -> bool:
        record = goal_from_form(form)
        return self._save(self.store.goals, record, record_id, 'goal')

    def delete_transaction(self, record_id: str) -> bool:
        return self._run(f"delete transaction {record_id}", lambda: self.store.transactions.delete(record_id))

    def delete_category(self, record_id: str) -> bool:
        # Transactions keep the category name; nothing cascades.
        return self._run(f"delete category {record_id}", lambda: self.store.categories.delete(record_id))

    def delete_goal(self, record_id: str) -> bool:
        return self._run(f"delete goal {record_id}", lambda: self.store.goals.delete(record_id))

    def contribute_to_goal(self, goal_id: str, amount: Any) -> bool:
        """Add ``amount`` to a goal's current amount."""
        value = parse_amount(amount)

        def apply() -> None:
            goal = self.store.goals.get(goal_id)
            new_total = max(float(goal.current_amount) + value, 0.0)
            self.store.goals.update(goal_id, {'current_amount': new_total})

        return self._run(f"update goal {goal_id}", apply)
