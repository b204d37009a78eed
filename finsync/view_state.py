"""Serializable UI state and the pure transitions over it.

Pages keep a single :class:`ViewState` in ``st.session_state`` and replace it
with the result of these functions instead of mutating individual keys.
Only the tab and filters are persisted between runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

from .filters import FilterState
from .models import record_to_dict

TABS = ('dashboard', 'transactions', 'categories', 'goals')
MODALS = ('transaction', 'category', 'goal')

# Blank form values per modal; dates default to today at render time.
EMPTY_FORMS: Dict[str, Dict[str, Any]] = {
    'transaction': {
        'kind': 'expense',
        'amount': '',
        'description': '',
        'category': '',
        'date': '',
        'payment_method': '',
    },
    'category': {
        'name': '',
        'kind': 'expense',
        'limit': '',
        'color': '#EF4444',
    },
    'goal': {
        'title': '',
        'target_amount': '',
        'current_amount': '',
        'deadline': '',
        'kind': 'save',
    },
}


@dataclass(frozen=True)
class ViewState:
    active_tab: str = 'dashboard'
    filters: FilterState = field(default_factory=FilterState)
    modal: Optional[str] = None
    editing_id: Optional[str] = None
    form: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'active_tab': self.active_tab,
            'filters': self.filters.to_dict(),
            'modal': self.modal,
            'editing_id': self.editing_id,
            'form': dict(self.form),
        }

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> 'ViewState':
        raw = raw if isinstance(raw, Mapping) else {}
        tab = raw.get('active_tab')
        modal = raw.get('modal')
        form = raw.get('form')
        return cls(
            active_tab=tab if tab in TABS else 'dashboard',
            filters=FilterState.from_dict(raw.get('filters')),
            modal=modal if modal in MODALS else None,
            editing_id=raw.get('editing_id') if modal in MODALS else None,
            form=dict(form) if modal in MODALS and isinstance(form, Mapping) else {},
        )

    def persistable(self) -> Dict[str, Any]:
        """The subset written to the on-disk cache."""
        return {'active_tab': self.active_tab, 'filters': self.filters.to_dict()}


def set_tab(state: ViewState, tab: str) -> ViewState:
    if tab not in TABS:
        raise ValueError(f"Unknown tab: {tab}")
    return replace(state, active_tab=tab)


def set_filters(state: ViewState, **changes: str) -> ViewState:
    return replace(state, filters=replace(state.filters, **changes))


def open_form(state: ViewState, modal: str, record: Any = None, **defaults: Any) -> ViewState:
    """Open a create form, or an edit form prefilled from ``record``."""
    if modal not in MODALS:
        raise ValueError(f"Unknown form: {modal}")
    form = dict(EMPTY_FORMS[modal])
    form.update(defaults)
    editing_id = None
    if record is not None:
        values = record_to_dict(record)
        editing_id = values.get('id')
        for key in form:
            value = values.get(key)
            form[key] = '' if value is None else value
    return replace(state, modal=modal, editing_id=editing_id, form=form)


def close_form(state: ViewState) -> ViewState:
    return replace(state, modal=None, editing_id=None, form={})
