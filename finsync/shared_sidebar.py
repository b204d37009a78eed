"""Shared sidebar and session plumbing for the multi-page app.

Every page calls :func:`render_shared_sidebar` first.  It builds the store
session once per browser session, reloads all records on every run, keeps
the :class:`ViewState` in ``st.session_state`` and renders the period
filter that all pages share.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict

import streamlit as st

from .config import configure_logging
from .db import FinanceStore, StoreError
from .persistent_cache import load_view_state, save_view_state
from .session import FinanceSession
from .ui import FinanceUI
from .view_state import ViewState

logger = logging.getLogger(__name__)

SESSION_KEY = 'finsync_session'
VIEW_STATE_KEY = 'finsync_view_state'


def get_session() -> FinanceSession:
    """Return this browser session's :class:`FinanceSession`, freshly reloaded."""
    session = st.session_state.get(SESSION_KEY)
    if session is None:
        configure_logging()
        try:
            store = FinanceStore()
        except StoreError as exc:
            logger.exception("Could not open the database")
            st.error(f"Could not open the database: {exc}")
            st.stop()
        session = FinanceSession(store)
        st.session_state[SESSION_KEY] = session
    session.reload()
    return session


def get_view_state() -> ViewState:
    state = st.session_state.get(VIEW_STATE_KEY)
    if state is None:
        state = load_view_state()
        st.session_state[VIEW_STATE_KEY] = state
    return state


def set_view_state(state: ViewState, rerun: bool = False) -> None:
    """Store the next view state, persisting tab and filters when they change."""
    previous = st.session_state.get(VIEW_STATE_KEY)
    st.session_state[VIEW_STATE_KEY] = state
    if previous is None or previous.persistable() != state.persistable():
        _persist_view(state)
    if rerun and previous != state:
        st.rerun()


def render_shared_sidebar() -> Dict[str, Any]:
    """Render shared sidebar elements available on all pages.

    Returns:
        Dict with keys: 'session', 'view_state', 'ui'
    """
    ui = FinanceUI()
    ui.setup_page_config()
    session = get_session()
    state = get_view_state()

    st.sidebar.header("🔍 Filters")
    filters = ui.render_period_filter(state.filters)
    if filters != state.filters:
        state = replace(state, filters=filters)
        set_view_state(state)

    snapshot = session.snapshot
    st.sidebar.caption(
        f"{len(snapshot.transactions)} transactions • "
        f"{len(snapshot.categories)} categories • {len(snapshot.goals)} goals"
    )
    if session.last_error:
        st.sidebar.error(f"Store error, showing last loaded data: {session.last_error}")

    return {'session': session, 'view_state': state, 'ui': ui}


def _persist_view(state: ViewState) -> None:
    try:  # pragma: no cover - disk IO
        save_view_state(state)
    except OSError:
        logger.warning("Could not write view cache", exc_info=True)
