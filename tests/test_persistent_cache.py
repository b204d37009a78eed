import json

from finsync.filters import FilterState
from finsync.persistent_cache import CACHE_VERSION, load_view_state, save_view_state
from finsync.view_state import ViewState, open_form, set_tab


def test_missing_file_returns_default_state(tmp_path):
    assert load_view_state(tmp_path / "view_state.json") == ViewState()


def test_tab_and_filters_survive_but_open_forms_do_not(tmp_path):
    path = tmp_path / "nested" / "view_state.json"
    state = open_form(
        set_tab(ViewState(filters=FilterState(kind='expense', period='year')), 'goals'),
        'goal',
        title='Viagem',
    )
    save_view_state(state, path)

    restored = load_view_state(path)
    assert restored.active_tab == 'goals'
    assert restored.filters == FilterState(kind='expense', period='year')
    assert restored.modal is None
    assert list(path.parent.iterdir()) == [path]


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "view_state.json"
    path.write_text("{not json", encoding='utf-8')
    assert load_view_state(path) == ViewState()


def test_unknown_layout_or_bad_values_are_ignored(tmp_path):
    path = tmp_path / "view_state.json"
    path.write_text(json.dumps({'active_tab': 'goals'}), encoding='utf-8')
    assert load_view_state(path) == ViewState()

    path.write_text(json.dumps({
        'version': CACHE_VERSION,
        'view': {'active_tab': 'reports', 'filters': {'period': 'decade'}},
    }), encoding='utf-8')
    assert load_view_state(path) == ViewState()
