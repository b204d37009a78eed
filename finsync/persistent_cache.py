"""On-disk copy of the view state that should survive a restart.

Only the active tab and the filter selection are written; open forms stay
in the browser session.  Reading goes through :meth:`ViewState.from_dict`,
so a file written by an older version, edited by hand or truncated never
yields an invalid state.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from .config import CACHE_PATH
from .view_state import ViewState

logger = logging.getLogger(__name__)

CACHE_VERSION = 1


def load_view_state(path: Optional[Path] = None) -> ViewState:
    """Return the saved tab and filters, or a default :class:`ViewState`."""
    target = Path(path) if path is not None else CACHE_PATH
    try:
        raw = json.loads(target.read_text(encoding='utf-8'))
    except FileNotFoundError:
        return ViewState()
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable view state %s: %s", target, exc)
        return ViewState()
    if not isinstance(raw, dict) or raw.get('version') != CACHE_VERSION:
        logger.info("Discarding view state %s with unknown layout", target)
        return ViewState()
    return ViewState.from_dict(raw.get('view'))


def save_view_state(state: ViewState, path: Optional[Path] = None) -> None:
    """Write ``state.persistable()``; the file is replaced in one step."""
    target = Path(path) if path is not None else CACHE_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = {'version': CACHE_VERSION, 'view': state.persistable()}
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=target.name, suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as handle:
            json.dump(payload, handle, indent=2, sort_keys=True)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
