"""Directory enter/back transitions for a picker session."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .session import PickerSession

logger = logging.getLogger(__name__)


def is_accessible_directory(path: Path) -> bool:
    """Return whether ``path`` is a directory we can list and enter."""
    try:
        return path.is_dir() and os.access(path, os.R_OK | os.X_OK)
    except OSError:
        return False


def enter(
    session: PickerSession,
    target_directory: Path,
    refresh: Callable[[], None],
) -> PickerSession:
    """Move ``session`` into ``target_directory`` and refresh its results.

    Invalid or inaccessible targets leave the session untouched.
    """
    if session.terminated:
        return session
    target = Path(target_directory)
    if not target.is_absolute():
        target = session.working_directory / target
    if not is_accessible_directory(target):
        logger.debug("ignoring enter into non-directory %s", target)
        return session
    try:
        resolved = target.resolve()
    except OSError:
        return session

    session.working_directory = resolved
    session.query = ""
    session.results = []
    session.selected_index = 1
    session.scroll_offset = 1
    session.preview_scroll = 0
    refresh()
    return session


def go_back(session: PickerSession, refresh: Callable[[], None]) -> PickerSession:
    """Enter the parent directory; no-op at the filesystem root."""
    if session.terminated:
        return session
    parent = session.working_directory.parent
    if parent == session.working_directory:
        return session
    return enter(session, parent, refresh)
