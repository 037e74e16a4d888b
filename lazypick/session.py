"""Picker session state and its transitions.

``PickerSession`` is plain mutable state for one picker lifetime.
``PickerSessionOps`` binds it to an injected engine query function (and an
optional background scheduler) and implements every transition. Invalid
operations are no-ops; nothing here raises into the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from . import navigator
from .refresh import RefreshResult, RefreshScheduler
from .transitions import (
    Activate,
    Cancel,
    ClearQuery,
    DeleteCharacter,
    GoBack,
    HalfPage,
    JumpToFirst,
    JumpToLast,
    MoveSelection,
    ScrollPreview,
    SwitchMode,
    Transition,
    TypeCharacter,
)
from .types import Activated, Cancelled, Entry, Mode, Outcome

logger = logging.getLogger(__name__)


@dataclass
class PickerSession:
    working_directory: Path
    query: str = ""
    results: list[Entry] = field(default_factory=list)
    selected_index: int = 1
    scroll_offset: int = 1
    viewport_height: int = 1
    mode: Mode = Mode.NAVIGATION
    outcome: Outcome | None = None
    refresh_pending: bool = False
    preview_scroll: int = 0

    @property
    def terminated(self) -> bool:
        return self.outcome is not None

    def selected_entry(self) -> Entry | None:
        """Return the entry under the cursor, if any."""
        if not self.results:
            return None
        return self.results[self.selected_index - 1]

    def visible_range(self) -> range:
        """Return 1-based result indices inside the viewport."""
        last = min(self.scroll_offset + self.viewport_height - 1, len(self.results))
        return range(self.scroll_offset, last + 1)


def recompute_viewport(session: PickerSession) -> None:
    """Clamp the cursor and scroll the window just enough to show it."""
    session.viewport_height = max(1, session.viewport_height)
    session.selected_index = max(1, min(session.selected_index, max(1, len(session.results))))
    session.scroll_offset = max(1, session.scroll_offset)
    if session.selected_index < session.scroll_offset:
        session.scroll_offset = session.selected_index
    elif session.selected_index >= session.scroll_offset + session.viewport_height:
        session.scroll_offset = session.selected_index - session.viewport_height + 1


def replace_results(session: PickerSession, entries: list[Entry]) -> None:
    """Install a fresh result list and reset the cursor to the top."""
    session.results = list(entries)
    session.selected_index = 1
    session.scroll_offset = 1
    session.preview_scroll = 0
    recompute_viewport(session)


@dataclass(frozen=True)
class PickerSessionDeps:
    """Injected collaborators for :class:`PickerSessionOps`."""

    query_entries: Callable[[Path, str], list[Entry]]
    scheduler: RefreshScheduler | None = None


class PickerSessionOps:
    """State-bound transition operations for one picker session."""

    def __init__(self, session: PickerSession, deps: PickerSessionDeps) -> None:
        self.session = session
        self.query_entries = deps.query_entries
        self.scheduler = deps.scheduler

    # Refresh

    def refresh(self) -> None:
        """Fetch results for the live directory and query."""
        session = self.session
        if session.terminated:
            return
        if self.scheduler is not None:
            self.scheduler.schedule(session.working_directory, session.query)
            session.refresh_pending = True
            return
        try:
            entries = self.query_entries(session.working_directory, session.query)
        except Exception:
            logger.exception("engine query failed for %r", session.query)
            entries = []
        replace_results(session, entries)
        session.refresh_pending = False

    def commit_refresh(self, result: RefreshResult) -> bool:
        """Apply a background result if it still answers the live query."""
        session = self.session
        if session.terminated:
            return False
        if not result.is_current_for(session.working_directory, session.query):
            logger.debug("dropping stale results for %r", result.request.query)
            return False
        replace_results(session, result.entries)
        session.refresh_pending = False
        return True

    def poll_refresh(self) -> bool:
        """Drain background results, committing only current ones."""
        if self.scheduler is None:
            return False
        changed = False
        for result in self.scheduler.drain_results():
            if self.commit_refresh(result):
                changed = True
        return changed

    # Text entry

    def type_character(self, char: str) -> bool:
        session = self.session
        if session.terminated or session.mode is not Mode.TEXT_ENTRY or not char:
            return False
        session.query += char
        self.refresh()
        return True

    def delete_character(self) -> bool:
        session = self.session
        if session.terminated or session.mode is not Mode.TEXT_ENTRY or not session.query:
            return False
        session.query = session.query[:-1]
        self.refresh()
        return True

    def clear_query(self) -> bool:
        session = self.session
        if session.terminated or session.mode is not Mode.TEXT_ENTRY or not session.query:
            return False
        session.query = ""
        self.refresh()
        return True

    # Navigation

    def move_selection(self, delta: int) -> bool:
        """Move the cursor by ``delta`` rows, clamped to the result list."""
        session = self.session
        if session.terminated or session.mode is not Mode.NAVIGATION or not session.results:
            return False
        previous = session.selected_index
        session.selected_index = max(1, min(len(session.results), session.selected_index + delta))
        recompute_viewport(session)
        if session.selected_index != previous:
            session.preview_scroll = 0
        return session.selected_index != previous

    def jump_to_first(self) -> bool:
        return self.move_selection(-len(self.session.results))

    def jump_to_last(self) -> bool:
        return self.move_selection(len(self.session.results))

    def move_half_page(self, direction: int) -> bool:
        step = self.session.viewport_height // 2
        return self.move_selection(step if direction >= 0 else -step)

    def scroll_preview(self, delta: int) -> bool:
        session = self.session
        if session.terminated or session.mode is not Mode.NAVIGATION:
            return False
        entry = session.selected_entry()
        if entry is None or entry.is_directory:
            return False
        previous = session.preview_scroll
        session.preview_scroll = max(0, session.preview_scroll + delta)
        return session.preview_scroll != previous

    # Activation and lifecycle

    def activate(self) -> bool:
        """Enter the selected directory or finish with the selected file."""
        session = self.session
        if session.terminated:
            return False
        entry = session.selected_entry()
        if entry is None:
            return False
        if entry.is_directory:
            previous = session.working_directory
            navigator.enter(session, entry.path, self.refresh)
            return session.working_directory != previous
        session.outcome = Activated(entry.path)
        return True

    def go_back(self) -> bool:
        session = self.session
        previous = session.working_directory
        navigator.go_back(session, self.refresh)
        return session.working_directory != previous

    def switch_mode(self, mode: Mode) -> bool:
        session = self.session
        if session.terminated or session.mode is mode:
            return False
        session.mode = mode
        return True

    def cancel(self) -> bool:
        session = self.session
        if session.terminated:
            return False
        session.outcome = Cancelled()
        session.refresh_pending = False
        return True

    def set_viewport_height(self, height: int) -> None:
        self.session.viewport_height = max(1, height)
        recompute_viewport(self.session)

    def apply(self, transition: Transition) -> bool:
        """Apply one transition variant, returning whether state changed."""
        if isinstance(transition, TypeCharacter):
            return self.type_character(transition.char)
        if isinstance(transition, DeleteCharacter):
            return self.delete_character()
        if isinstance(transition, ClearQuery):
            return self.clear_query()
        if isinstance(transition, MoveSelection):
            return self.move_selection(transition.delta)
        if isinstance(transition, JumpToFirst):
            return self.jump_to_first()
        if isinstance(transition, JumpToLast):
            return self.jump_to_last()
        if isinstance(transition, HalfPage):
            return self.move_half_page(transition.direction)
        if isinstance(transition, Activate):
            return self.activate()
        if isinstance(transition, GoBack):
            return self.go_back()
        if isinstance(transition, SwitchMode):
            return self.switch_mode(transition.mode)
        if isinstance(transition, Cancel):
            return self.cancel()
        if isinstance(transition, ScrollPreview):
            return self.scroll_preview(transition.delta)
        return False
