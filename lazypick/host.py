"""Host-editor capability interface and the picker controller that drives it.

The controller owns one :class:`PickerSession` and talks to the editor only
through :class:`EditorCapabilities`, so any host that can draw lines, apply
line highlights, route keys, and open files can embed the picker. Nothing is
stored globally; a host may run several controllers side by side.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any

from . import gateway
from .keymap import DEFAULT_BINDINGS, KeyDispatcher
from .refresh import RefreshScheduler
from .render import RenderedView, list_rows_for_height, render
from .session import PickerSession, PickerSessionDeps, PickerSessionOps
from .transitions import Transition
from .types import Activated, Entry, Mode, Outcome

logger = logging.getLogger(__name__)

# Wildcard key a host should route unbound printable characters to.
ANY_PRINTABLE = "<printable>"

SurfaceHandle = Any
KeyHandler = Callable[[str], None]


@dataclass(frozen=True)
class EditorCapabilities:
    """Operations the picker needs from its host editor.

    ``bind_key`` handlers receive the key token that fired them. ``set_mode``
    is optional and lets hosts with their own insert/normal modes follow the
    picker's input mode.
    """

    create_overlay: Callable[[int, int], SurfaceHandle]
    set_surface_lines: Callable[[SurfaceHandle, list[str]], None]
    apply_highlight: Callable[[SurfaceHandle, int, str], None]
    bind_key: Callable[[SurfaceHandle, Mode, str, KeyHandler], None]
    close_overlay: Callable[[SurfaceHandle], None]
    open_file: Callable[[Path], None]
    set_mode: Callable[[SurfaceHandle, Mode], None] | None = None


class PickerController:
    """Wire a picker session to a host: keys in, redraws and outcomes out."""

    def __init__(
        self,
        capabilities: EditorCapabilities,
        working_directory: Path,
        width: int,
        height: int,
        *,
        query_entries: Callable[[Path, str], list[Entry]] | None = None,
        engine_command: tuple[str, ...] | None = None,
        async_refresh: bool = False,
        bindings: Mapping[Mode, Mapping[str, Transition]] = DEFAULT_BINDINGS,
    ) -> None:
        self.capabilities = capabilities
        self.width = max(1, width)
        self.height = max(1, height)
        if query_entries is None:
            query_entries = partial(gateway.query_entries, engine_command=engine_command)
        self.scheduler = RefreshScheduler(query_entries) if async_refresh else None
        self.session = PickerSession(
            working_directory=Path(working_directory).resolve(),
            viewport_height=list_rows_for_height(self.height),
        )
        self.ops = PickerSessionOps(
            self.session,
            PickerSessionDeps(query_entries=query_entries, scheduler=self.scheduler),
        )
        self.dispatcher = KeyDispatcher(bindings)
        self.surface: SurfaceHandle | None = None
        self.last_view: RenderedView | None = None

    @property
    def outcome(self) -> Outcome | None:
        return self.session.outcome

    @property
    def is_open(self) -> bool:
        return self.surface is not None and not self.session.terminated

    def open(self) -> None:
        """Create the overlay, bind keys for both modes, and load results."""
        caps = self.capabilities
        self.surface = caps.create_overlay(self.width, self.height)
        for mode in Mode:
            for key in self.dispatcher.bound_keys(mode):
                caps.bind_key(self.surface, mode, key, partial(self.handle_key, mode))
        caps.bind_key(self.surface, Mode.TEXT_ENTRY, ANY_PRINTABLE, partial(self.handle_key, Mode.TEXT_ENTRY))
        if caps.set_mode is not None:
            caps.set_mode(self.surface, self.session.mode)
        self.ops.refresh()
        self.redraw()

    def handle_key(self, mode: Mode, key: str) -> None:
        """Resolve and apply one key press bound in ``mode``."""
        if not self.is_open:
            return
        if mode is not self.session.mode:
            logger.debug("ignoring %r bound for %s while in %s", key, mode.value, self.session.mode.value)
            return
        self.ops.poll_refresh()
        transition = self.dispatcher.dispatch(mode, key)
        if transition is None:
            return
        self.apply(transition)

    def apply(self, transition: Transition) -> None:
        """Apply ``transition`` and bring the host in sync with the session."""
        if not self.is_open:
            return
        previous_mode = self.session.mode
        self.ops.apply(transition)
        if self.session.terminated:
            self._finish()
            return
        if self.session.mode is not previous_mode:
            self.dispatcher.reset()
            if self.capabilities.set_mode is not None:
                self.capabilities.set_mode(self.surface, self.session.mode)
        self.redraw()

    def poll(self) -> bool:
        """Commit finished background refreshes; redraw when results changed."""
        if not self.is_open:
            return False
        if not self.ops.poll_refresh():
            return False
        self.redraw()
        return True

    def wait_for_refresh(self, timeout: float = 5.0) -> bool:
        """Block until the live query's results are committed or ``timeout`` passes."""
        if self.scheduler is None:
            return True
        deadline = time.monotonic() + timeout
        while self.session.refresh_pending and not self.session.terminated:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            self.scheduler.wait_for_result(timeout=min(remaining, 0.05))
            self.poll()
        return True

    def resize(self, width: int, height: int) -> None:
        self.width = max(1, width)
        self.height = max(1, height)
        self.ops.set_viewport_height(list_rows_for_height(self.height))
        if self.is_open:
            self.redraw()

    def redraw(self) -> None:
        if self.surface is None:
            return
        view = render(self.session, self.width, self.height)
        self.last_view = view
        self.capabilities.set_surface_lines(self.surface, list(view.lines))
        for highlight in view.highlights:
            self.capabilities.apply_highlight(self.surface, highlight.line_index, highlight.style)

    def cancel(self) -> None:
        """Close the picker from the host side (e.g. the overlay lost focus)."""
        if self.is_open:
            self.ops.cancel()
            self._finish()

    def _finish(self) -> None:
        surface = self.surface
        outcome = self.session.outcome
        self.dispatcher.reset()
        if surface is not None:
            self.capabilities.close_overlay(surface)
        if isinstance(outcome, Activated):
            self.capabilities.open_file(outcome.path)
