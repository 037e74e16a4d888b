"""Standalone terminal runtime for the picker.

Wires :class:`PickerController` to :class:`TerminalHost`, then runs the
key/poll loop until the session terminates. Returns the activated path so the
caller decides whether to print it or open an editor.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from ..config import PickerConfig
from ..host import PickerController
from ..keymap import build_bindings
from ..preview import preview_lines
from ..render import footer_line
from ..theme import resolve_theme
from ..types import Activated, Mode
from .controller import TerminalController
from .host import TerminalHost, overlay_geometry
from .keys import read_key

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 50


def run_terminal_picker(
    directory: Path,
    config: PickerConfig,
    *,
    no_color: bool = False,
    initial_query: str = "",
    stdin_fd: int | None = None,
    stdout_fd: int | None = None,
) -> Path | None:
    """Run an interactive picker rooted at ``directory``.

    Returns the activated file path, or ``None`` when the picker was cancelled.
    """
    stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
    stdout_fd = sys.stdout.fileno() if stdout_fd is None else stdout_fd
    terminal = TerminalController(stdin_fd, stdout_fd)
    theme = resolve_theme(config.theme, no_color=no_color)

    size = terminal.size()
    geometry = overlay_geometry(*size, config.overlay_percent, config.show_preview)
    host = TerminalHost(terminal.write, geometry, theme)
    picked: list[Path] = []
    controller = PickerController(
        host.capabilities(open_file=picked.append),
        directory,
        geometry.list_width,
        geometry.list_height,
        engine_command=config.engine_command,
        async_refresh=config.async_refresh,
        bindings=build_bindings(config.navigation_keys, config.text_entry_keys),
    )
    host.footer_provider = lambda width: footer_line(controller.session, width)
    host.preview_provider = lambda width, height: preview_lines(
        controller.session.selected_entry(),
        width,
        height,
        controller.session.preview_scroll,
        style=config.style,
        no_color=no_color,
    )

    logger.info("picker opened in %s", controller.session.working_directory)
    if initial_query:
        controller.session.query = initial_query
        controller.session.mode = Mode.TEXT_ENTRY

    with terminal.raw_mode():
        controller.open()
        host.flush()
        while controller.is_open:
            key = read_key(stdin_fd, timeout_ms=POLL_INTERVAL_MS)
            current_size = terminal.size()
            if current_size != size:
                size = current_size
                geometry = overlay_geometry(*size, config.overlay_percent, config.show_preview)
                host.relayout(geometry)
                controller.resize(geometry.list_width, geometry.list_height)
            if key:
                host.dispatch_key(key)
            controller.poll()
            host.flush()

    outcome = controller.outcome
    logger.info("picker closed with %s", type(outcome).__name__ if outcome is not None else "no outcome")
    if isinstance(outcome, Activated) and picked:
        return picked[-1]
    return None
