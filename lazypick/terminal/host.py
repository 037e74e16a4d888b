"""Terminal implementation of the editor capability interface.

``TerminalHost`` plays the host editor for standalone runs: it keeps overlay
surfaces in memory, routes key tokens to bound handlers, and composes a
centred, bordered frame (picker list, optional preview column, footer) that
is written to the terminal in one call.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from ..host import ANY_PRINTABLE, EditorCapabilities, KeyHandler
from ..keymap import is_printable_key
from ..render import STYLE_SELECTED
from ..text import clip_ansi_line, display_width, pad_to_width
from ..theme import DEFAULT_THEME, UITheme
from ..types import Mode

MIN_OVERLAY_WIDTH = 20
MIN_OVERLAY_HEIGHT = 8
MIN_PREVIEW_INNER_WIDTH = 60
DEFAULT_TITLE = " lazypick "

PreviewProvider = Callable[[int, int], tuple[str, list[str]]]
FooterProvider = Callable[[int], str]


@dataclass(frozen=True)
class OverlayGeometry:
    """Placement of the overlay box inside the terminal (1-based cells)."""

    top: int
    left: int
    width: int
    height: int
    list_width: int
    list_height: int
    preview_width: int


def overlay_geometry(columns: int, lines: int, percent: int, show_preview: bool) -> OverlayGeometry:
    """Size the overlay to ``percent`` of the terminal and split its columns."""
    width = min(columns, max(MIN_OVERLAY_WIDTH, columns * percent // 100))
    height = min(lines, max(MIN_OVERLAY_HEIGHT, lines * percent // 100))
    inner_width = max(1, width - 2)
    inner_height = max(2, height - 2)
    if show_preview and inner_width >= MIN_PREVIEW_INNER_WIDTH:
        list_width = inner_width // 2
        preview_width = inner_width - list_width - 1
    else:
        list_width = inner_width
        preview_width = 0
    return OverlayGeometry(
        top=max(1, (lines - height) // 2 + 1),
        left=max(1, (columns - width) // 2 + 1),
        width=width,
        height=height,
        list_width=list_width,
        list_height=max(1, inner_height - 1),
        preview_width=preview_width,
    )


@dataclass
class TerminalSurface:
    """In-memory overlay state for one picker."""

    width: int
    height: int
    lines: list[str] = field(default_factory=list)
    highlights: dict[int, str] = field(default_factory=dict)
    handlers: dict[tuple[Mode, str], KeyHandler] = field(default_factory=dict)
    mode: Mode = Mode.NAVIGATION
    closed: bool = False


def _border_top(width: int, title: str, theme: UITheme) -> str:
    inner = max(0, width - 2)
    title = clip_ansi_line(title, inner)
    left_run = max(0, (inner - display_width(title)) // 2)
    right_run = max(0, inner - left_run - display_width(title))
    return (
        f"{theme.border}╭{'─' * left_run}{theme.reset}"
        f"{theme.title}{title}{theme.reset}"
        f"{theme.border}{'─' * right_run}╮{theme.reset}"
    )


def _styled_cell(text: str, width: int, style: str) -> str:
    return f"{style}{pad_to_width(clip_ansi_line(text, width), width)}"


def compose_frame(
    surface: TerminalSurface,
    geometry: OverlayGeometry,
    theme: UITheme = DEFAULT_THEME,
    *,
    title: str = DEFAULT_TITLE,
    footer: str = "",
    preview: tuple[str, list[str]] | None = None,
) -> str:
    """Build the escape-sequence string that draws one overlay frame."""
    border = theme.border
    reset = theme.reset
    out: list[str] = ["\x1b[H\x1b[2J"]

    def move(row: int) -> str:
        return f"\x1b[{geometry.top + row};{geometry.left}H"

    out.append(move(0) + _border_top(geometry.width, title, theme))
    inner_rows = max(1, geometry.height - 2)
    preview_title, preview_rows = preview if preview is not None else ("", [])
    for row in range(inner_rows - 1):
        text = surface.lines[row] if row < len(surface.lines) else ""
        style = theme.style(surface.highlights.get(row, ""))
        cell = _styled_cell(text, geometry.list_width, style) + reset
        if geometry.preview_width > 0:
            if row == 0:
                preview_cell = _styled_cell(preview_title, geometry.preview_width, theme.message)
            else:
                body = preview_rows[row - 1] if row - 1 < len(preview_rows) else ""
                preview_cell = _styled_cell(body, geometry.preview_width, "")
            cell += f"{border}│{reset}{preview_cell}{reset}"
        out.append(move(row + 1) + f"{border}│{reset}{cell}{border}│{reset}")

    inner_width = max(0, geometry.width - 2)
    footer_style = theme.footer_insert if surface.mode is Mode.TEXT_ENTRY else theme.footer_normal
    footer_cell = _styled_cell(footer, inner_width, footer_style) + reset
    out.append(move(inner_rows) + f"{border}│{reset}{footer_cell}{border}│{reset}")
    out.append(move(inner_rows + 1) + f"{border}╰{'─' * inner_width}╯{reset}")
    return "".join(out)


class TerminalHost:
    """Capability provider that draws picker overlays on a raw terminal."""

    def __init__(
        self,
        write: Callable[[str], None],
        geometry: OverlayGeometry,
        theme: UITheme = DEFAULT_THEME,
        *,
        title: str = DEFAULT_TITLE,
    ) -> None:
        self.write = write
        self.geometry = geometry
        self.theme = theme
        self.title = title
        self.surface: TerminalSurface | None = None
        self.footer_provider: FooterProvider | None = None
        self.preview_provider: PreviewProvider | None = None
        self.dirty = False

    def capabilities(self, open_file: Callable[[Path], None]) -> EditorCapabilities:
        return EditorCapabilities(
            create_overlay=self.create_overlay,
            set_surface_lines=self.set_surface_lines,
            apply_highlight=self.apply_highlight,
            bind_key=self.bind_key,
            close_overlay=self.close_overlay,
            open_file=open_file,
            set_mode=self.set_mode,
        )

    def create_overlay(self, width: int, height: int) -> TerminalSurface:
        self.surface = TerminalSurface(width=width, height=height)
        self.dirty = True
        return self.surface

    def set_surface_lines(self, surface: TerminalSurface, lines: list[str]) -> None:
        surface.lines = list(lines)
        surface.highlights = {}
        self.dirty = True

    def apply_highlight(self, surface: TerminalSurface, line_index: int, style: str) -> None:
        # Selection wins over any other style on the same line.
        if surface.highlights.get(line_index) == STYLE_SELECTED:
            return
        surface.highlights[line_index] = style
        self.dirty = True

    def bind_key(self, surface: TerminalSurface, mode: Mode, key: str, handler: KeyHandler) -> None:
        surface.handlers[(mode, key)] = handler

    def set_mode(self, surface: TerminalSurface, mode: Mode) -> None:
        surface.mode = mode
        self.dirty = True

    def close_overlay(self, surface: TerminalSurface) -> None:
        surface.closed = True
        surface.handlers.clear()
        if surface is self.surface:
            self.surface = None
        self.write("\x1b[0m\x1b[H\x1b[2J")
        self.dirty = False

    def relayout(self, geometry: OverlayGeometry) -> None:
        self.geometry = geometry
        self.dirty = True

    def dispatch_key(self, key: str) -> bool:
        """Route ``key`` to the handler bound for the surface's mode."""
        surface = self.surface
        if surface is None or surface.closed or not key:
            return False
        handler = surface.handlers.get((surface.mode, key))
        if handler is None and is_printable_key(key):
            handler = surface.handlers.get((surface.mode, ANY_PRINTABLE))
        if handler is None:
            return False
        handler(key)
        return True

    def flush(self) -> None:
        """Write the current frame if anything changed since the last flush."""
        surface = self.surface
        if surface is None or surface.closed or not self.dirty:
            return
        footer = self.footer_provider(max(0, self.geometry.width - 2)) if self.footer_provider else ""
        preview = None
        if self.geometry.preview_width > 0 and self.preview_provider is not None:
            preview = self.preview_provider(self.geometry.preview_width, max(0, self.geometry.list_height - 1))
        self.write(
            compose_frame(
                surface,
                self.geometry,
                self.theme,
                title=self.title,
                footer=footer,
                preview=preview,
            )
        )
        self.dirty = False
