"""Pure view rendering for a picker session.

``render`` turns a session snapshot plus overlay geometry into display lines
and highlight spans. It never mutates the session; hosts decide how styles
look (see :mod:`lazypick.theme`).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .session import PickerSession
from .text import clip_ansi_line, truncate_left
from .types import Entry, Mode

CHROME_ROWS = 3
DIRECTORY_GLYPH = "📁"
FILE_GLYPH = "📄"
SEPARATOR_CHAR = "─"
PROMPT_PREFIX = "> "
CURSOR_MARKER = "_"
SELECTED_PREFIX = "> "
UNSELECTED_PREFIX = "  "

STYLE_HEADER = "header"
STYLE_PROMPT = "prompt"
STYLE_SEPARATOR = "separator"
STYLE_DIRECTORY = "directory"
STYLE_SELECTED = "selected"
STYLE_MESSAGE = "message"

MODE_LABELS = {
    Mode.NAVIGATION: "NORMAL",
    Mode.TEXT_ENTRY: "INSERT",
}

MODE_HELP = {
    Mode.NAVIGATION: (
        "j/k: move | gg/G: top/bottom | Ctrl+D/U: half page | Enter/l: open | "
        "h/-: parent | i or /: type | Ctrl+E/Y: preview | q/Esc: quit"
    ),
    Mode.TEXT_ENTRY: "Type to filter | Enter: open | Backspace: delete | Ctrl+U: clear | Esc: normal mode",
}


@dataclass(frozen=True)
class Highlight:
    """Style applied to one whole rendered line."""

    line_index: int
    style: str


@dataclass(frozen=True)
class RenderedView:
    lines: tuple[str, ...]
    highlights: tuple[Highlight, ...]


def list_rows_for_height(height: int) -> int:
    """Return how many result rows fit under the header/prompt/separator."""
    return max(1, height - CHROME_ROWS)


def abbreviate_home(path: Path, home: Path | None = None) -> str:
    """Render ``path`` with the user's home directory shown as ``~``."""
    home = home if home is not None else Path.home()
    try:
        relative = path.relative_to(home)
    except ValueError:
        return str(path)
    if relative == Path("."):
        return "~"
    return f"~/{relative.as_posix()}"


def format_header(working_directory: Path, width: int, home: Path | None = None) -> str:
    prefix = f"{DIRECTORY_GLYPH} "
    budget = max(0, width - 3)
    return clip_ansi_line(prefix + truncate_left(abbreviate_home(working_directory, home), budget), width)


def format_prompt(query: str, mode: Mode, width: int) -> str:
    marker = CURSOR_MARKER if mode is Mode.TEXT_ENTRY else ""
    budget = max(0, width - len(PROMPT_PREFIX) - len(marker))
    return clip_ansi_line(PROMPT_PREFIX + truncate_left(query, budget) + marker, width)


def format_entry(entry: Entry, selected: bool, width: int) -> str:
    glyph = DIRECTORY_GLYPH if entry.is_directory else FILE_GLYPH
    prefix = SELECTED_PREFIX if selected else UNSELECTED_PREFIX
    return clip_ansi_line(f"{prefix}{glyph} {entry.name}", width)


def render(
    session: PickerSession,
    width: int,
    height: int,
    *,
    home: Path | None = None,
) -> RenderedView:
    """Render the picker view for ``session`` into ``width`` x ``height`` cells."""
    width = max(0, width)
    lines: list[str] = [
        format_header(session.working_directory, width, home),
        format_prompt(session.query, session.mode, width),
        SEPARATOR_CHAR * width,
    ]
    highlights: list[Highlight] = [
        Highlight(0, STYLE_HEADER),
        Highlight(1, STYLE_PROMPT),
        Highlight(2, STYLE_SEPARATOR),
    ]

    if session.results:
        for index in session.visible_range():
            entry = session.results[index - 1]
            selected = index == session.selected_index
            line_index = len(lines)
            lines.append(format_entry(entry, selected, width))
            if selected:
                highlights.append(Highlight(line_index, STYLE_SELECTED))
            elif entry.is_directory:
                highlights.append(Highlight(line_index, STYLE_DIRECTORY))
    else:
        message = "searching…" if session.refresh_pending else "no matches"
        highlights.append(Highlight(len(lines), STYLE_MESSAGE))
        lines.append(clip_ansi_line(f"{UNSELECTED_PREFIX}{message}", width))

    if height >= 0 and len(lines) > height:
        lines = lines[:height]
        highlights = [highlight for highlight in highlights if highlight.line_index < height]
    return RenderedView(lines=tuple(lines), highlights=tuple(highlights))


def footer_line(session: PickerSession, width: int) -> str:
    """Mode indicator, query summary, and key help for hosts with a spare row."""
    query = session.query if session.query else "<empty>"
    count = len(session.results)
    noun = "entry" if count == 1 else "entries"
    text = f"-- {MODE_LABELS[session.mode]} -- | {count} {noun} | Filter: {query} | {MODE_HELP[session.mode]}"
    return clip_ansi_line(text, width)
