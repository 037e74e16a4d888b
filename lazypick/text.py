"""Display-width aware text shaping.

Provides measurement, clipping, and padding that preserve ANSI escape
sequences. Wide East Asian characters occupy two columns; combining marks
occupy none.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
ELLIPSIS = "…"


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return terminal column width for ANSI-styled text."""
    plain = ANSI_ESCAPE_RE.sub("", text)
    col = 0
    for ch in plain:
        col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    Tabs are expanded into spaces so clipping aligns with rendered terminal cells.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    return "".join(out)


def pad_to_width(text: str, width: int) -> str:
    """Right-pad ``text`` with spaces to ``width`` display columns."""
    current = display_width(text)
    if current >= width:
        return text
    return text + " " * (width - current)


def truncate_left(text: str, max_cols: int) -> str:
    """Keep the tail of plain ``text`` that fits ``max_cols``, marking the cut.

    Path headers stay readable this way: the innermost directory is what the
    user cares about.
    """
    if max_cols <= 0:
        return ""
    if display_width(text) <= max_cols:
        return text
    if max_cols == 1:
        return ELLIPSIS

    budget = max_cols - 1
    kept: list[str] = []
    used = 0
    for ch in reversed(text):
        w = char_display_width(ch, 0)
        if used + w > budget:
            break
        kept.append(ch)
        used += w
    return ELLIPSIS + "".join(reversed(kept))
