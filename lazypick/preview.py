"""File preview loading, sanitization, and syntax highlighting.

Previews are read lazily for the selected entry only. Text is highlighted
with Pygments and terminal control bytes are neutralized so a previewed file
can never move the cursor or ring the bell.
"""

from __future__ import annotations

import os
import re
from collections import OrderedDict
from functools import lru_cache
from pathlib import Path

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .text import clip_ansi_line
from .types import Entry

MAX_PREVIEW_CHARS = 50_000
MAX_DIRECTORY_ENTRIES = 200
DEFAULT_STYLE = "monokai"
PREVIEW_CACHE_MAX = 64
BINARY_EXTENSIONS = frozenset(
    {
        "exe", "bin", "dll", "so", "dylib", "a", "o", "obj",
        "jpg", "jpeg", "png", "gif", "bmp", "ico", "tiff", "webp",
        "mp3", "mp4", "wav", "flac", "ogg", "avi", "mkv", "mov",
        "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx",
        "zip", "tar", "gz", "bz2", "7z", "rar",
    }
)

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_PREVIEW_CACHE: OrderedDict[tuple[str, int, int, str, bool], list[str]] = OrderedDict()


def read_text(path: Path, limit: int | None = None) -> str:
    """Read at most ``limit`` characters of ``path`` (all when ``None``)."""
    size = -1 if limit is None else limit
    for encoding in ("utf-8", "utf-8-sig"):
        try:
            with path.open("r", encoding=encoding) as handle:
                return handle.read(size)
        except UnicodeDecodeError:
            continue
    with path.open("r", encoding="latin-1") as handle:
        return handle.read(size)


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _directory_listing(path: Path) -> str:
    try:
        children = sorted(os.scandir(path), key=lambda item: (not item.is_dir(), item.name.casefold()))
    except OSError:
        return "Could not read directory"
    names = [child.name + ("/" if child.is_dir() else "") for child in children[:MAX_DIRECTORY_ENTRIES]]
    if len(children) > MAX_DIRECTORY_ENTRIES:
        names.append(f"... {len(children) - MAX_DIRECTORY_ENTRIES} more")
    return "\n".join(names) if names else "(empty directory)"


def load_preview(entry: Entry | None) -> str | None:
    """Return preview text for ``entry``, or ``None`` when nothing is selected."""
    if entry is None:
        return None
    if entry.is_directory:
        return _directory_listing(entry.path)

    name = entry.path.name
    if entry.path.suffix.lower().lstrip(".") in BINARY_EXTENSIONS:
        return f"Binary file: {name}"
    try:
        content = read_text(entry.path, MAX_PREVIEW_CHARS + 1)
    except OSError:
        return "Could not read file"
    if "\0" in content:
        return f"Binary file: {name}"
    if len(content) > MAX_PREVIEW_CHARS:
        try:
            total = entry.path.stat().st_size
        except OSError:
            total = len(content)
        return f"{content[:MAX_PREVIEW_CHARS]}...\n\n[File truncated - {total} bytes total]"
    return content


@lru_cache(maxsize=8)
def _formatter_for_style(style: str) -> TerminalFormatter:
    """Return cached terminal formatter, falling back to the default style."""
    try:
        get_style_by_name(style)
    except ClassNotFound:
        style = DEFAULT_STYLE
    return TerminalFormatter(style=style)


def colorize(source: str, path: Path, style: str = DEFAULT_STYLE) -> str:
    """Highlight ``source`` for ``path`` with Pygments terminal colors."""
    try:
        lexer = get_lexer_for_filename(path.name, source)
    except ClassNotFound:
        lexer = TextLexer()
    return highlight(source, lexer, _formatter_for_style(style))


def preview_title(total_lines: int, scroll: int, height: int) -> str:
    """Return ``Preview`` with a ``[a..b/n]`` indicator when content overflows."""
    if total_lines <= height:
        return "Preview"
    start = min(scroll, max(0, total_lines - 1))
    return f"Preview [{start + 1}..{min(start + height, total_lines)}/{total_lines}]"


def _cache_get(key: tuple[str, int, int, str, bool]) -> list[str] | None:
    """Lookup rendered preview lines and refresh LRU order."""
    cached = _PREVIEW_CACHE.get(key)
    if cached is not None:
        _PREVIEW_CACHE.move_to_end(key)
    return cached


def _cache_put(key: tuple[str, int, int, str, bool], lines: list[str]) -> None:
    """Insert rendered preview lines and evict oldest overflow entries."""
    _PREVIEW_CACHE[key] = lines
    _PREVIEW_CACHE.move_to_end(key)
    while len(_PREVIEW_CACHE) > PREVIEW_CACHE_MAX:
        _PREVIEW_CACHE.popitem(last=False)


def clear_preview_cache() -> None:
    """Clear in-memory rendered preview cache."""
    _PREVIEW_CACHE.clear()


def _render_preview(entry: Entry, content: str, style: str, no_color: bool) -> list[str]:
    content = sanitize_terminal_text(content)
    if entry.is_directory or no_color:
        return content.splitlines()
    return colorize(content, entry.path, style).splitlines()


def preview_lines(
    entry: Entry | None,
    width: int,
    height: int,
    scroll: int = 0,
    *,
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
) -> tuple[str, list[str]]:
    """Return ``(title, rows)`` for the preview column of ``entry``.

    Rendered lines are cached by path, mtime, size, style and color mode, so
    redraws of an unchanged selection neither re-read nor re-highlight it.
    """
    if entry is None:
        return "Preview", ["Select a file to preview"][: max(0, height)]

    try:
        st = entry.path.stat()
    except OSError:
        source_lines = _render_preview(entry, load_preview(entry) or "", style, no_color)
    else:
        cache_key = (str(entry.path), int(st.st_mtime_ns), int(st.st_size), style, bool(no_color))
        source_lines = _cache_get(cache_key)
        if source_lines is None:
            source_lines = _render_preview(entry, load_preview(entry) or "", style, no_color)
            _cache_put(cache_key, source_lines)

    start = max(0, min(scroll, max(0, len(source_lines) - 1)))
    rows = [clip_ansi_line(line, width) for line in source_lines[start : start + max(0, height)]]
    return preview_title(len(source_lines), start, height), rows
