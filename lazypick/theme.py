"""UI theme definitions and selection helpers.

Themes map the renderer's highlight style names to ANSI sequences. Syntax
highlighting style for the preview remains a separate Pygments setting.
"""

from __future__ import annotations

from dataclasses import dataclass

from .render import (
    STYLE_DIRECTORY,
    STYLE_HEADER,
    STYLE_MESSAGE,
    STYLE_PROMPT,
    STYLE_SELECTED,
    STYLE_SEPARATOR,
)


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by terminal hosts."""

    name: str
    reset: str
    header: str
    prompt: str
    separator: str
    directory: str
    selected: str
    message: str
    border: str
    title: str
    footer_normal: str
    footer_insert: str

    def style(self, style_name: str) -> str:
        """Return the ANSI prefix for a renderer highlight style."""
        return {
            STYLE_HEADER: self.header,
            STYLE_PROMPT: self.prompt,
            STYLE_SEPARATOR: self.separator,
            STYLE_DIRECTORY: self.directory,
            STYLE_SELECTED: self.selected,
            STYLE_MESSAGE: self.message,
        }.get(style_name, "")


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    header="\033[36m",
    prompt="\033[1;38;5;81m",
    separator="\033[2m",
    directory="\033[1;34m",
    selected="\033[48;5;117;38;5;16m",
    message="\033[2;38;5;250m",
    border="\033[38;5;45m",
    title="\033[1;38;5;45m",
    footer_normal="\033[36m",
    footer_insert="\033[32m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    header="\033[38;5;117m",
    prompt="\033[1;38;5;45m",
    separator="\033[2;38;5;31m",
    directory="\033[1;38;5;45m",
    selected="\033[7m",
    message="\033[2;38;5;110m",
    border="\033[38;5;39m",
    title="\033[1;38;5;39m",
    footer_normal="\033[38;5;117m",
    footer_insert="\033[38;5;84m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    header="",
    prompt="",
    separator="",
    directory="",
    selected="",
    message="",
    border="",
    title="",
    footer_normal="",
    footer_insert="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
