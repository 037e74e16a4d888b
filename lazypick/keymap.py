"""Mode-specific key tables and the dispatcher that resolves key tokens.

Key tokens are the strings produced by :func:`lazypick.terminal.read_key`
(``"j"``, ``"DOWN"``, ``"ENTER"``, ``"CTRL_D"`` ...). A binding key may be a
chord of single-character tokens such as ``"gg"``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from .transitions import (
    NAMED_TRANSITIONS,
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
from .types import Mode

logger = logging.getLogger(__name__)

NAVIGATION_BINDINGS: Mapping[str, Transition] = MappingProxyType(
    {
        "j": MoveSelection(1),
        "DOWN": MoveSelection(1),
        "k": MoveSelection(-1),
        "UP": MoveSelection(-1),
        "gg": JumpToFirst(),
        "HOME": JumpToFirst(),
        "G": JumpToLast(),
        "END": JumpToLast(),
        "CTRL_D": HalfPage(1),
        "PAGE_DOWN": HalfPage(1),
        "CTRL_U": HalfPage(-1),
        "PAGE_UP": HalfPage(-1),
        "ENTER": Activate(),
        "l": Activate(),
        "RIGHT": Activate(),
        "h": GoBack(),
        "LEFT": GoBack(),
        "BACKSPACE": GoBack(),
        "-": GoBack(),
        "i": SwitchMode(Mode.TEXT_ENTRY),
        "/": SwitchMode(Mode.TEXT_ENTRY),
        "ESC": Cancel(),
        "q": Cancel(),
        "CTRL_C": Cancel(),
        "CTRL_E": ScrollPreview(5),
        "CTRL_Y": ScrollPreview(-5),
    }
)

TEXT_ENTRY_BINDINGS: Mapping[str, Transition] = MappingProxyType(
    {
        "ESC": SwitchMode(Mode.NAVIGATION),
        "ENTER": Activate(),
        "BACKSPACE": DeleteCharacter(),
        "CTRL_U": ClearQuery(),
        "CTRL_C": Cancel(),
    }
)

DEFAULT_BINDINGS: Mapping[Mode, Mapping[str, Transition]] = MappingProxyType(
    {
        Mode.NAVIGATION: NAVIGATION_BINDINGS,
        Mode.TEXT_ENTRY: TEXT_ENTRY_BINDINGS,
    }
)


def is_printable_key(key: str) -> bool:
    """Return whether ``key`` is one printable character."""
    return len(key) == 1 and key.isprintable()


def is_chord(combo: str) -> bool:
    """Return whether a binding key is a multi-character chord like ``gg``.

    Named tokens (``DOWN``, ``CTRL_D``) are upper case and never chords.
    """
    return len(combo) > 1 and not combo.isupper()


def resolve_key(
    mode: Mode,
    key: str,
    bindings: Mapping[Mode, Mapping[str, Transition]] = DEFAULT_BINDINGS,
) -> Transition | None:
    """Map one ``(mode, key)`` pair to a transition.

    Unmapped navigation keys resolve to ``None``; unmapped printable keys in
    text-entry mode become :class:`TypeCharacter`.
    """
    transition = bindings[mode].get(key)
    if transition is not None:
        return transition
    if mode is Mode.TEXT_ENTRY and is_printable_key(key):
        return TypeCharacter(key)
    return None


def build_bindings(
    navigation_overrides: Mapping[str, str] | None = None,
    text_entry_overrides: Mapping[str, str] | None = None,
) -> dict[Mode, dict[str, Transition]]:
    """Merge named-action overrides from config into the default tables.

    Unknown action names are logged and skipped; ``"none"`` unbinds a key.
    """
    merged: dict[Mode, dict[str, Transition]] = {
        mode: dict(table) for mode, table in DEFAULT_BINDINGS.items()
    }
    for mode, overrides in (
        (Mode.NAVIGATION, navigation_overrides or {}),
        (Mode.TEXT_ENTRY, text_entry_overrides or {}),
    ):
        for key, action in overrides.items():
            if action == "none":
                merged[mode].pop(key, None)
                continue
            transition = NAMED_TRANSITIONS.get(action)
            if transition is None:
                logger.warning("unknown key action %r for %r in %s mode", action, key, mode.value)
                continue
            merged[mode][key] = transition
    return merged


class KeyDispatcher:
    """Resolve key tokens to transitions, buffering chord prefixes like ``g``."""

    def __init__(self, bindings: Mapping[Mode, Mapping[str, Transition]] = DEFAULT_BINDINGS) -> None:
        self.bindings = bindings
        self._pending = ""
        self._pending_mode: Mode | None = None

    @property
    def pending(self) -> str:
        return self._pending

    def _is_chord_prefix(self, mode: Mode, prefix: str) -> bool:
        return any(
            is_chord(combo) and len(combo) > len(prefix) and combo.startswith(prefix)
            for combo in self.bindings[mode]
        )

    def reset(self) -> None:
        self._pending = ""
        self._pending_mode = None

    def dispatch(self, mode: Mode, key: str) -> Transition | None:
        """Resolve ``key`` in ``mode``; returns ``None`` while a chord is open."""
        if self._pending and self._pending_mode is mode and is_printable_key(key):
            chord = self._pending + key
            self.reset()
            transition = self.bindings[mode].get(chord)
            if transition is not None:
                return transition
            if self._is_chord_prefix(mode, chord):
                self._pending = chord
                self._pending_mode = mode
                return None
        else:
            self.reset()

        if mode is Mode.NAVIGATION and is_printable_key(key) and self._is_chord_prefix(mode, key):
            if key not in self.bindings[mode]:
                self._pending = key
                self._pending_mode = mode
                return None
        return resolve_key(mode, key, self.bindings)

    def bound_keys(self, mode: Mode) -> list[str]:
        """Return single-token keys a host needs to register for ``mode``.

        Chords contribute their individual characters.
        """
        keys: list[str] = []
        for combo in self.bindings[mode]:
            parts = list(combo) if is_chord(combo) else [combo]
            for part in parts:
                if part not in keys:
                    keys.append(part)
        return keys
