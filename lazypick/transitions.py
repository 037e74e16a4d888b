"""Tagged transition variants applied to a picker session."""

from __future__ import annotations

from dataclasses import dataclass

from .types import Mode


@dataclass(frozen=True)
class TypeCharacter:
    char: str


@dataclass(frozen=True)
class DeleteCharacter:
    pass


@dataclass(frozen=True)
class ClearQuery:
    pass


@dataclass(frozen=True)
class MoveSelection:
    delta: int


@dataclass(frozen=True)
class JumpToFirst:
    pass


@dataclass(frozen=True)
class JumpToLast:
    pass


@dataclass(frozen=True)
class HalfPage:
    """Move by half the viewport; ``direction`` is ``1`` or ``-1``."""

    direction: int


@dataclass(frozen=True)
class Activate:
    pass


@dataclass(frozen=True)
class GoBack:
    pass


@dataclass(frozen=True)
class SwitchMode:
    mode: Mode


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class ScrollPreview:
    delta: int


Transition = (
    TypeCharacter
    | DeleteCharacter
    | ClearQuery
    | MoveSelection
    | JumpToFirst
    | JumpToLast
    | HalfPage
    | Activate
    | GoBack
    | SwitchMode
    | Cancel
    | ScrollPreview
)

# Action names accepted in key override config.
NAMED_TRANSITIONS: dict[str, Transition] = {
    "down": MoveSelection(1),
    "up": MoveSelection(-1),
    "first": JumpToFirst(),
    "last": JumpToLast(),
    "half_page_down": HalfPage(1),
    "half_page_up": HalfPage(-1),
    "activate": Activate(),
    "back": GoBack(),
    "insert": SwitchMode(Mode.TEXT_ENTRY),
    "normal": SwitchMode(Mode.NAVIGATION),
    "cancel": Cancel(),
    "delete": DeleteCharacter(),
    "clear": ClearQuery(),
    "preview_down": ScrollPreview(5),
    "preview_up": ScrollPreview(-5),
}
