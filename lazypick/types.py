"""Core value types shared by the picker session, gateway, and renderer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


@dataclass(frozen=True)
class Entry:
    """One ranked candidate returned by the ranking engine."""

    name: str
    path: Path
    is_directory: bool


class Mode(Enum):
    """Input mode deciding which key table is active."""

    NAVIGATION = "navigation"
    TEXT_ENTRY = "text_entry"


@dataclass(frozen=True)
class Cancelled:
    """Terminal outcome: overlay closed without choosing anything."""


@dataclass(frozen=True)
class Activated:
    """Terminal outcome: a file entry was chosen and should be opened."""

    path: Path


Outcome = Cancelled | Activated
