"""Editor launch helper for opening the picked file.

Runs ``$VISUAL``/``$EDITOR`` on the chosen path after the TUI has released the
terminal. Returns an error message string instead of raising for UI-friendly
handling.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


def editor_command() -> list[str] | None:
    """Return the user's editor argv prefix, or ``None`` when unset/empty."""
    editor_env = (os.environ.get("VISUAL") or os.environ.get("EDITOR") or "").strip()
    if not editor_env:
        return None
    try:
        cmd = shlex.split(editor_env)
    except ValueError:
        return None
    return cmd or None


def launch_editor(target: Path) -> str | None:
    cmd = editor_command()
    if cmd is None:
        return "Cannot edit: $EDITOR is not set."
    try:
        subprocess.run([*cmd, str(target)], check=False)
    except Exception as exc:
        logger.warning("editor launch failed for %s: %s", target, exc)
        return f"Failed to launch editor: {exc}"
    return None
