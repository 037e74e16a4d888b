"""Terminal host for running the picker outside an editor.

Re-exports the key decoder and the standalone runtime entrypoint.
"""

from .app import run_terminal_picker
from .host import TerminalHost, overlay_geometry
from .keys import read_key

__all__ = ["TerminalHost", "overlay_geometry", "read_key", "run_terminal_picker"]
