"""Process gateway to the external ranking engine.

One call spawns one engine process scoped to a working directory, waits for
it, and decodes its JSON standard output into :class:`Entry` values. Every
failure mode collapses to an empty result list so a misbehaving engine can
never freeze or corrupt a picker session.
"""

from __future__ import annotations

import json
import logging
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from .types import Entry

logger = logging.getLogger(__name__)

DEFAULT_ENGINE_COMMAND: tuple[str, ...] = (sys.executable, "-m", "lazypick.engine")


def engine_argv(engine_command: Sequence[str], query: str) -> list[str]:
    """Build the full engine argv for ``query``."""
    return [*engine_command, "--json", "--query", query]


def _decode_entry(raw: object, working_directory: Path) -> Entry | None:
    """Validate one decoded JSON element, returning ``None`` when malformed."""
    if not isinstance(raw, dict):
        return None
    name = raw.get("name")
    path = raw.get("path")
    is_dir = raw.get("is_dir")
    if not isinstance(name, str) or not isinstance(path, str) or not path:
        return None
    if not isinstance(is_dir, bool):
        return None
    resolved = Path(path)
    if not resolved.is_absolute():
        resolved = working_directory / resolved
    return Entry(name=name, path=resolved, is_directory=is_dir)


def decode_entries(output: str, working_directory: Path) -> list[Entry] | None:
    """Decode engine output into entries.

    Returns ``None`` when the output is not a JSON list of well-formed entry
    objects. A single malformed element invalidates the whole response.
    """
    try:
        data = json.loads(output)
    except (TypeError, ValueError):
        return None
    if not isinstance(data, list):
        return None

    entries: list[Entry] = []
    for raw in data:
        entry = _decode_entry(raw, working_directory)
        if entry is None:
            return None
        entries.append(entry)
    return entries


def query_entries(
    working_directory: Path,
    query: str,
    engine_command: Sequence[str] | None = None,
) -> list[Entry]:
    """Run the ranking engine once and return its ranked entries.

    The engine runs with ``working_directory`` as its cwd and receives
    ``query`` through ``--query``. Start failures and malformed output yield
    ``[]``. The exit status is only consulted for logging: output that parses
    is accepted even from a non-zero exit.
    """
    command = tuple(engine_command) if engine_command else DEFAULT_ENGINE_COMMAND
    argv = engine_argv(command, query)
    try:
        proc = subprocess.run(
            argv,
            cwd=working_directory,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except Exception as exc:
        logger.warning("ranking engine could not start (%s): %s", argv[0], exc)
        return []

    entries = decode_entries(proc.stdout, Path(working_directory))
    if entries is None:
        logger.warning(
            "ranking engine produced malformed output (exit %s, query=%r, cwd=%s)",
            proc.returncode,
            query,
            working_directory,
        )
        return []
    if proc.returncode != 0:
        logger.debug("ranking engine exited %s with parseable output", proc.returncode)
    return entries
