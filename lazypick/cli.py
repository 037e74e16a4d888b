"""Command-line front door for lazypick.

Parses CLI options, resolves the starting directory, merges flags over the
persisted config, and runs the terminal picker. The picked file is opened in
``$EDITOR`` or, with ``--print``, written to stdout for shell composition.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

from .config import PickerConfig, config_path, default_config_data, load_picker_config, parse_engine_command, save_config
from .logging_setup import configure_logging
from .terminal.app import run_terminal_picker
from .terminal.editor import launch_editor
from .theme import available_theme_names

logger = logging.getLogger(__name__)


def resolve_start_directory(path: Path) -> Path:
    """Return the directory to browse for ``path``; files use their parent."""
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    path = path.resolve()
    return path if path.is_dir() else path.parent


def apply_cli_overrides(config: PickerConfig, args: argparse.Namespace) -> PickerConfig:
    """Return ``config`` with any explicitly passed CLI flags applied."""
    changes: dict[str, object] = {}
    if args.engine is not None:
        engine_command = parse_engine_command(args.engine)
        if engine_command is None:
            raise SystemExit(f"Invalid engine command: {args.engine!r}")
        changes["engine_command"] = engine_command
    if args.theme is not None:
        changes["theme"] = args.theme
    if args.style is not None:
        changes["style"] = args.style
    if args.no_preview:
        changes["show_preview"] = False
    if args.sync:
        changes["async_refresh"] = False
    return dataclasses.replace(config, **changes) if changes else config


def _init_config() -> None:
    target = config_path()
    if target.exists():
        raise SystemExit(f"Config already exists: {target}")
    save_config(default_config_data())
    sys.stdout.write(f"{target}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Pick a file with an incrementally filtered fuzzy finder."
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to browse. Defaults to current directory.")
    parser.add_argument("--query", default="", help="Start in insert mode with this filter text.")
    parser.add_argument("--engine", default=None, help="Ranking engine command (default: bundled lazypick-rank).")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--style", default=None, help="Pygments style name for the file preview.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--no-preview", action="store_true", help="Hide the file preview column.")
    parser.add_argument("--sync", action="store_true", help="Query the ranking engine on the input thread.")
    parser.add_argument("--print", dest="print_only", action="store_true", help="Print the picked path instead of opening it.")
    parser.add_argument("--show-config", action="store_true", help="Print the effective config as JSON and exit.")
    parser.add_argument("--init-config", action="store_true", help="Write a default config file and exit.")
    return parser


def main(argv: list[str] | None = None, default_path: Path | None = None) -> None:
    """Parse CLI arguments and run the picker.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    configure_logging()
    args = build_parser().parse_args(argv)

    if args.init_config:
        _init_config()
        return

    config = apply_cli_overrides(load_picker_config(), args)
    if args.show_config:
        sys.stdout.write(json.dumps(dataclasses.asdict(config), indent=2) + "\n")
        return

    if default_path is None:
        default_path = Path.cwd()
    directory = resolve_start_directory(Path(args.path or default_path))

    picked = run_terminal_picker(directory, config, no_color=args.no_color, initial_query=args.query)
    if picked is None:
        return
    if args.print_only:
        sys.stdout.write(f"{picked}\n")
        return
    error = launch_editor(picked)
    if error is not None:
        logger.warning("could not open %s: %s", picked, error)
        sys.stderr.write(f"{error}\n")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
