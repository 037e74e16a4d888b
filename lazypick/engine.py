"""Bundled ranking engine: ``lazypick-rank [DIR] --json --query QUERY``.

Lists one directory, fuzzy-scores entry names against the query, and prints
the survivors best-first. With ``--json`` the output is the list contract the
picker's process gateway consumes::

    [{"name": "src", "path": "/abs/src", "is_dir": true, "score": 25}, ...]

Any program honoring that contract can replace this engine through the
``engine_command`` config key.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path

PARENT_NAME = ".."
SEPARATORS = "/_-."


@dataclass(frozen=True)
class RankedEntry:
    name: str
    path: Path
    is_dir: bool
    score: int

    def to_json(self) -> dict[str, object]:
        return {
            "name": self.name,
            "path": str(self.path),
            "is_dir": self.is_dir,
            "score": self.score,
        }


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score ``candidate`` as a case-insensitive subsequence match of ``query``.

    Every matched character earns a base score; consecutive matches, a match
    at position 0, and matches right after a separator earn bonuses. Longer
    candidates pay a small length penalty. ``None`` means no match.
    """
    if not query:
        return 0
    query_folded = query.casefold()
    candidate_folded = candidate.casefold()

    score = 0
    prev_idx = -1
    for needle in query_folded:
        idx = candidate_folded.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        score += 10
        if prev_idx >= 0 and idx == prev_idx + 1:
            score += 5
        if idx == 0:
            score += 15
        elif candidate_folded[idx - 1] in SEPARATORS:
            score += 10
        prev_idx = idx

    score -= len(candidate_folded)
    return score


def list_directory(directory: Path, show_hidden: bool = True) -> list[tuple[str, Path, bool]]:
    """Return ``(name, path, is_dir)`` children, directories first.

    A ``..`` entry pointing at the parent leads the list unless ``directory``
    is the filesystem root.
    """
    directory = directory.resolve()
    children: list[tuple[str, Path, bool]] = []
    with os.scandir(directory) as it:
        for item in it:
            if not show_hidden and item.name.startswith("."):
                continue
            try:
                is_dir = item.is_dir()
            except OSError:
                is_dir = False
            children.append((item.name, directory / item.name, is_dir))
    children.sort(key=lambda child: (not child[2], child[0].casefold(), child[0]))
    if directory.parent != directory:
        children.insert(0, (PARENT_NAME, directory.parent, True))
    return children


def rank_directory(directory: Path, query: str, show_hidden: bool = True) -> list[RankedEntry]:
    """Return children of ``directory`` matching ``query``, best score first.

    Ties keep listing order, so an empty query yields the plain listing.
    """
    ranked: list[tuple[int, int, RankedEntry]] = []
    for position, (name, path, is_dir) in enumerate(list_directory(directory, show_hidden)):
        score = fuzzy_score(query, name)
        if score is None:
            continue
        ranked.append((-score, position, RankedEntry(name=name, path=path, is_dir=is_dir, score=score)))
    ranked.sort(key=lambda item: (item[0], item[1]))
    return [entry for _, _, entry in ranked]


def split_query(argv: list[str]) -> tuple[str | None, list[str]]:
    """Remove ``--query VALUE`` from ``argv`` and return ``(value, rest)``.

    The token after ``--query`` is taken literally, so queries such as ``-c``
    or ``--`` are not mistaken for options. The last occurrence wins.
    """
    query: str | None = None
    rest: list[str] = []
    index = 0
    while index < len(argv):
        token = argv[index]
        if token == "--query" and index + 1 < len(argv):
            query = argv[index + 1]
            index += 2
            continue
        if token.startswith("--query="):
            query = token[len("--query=") :]
            index += 1
            continue
        rest.append(token)
        index += 1
    return query, rest


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="lazypick-rank",
        description="Rank directory entries against a fuzzy query.",
    )
    parser.add_argument("directory", nargs="?", default=None, help="Directory to list. Defaults to cwd.")
    parser.add_argument("--query", default="", help="Fuzzy query (empty lists everything).")
    parser.add_argument("--json", action="store_true", help="Emit a JSON list of entries.")
    parser.add_argument("--no-hidden", action="store_true", help="Skip dot-files.")
    query, rest = split_query(sys.argv[1:] if argv is None else list(argv))
    args = parser.parse_args(rest)
    if query is not None:
        args.query = query

    directory = Path(args.directory) if args.directory else Path.cwd()
    try:
        ranked = rank_directory(directory, args.query, show_hidden=not args.no_hidden)
    except OSError as exc:
        print(f"lazypick-rank: {exc}", file=sys.stderr)
        if args.json:
            print("[]")
        return 1

    if args.json:
        json.dump([entry.to_json() for entry in ranked], sys.stdout)
        sys.stdout.write("\n")
    else:
        for entry in ranked:
            sys.stdout.write(f"{entry.path}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
