"""
Glob-based exclusion of candidate paths, using wcmatch.

Each pattern is matched against the whole `/`-separated path. `*`, `?` and `[...]`
never cross a `/`, `**` as a full segment spans any number of directories, and
`{a,b}` alternatives are expanded. Names starting with `.` are matched like any
other. There is no gitignore-style behavior: `*.md` only matches top-level paths,
`src` matches only the path `src` itself, and a leading `!` is a literal character.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from wcmatch import glob

GLOB_FLAGS = glob.GLOBSTAR | glob.DOTGLOB | glob.BRACE | glob.FORCEUNIX


class InvalidPatternError(ValueError):
    """An exclusion pattern could not be compiled."""


class GlobMatcher(Protocol):
    """Compiled set of exclusion patterns, matched against `/`-separated paths."""

    def matches(self, posix_path: str) -> bool: ...


def check_pattern(pattern: str) -> None:
    """
    Raise `InvalidPatternError` for a malformed glob: an unclosed `[...]` class, an
    unclosed `{...}` group, or a trailing escape.
    """
    i, n = 0, len(pattern)
    depth = 0
    while i < n:
        c = pattern[i]
        if c == "\\":
            if i + 1 == n:
                raise InvalidPatternError(f"invalid exclude pattern '{pattern}': trailing '\\'")
            i += 2
            continue
        if c == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            # A `]` right after the opening bracket is a member, not the close.
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 2 if pattern[j] == "\\" else 1
            if j >= n:
                raise InvalidPatternError(
                    f"invalid exclude pattern '{pattern}': unclosed character class"
                )
            i = j + 1
            continue
        if c == "{":
            depth += 1
        elif c == "}" and depth:
            depth -= 1
        i += 1
    if depth:
        raise InvalidPatternError(f"invalid exclude pattern '{pattern}': unclosed '{{'")


class GlobstarMatcher:
    """
    `GlobMatcher` that matches whole paths with globstar semantics via
    `wcmatch.glob.globmatch`.

    Absolute paths are matched with their leading `/` removed, against patterns with
    any leading `/` removed, so `**/src/*.py` and `/home/me/src/*.py` both apply.
    """

    def __init__(self, patterns: Sequence[str]) -> None:
        for pattern in patterns:
            check_pattern(pattern)
        self._patterns: list[str] = list(patterns)
        self._rooted: list[str] = [p.lstrip("/") for p in patterns]

    def matches(self, posix_path: str) -> bool:
        if posix_path.startswith("/"):
            return glob.globmatch(posix_path.lstrip("/"), self._rooted, flags=GLOB_FLAGS)
        return glob.globmatch(posix_path, self._patterns, flags=GLOB_FLAGS)


class ExclusionFilter:
    """
    Drops paths matching any exclusion pattern. With no patterns it is a pass-through.

    A malformed pattern raises `InvalidPatternError` at construction, before any path
    is examined.
    """

    def __init__(self, patterns: Sequence[str], matcher: GlobMatcher | None = None) -> None:
        self._patterns: tuple[str, ...] = tuple(patterns)
        self._matcher: GlobMatcher | None = matcher
        if self._matcher is None and self._patterns:
            self._matcher = GlobstarMatcher(self._patterns)

    def apply(self, paths: Sequence[str]) -> list[str]:
        if self._matcher is None:
            return list(paths)
        return [p for p in paths if not self._matcher.matches(Path(p).as_posix())]
