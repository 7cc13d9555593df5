"""Configuration types for a pcat run."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

# Extension filter value that accepts every file, including files with no extension.
ANY_EXTENSION = "any"


@dataclass(frozen=True)
class PcatConfig:
    """
    Immutable settings for a single pipeline run.

    `directories` are walked recursively; `specific_files` are appended after the
    (sorted) directory results in the order given. An empty `extensions` set matches
    nothing; use `{"any"}` to accept all files.
    """

    directories: tuple[str, ...] = ()
    specific_files: tuple[str, ...] = ()
    extensions: frozenset[str] = field(default_factory=frozenset)
    exclude_patterns: tuple[str, ...] = ()
    hidden: bool = False
    with_line_numbers: bool = False
    list_only: bool = False
    to_clipboard: bool = False

    def __post_init__(self) -> None:
        # Accept lists for convenience, but never keep a mutable reference.
        object.__setattr__(self, "directories", _as_str_tuple(self.directories))
        object.__setattr__(self, "specific_files", _as_str_tuple(self.specific_files))
        object.__setattr__(self, "extensions", frozenset(self.extensions))
        object.__setattr__(self, "exclude_patterns", tuple(self.exclude_patterns))

    @property
    def any_extension(self) -> bool:
        return ANY_EXTENSION in self.extensions


def _as_str_tuple(paths: Iterable[object]) -> tuple[str, ...]:
    return tuple(str(p) for p in paths)
