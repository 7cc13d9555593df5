"""
The pcat pipeline: walk directories, merge explicit files, deduplicate, exclude,
then either list the surviving paths or render their contents.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from pcat.file_resolver import DirectoryWalker, ExclusionFilter, deduplicate
from pcat.render import render_files
from pcat.types import PcatConfig


@dataclass
class RunResult:
    """Output of a pipeline run. `warnings` go to diagnostics, never into `output`."""

    output: str
    files: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def list_paths(files: Sequence[str]) -> str:
    """Newline-terminated path listing, or `""` when there is nothing to list."""
    if not files:
        return ""
    return "\n".join(files) + "\n"


class App:
    """
    Runs one selection-and-rendering pass for a fixed `PcatConfig`.

    Exclusion patterns are compiled up front, so a malformed pattern raises
    `InvalidPatternError` from the constructor.
    """

    def __init__(self, config: PcatConfig) -> None:
        self._config: PcatConfig = config
        self._walker: DirectoryWalker = DirectoryWalker(config.extensions, config.hidden)
        self._exclusion: ExclusionFilter = ExclusionFilter(config.exclude_patterns)

    @property
    def config(self) -> PcatConfig:
        return self._config

    def select_files(self, warnings: list[str] | None = None) -> list[str]:
        """
        Resolve the final, ordered file list.

        Directory results come first (sorted), then explicit files in the order given.
        Walk errors propagate as `OSError`.
        """
        directory_files = self._walker.walk(self._config.directories)
        candidates = directory_files + list(self._config.specific_files)
        unique = deduplicate(candidates, warnings)
        return self._exclusion.apply(unique)

    def run(self) -> RunResult:
        warnings: list[str] = []
        files = self.select_files(warnings)

        if self._config.list_only:
            return RunResult(output=list_paths(files), files=files, warnings=warnings)

        rendered = render_files(files, self._config.with_line_numbers)
        return RunResult(
            output=rendered.text, files=files, warnings=warnings + rendered.warnings
        )
