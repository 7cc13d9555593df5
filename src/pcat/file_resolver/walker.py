"""
DirectoryWalker: recursive file discovery under one or more directory roots.

Hidden directories are pruned during traversal (never entered), and files are kept
only if their extension matches the configured filter set.
"""

from __future__ import annotations

import os
from collections.abc import Collection, Iterable, Sequence

from pcat.types import ANY_EXTENSION


def file_extension(path: str) -> str:
    """
    Extension of the final path component: the text after its last `.`, or `""`.

    Unlike `os.path.splitext`, a leading dot counts, so `.env` has extension `env`.
    """
    name = os.path.basename(path)
    dot = name.rfind(".")
    return name[dot + 1 :] if dot >= 0 else ""


def has_valid_extension(path: str, extensions: Collection[str]) -> bool:
    """Case-sensitive extension check. `"any"` matches everything; no filters match nothing."""
    if not extensions:
        return False
    if ANY_EXTENSION in extensions:
        return True
    return file_extension(path) in extensions


def is_hidden(path: str, root: str) -> bool:
    """True if any part of `path` relative to `root` (other than `.`/`..`) starts with a dot."""
    try:
        rel = os.path.relpath(path, root)
    except ValueError:
        # Different drives on Windows.
        return False
    return any(
        part.startswith(".") and part not in (".", "..") for part in rel.split(os.sep)
    )


def _raise_walk_error(error: OSError) -> None:
    raise error


class DirectoryWalker:
    """
    Walks directory roots and returns a sorted, duplicate-free list of file paths.

    Paths keep the form of the root they were found under (relative roots give
    relative paths). Any I/O error during traversal aborts the walk.
    """

    def __init__(self, extensions: Collection[str], include_hidden: bool = False) -> None:
        self._extensions: frozenset[str] = frozenset(extensions)
        self._include_hidden: bool = include_hidden

    def walk(self, roots: Sequence[str]) -> list[str]:
        # dict keeps insertion order, so the union is well defined before sorting.
        found: dict[str, None] = {}
        for root in roots:
            for path in self._walk_root(root):
                found.setdefault(path, None)
        return sorted(found)

    def _walk_root(self, root: str) -> Iterable[str]:
        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
            if not self._include_hidden:
                # Prune hidden directories in-place (prevents descent)
                dirnames[:] = [d for d in dirnames if not d.startswith(".")]

            for filename in filenames:
                filepath = os.path.normpath(os.path.join(dirpath, filename))
                if not self._include_hidden and is_hidden(filepath, root):
                    continue
                if has_valid_extension(filepath, self._extensions):
                    yield filepath
