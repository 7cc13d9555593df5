"""Canonical path identity and order-preserving deduplication."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path


def canonical_identity(path: str, warnings: list[str] | None = None) -> str:
    """
    Return the symlink-free absolute form of `path`, used only to compare paths.

    If the path cannot be fully resolved (missing target, symlink loop, permission
    problem), fall back to the normalized absolute path without symlink resolution
    and record a warning instead of failing.
    """
    try:
        return str(Path(path).resolve(strict=True))
    except (OSError, RuntimeError) as e:
        if warnings is not None:
            warnings.append(f"could not resolve path {path}: {e}; comparing by absolute path")
        return os.path.abspath(path)


def deduplicate(paths: Iterable[str], warnings: list[str] | None = None) -> list[str]:
    """
    Drop paths whose canonical identity was already seen.

    The first occurrence wins and keeps its original spelling; overall order is
    preserved.
    """
    seen: set[str] = set()
    result: list[str] = []
    for p in paths:
        identity = canonical_identity(p, warnings)
        if identity not in seen:
            seen.add(identity)
            result.append(p)
    return result
