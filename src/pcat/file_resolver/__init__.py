"""
File selection for pcat: directory walking, deduplication and glob exclusion.

No imports from `pcat` outside this package except the shared `pcat.types`.

Usage::

    from pcat.file_resolver import DirectoryWalker, ExclusionFilter, deduplicate

    found = DirectoryWalker({"py", "md"}).walk(["src"])
    unique = deduplicate(found + ["README.md"])
    files = ExclusionFilter(["**/test_*.py"]).apply(unique)
"""

from pcat.file_resolver.exclusion import (
    ExclusionFilter,
    GlobMatcher,
    GlobstarMatcher,
    InvalidPatternError,
)
from pcat.file_resolver.paths import canonical_identity, deduplicate
from pcat.file_resolver.walker import (
    DirectoryWalker,
    file_extension,
    has_valid_extension,
    is_hidden,
)

__all__ = [
    "DirectoryWalker",
    "ExclusionFilter",
    "GlobMatcher",
    "GlobstarMatcher",
    "InvalidPatternError",
    "canonical_identity",
    "deduplicate",
    "file_extension",
    "has_valid_extension",
    "is_hidden",
]
