"""
Rendering of selected files into a single Markdown document.

Each file becomes a block: the path in inline code, an opening fence tagged with the
file's extension, the (optionally line-numbered) content, and a closing fence. Blocks
are rendered independently and concatenated in input order, followed by a final `---`
separator line. Markdown files get a four-backtick fence so that any triple-backtick
fences inside them cannot close the block early.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from pcat.file_resolver.walker import file_extension

FENCE = "```"
MARKDOWN_FENCE = "````"
DEFAULT_LANGUAGE = "txt"
DOCUMENT_END = "---\n"

_MARKDOWN_TAGS = frozenset({"md", "markdown"})


@dataclass
class RenderResult:
    """
    Rendered document plus any warnings raised along the way.

    Warnings are never embedded in `text`; callers decide where to report them.
    """

    text: str
    """The full document, or `""` if no file could be rendered."""

    files_rendered: int = 0
    """Number of files that produced a block."""

    warnings: list[str] = field(default_factory=list)
    """Per-file diagnostics (e.g. skipped binary files), in file order."""


def fence_for(path: str) -> tuple[str, str]:
    """Return `(fence, language_tag)` for a file, chosen from its lower-cased extension."""
    lang = file_extension(path).lower() or DEFAULT_LANGUAGE
    if lang in _MARKDOWN_TAGS:
        return MARKDOWN_FENCE, "markdown"
    return FENCE, lang


def number_lines(content: str) -> str:
    """
    Prefix each line with a right-aligned line number (width 4) and ` | `.

    Lines are split on `\\n` with any trailing `\\r` dropped. A final newline does not
    start an extra numbered line.
    """
    lines = [line.removesuffix("\r") for line in content.split("\n")]
    if lines[-1] == "":
        lines.pop()
    return "".join(f"{i:4d} | {line}\n" for i, line in enumerate(lines, 1))


def render_file(
    path: str, with_line_numbers: bool = False, warnings: list[str] | None = None
) -> str | None:
    """
    Render one file as a fenced block, or return `None` if it is skipped.

    Unreadable files are skipped silently. Files containing a NUL byte are treated as
    binary and skipped with a warning.
    """
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError:
        return None

    if b"\0" in raw:
        if warnings is not None:
            warnings.append(f"skipping binary file {path}")
        return None

    # Undecodable bytes survive as surrogates and are restored when the output is encoded.
    content = raw.decode("utf-8", errors="surrogateescape")
    body = number_lines(content) if with_line_numbers else content
    if body and not body.endswith("\n"):
        body += "\n"

    fence, lang = fence_for(path)
    return f"`{path}`\n{fence}{lang}\n{body}{fence}\n\n"


def encode_output(text: str) -> bytes:
    """Encode rendered text as UTF-8, restoring any bytes that were not valid UTF-8."""
    return text.encode("utf-8", errors="surrogateescape")


def render_files(files: Sequence[str], with_line_numbers: bool = False) -> RenderResult:
    """
    Render all files into one document, in the given order.

    The document ends with a `---` line after the last block, separated from it by a
    blank line. If no file was rendered the document is the empty string.
    """
    warnings: list[str] = []
    blocks: list[str] = []
    for path in files:
        block = render_file(path, with_line_numbers, warnings)
        if block is not None:
            blocks.append(block)

    if not blocks:
        return RenderResult(text="", warnings=warnings)

    # Each block already ends in a blank line, which doubles as the gap before `---`.
    return RenderResult(
        text="".join(blocks) + DOCUMENT_END,
        files_rendered=len(blocks),
        warnings=warnings,
    )
