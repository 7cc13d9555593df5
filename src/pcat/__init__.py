"""
pcat: concatenate files into a single Markdown document of fenced code blocks.
"""

from pcat.app import App, RunResult
from pcat.file_resolver import InvalidPatternError
from pcat.render import RenderResult, render_files
from pcat.types import ANY_EXTENSION, PcatConfig

__all__ = [
    "ANY_EXTENSION",
    "App",
    "InvalidPatternError",
    "PcatConfig",
    "RenderResult",
    "RunResult",
    "render_files",
]
