#!/usr/bin/env python3
"""
pcat: Concatenate files into one Markdown document of fenced code blocks

Common usage:
  pcat ./src ./README.md          # All files in ./src plus one specific file
  pcat ./src -e py -e js          # Only .py and .js files in ./src
  pcat . --hidden                 # Include hidden files and directories
  pcat . --not '**/*_test.py'     # Exclude test files at any depth
  pcat ./src -n -c                # Line numbers, copied to the clipboard
  fd . -e py | pcat               # Paths read from stdin

If no paths are given, they are read from stdin, one per line.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import os
import stat
import sys
from dataclasses import dataclass
from pathlib import Path

from pcat.app import App
from pcat.clipboard import ClipboardError, copy_to_clipboard
from pcat.config import find_config_file, load_config, merge_cli_with_config
from pcat.render import encode_output
from pcat.types import ANY_EXTENSION, PcatConfig


@dataclass
class Options:
    """Command-line options for the pcat tool."""

    paths: list[str]
    extensions: list[str]
    exclude: list[str]
    with_line_numbers: bool
    hidden: bool
    list_only: bool
    clipboard: bool
    no_config: bool
    version: bool


def _build_parser() -> argparse.ArgumentParser:
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="pcat",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Files and/or directories to process (read from stdin if omitted)",
    )
    parser.add_argument(
        "-e",
        "--extension",
        action="append",
        dest="extensions",
        default=[],
        metavar="EXT",
        help="Filter directory files by extension (e.g. 'py', 'js'; 'any' for all). "
        "Can be repeated",
    )
    parser.add_argument(
        "--not",
        action="append",
        dest="exclude",
        default=[],
        metavar="PATTERN",
        help="Exclude files whose whole path matches a glob ('*' stays within one directory, "
        "'**' spans directories). Can be repeated",
    )
    # store_true flags default to None so config files can tell "unset" from "off"
    parser.add_argument(
        "-n",
        "--with-line-numbers",
        action="store_true",
        default=None,
        help="Include line numbers for each file",
    )
    parser.add_argument(
        "--hidden",
        action="store_true",
        default=None,
        help="Include hidden files and directories (names starting with '.')",
    )
    parser.add_argument(
        "-l",
        "--list",
        action="store_true",
        dest="list_only",
        help="List the files that would be processed, without printing content",
    )
    parser.add_argument(
        "-c",
        "--clipboard",
        action="store_true",
        help="Copy the output to the clipboard instead of printing to stdout",
    )
    parser.add_argument(
        "--no-config",
        action="store_true",
        help="Do not read .pcat.toml, pcat.toml or [tool.pcat] in pyproject.toml",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    return parser


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments. Flags and paths may be interleaved.

    Returns `(options, explicit_flags)`, where `explicit_flags` names the options the
    user actually passed (these win over config file values).
    """
    opts = _build_parser().parse_intermixed_args(args)

    explicit_flags: set[str] = set()
    if opts.extensions:
        explicit_flags.add("extensions")
    if opts.with_line_numbers is not None:
        explicit_flags.add("with_line_numbers")
    if opts.hidden is not None:
        explicit_flags.add("hidden")

    return (
        Options(
            paths=opts.paths,
            extensions=opts.extensions,
            exclude=opts.exclude,
            with_line_numbers=bool(opts.with_line_numbers),
            hidden=bool(opts.hidden),
            list_only=opts.list_only,
            clipboard=opts.clipboard,
            no_config=opts.no_config,
            version=opts.version,
        ),
        explicit_flags,
    )


def _normalize_extension(ext: str) -> str:
    """Accept `.py` as well as `py`."""
    return ext[1:] if ext.startswith(".") and len(ext) > 1 else ext


def _read_stdin_paths() -> list[str]:
    """Read one path per line from stdin, unless stdin is an interactive terminal."""
    if sys.stdin is None or sys.stdin.isatty():
        return []
    return [line.strip() for line in sys.stdin if line.strip()]


def _classify_paths(paths: list[str]) -> tuple[list[str], list[str]]:
    """Split paths into `(directories, files)`. Unreadable paths raise `OSError`."""
    directories: list[str] = []
    files: list[str] = []
    for path in paths:
        try:
            mode = os.stat(path).st_mode
        except OSError as e:
            raise OSError(f"invalid path '{path}': {e.strerror or e}") from e
        if stat.S_ISDIR(mode):
            directories.append(path)
        else:
            files.append(path)
    return directories, files


def build_config(options: Options) -> PcatConfig:
    """Turn parsed (and config-merged) options into the immutable pipeline config."""
    directories, specific_files = _classify_paths(options.paths)

    # Config files and the command line both accept `.py` as well as `py`.
    extensions = [_normalize_extension(e) for e in options.extensions]
    if directories and not extensions:
        extensions = [ANY_EXTENSION]

    return PcatConfig(
        directories=directories,
        specific_files=specific_files,
        extensions=frozenset(extensions),
        exclude_patterns=options.exclude,
        hidden=options.hidden,
        with_line_numbers=options.with_line_numbers,
        list_only=options.list_only,
        to_clipboard=options.clipboard,
    )


def _write_stdout(text: str) -> None:
    try:
        buffer = getattr(sys.stdout, "buffer", None)
        if buffer is None:
            sys.stdout.write(text)
            sys.stdout.flush()
        else:
            sys.stdout.flush()
            buffer.write(encode_output(text))
            buffer.flush()
    except BrokenPipeError:
        # Downstream closed early (e.g. `pcat . | head`). Silence the flush at exit.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the pcat CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("pcat")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if not options.paths:
        options.paths = _read_stdin_paths()
    if not options.paths:
        _build_parser().print_usage(sys.stderr)
        print("pcat: no paths provided", file=sys.stderr)
        return 1

    try:
        if not options.no_config:
            config_path = find_config_file(Path.cwd())
            if config_path:
                merge_cli_with_config(options, load_config(config_path), explicit_flags)

        config = build_config(options)
        result = App(config).run()

        for warning in result.warnings:
            print(f"Warning: {warning}", file=sys.stderr)

        if config.to_clipboard:
            copy_to_clipboard(result.output)
            print("pcat: Copied to clipboard.", file=sys.stderr)
        elif result.output:
            _write_stdout(result.output)
    except KeyboardInterrupt:
        print("\npcat: cancelled", file=sys.stderr)
        return 130
    except (OSError, ValueError, ClipboardError) as e:
        print(f"pcat: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
