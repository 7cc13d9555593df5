"""
TOML-based config file loading for pcat.

Searches for `.pcat.toml`, `pcat.toml`, or `pyproject.toml [tool.pcat]` walking up
from the current directory. Config values are merged with CLI flags using three-way
precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


@dataclass
class PcatFileConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    extensions: list[str] | None = None
    exclude: list[str] | None = None
    hidden: bool | None = None
    with_line_numbers: bool | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".pcat.toml", "pcat.toml", "pyproject.toml"]

# Mapping from TOML kebab-case keys to Python snake_case field names
_KEBAB_TO_SNAKE: dict[str, str] = {
    "with-line-numbers": "with_line_numbers",
    "line-numbers": "with_line_numbers",
    "extension": "extensions",
    "not": "exclude",
}

_VALID_FIELDS = {f.name for f in fields(PcatFileConfig)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Locate the pcat settings that apply to `start_dir`.

    Each directory from `start_dir` up to the filesystem root is checked in turn. The
    nearest directory holding a pcat config wins; within it `.pcat.toml` is preferred
    over `pcat.toml`, and a `pyproject.toml` counts only if it has a `[tool.pcat]` table.
    """
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        for filename in _CONFIG_FILENAMES:
            candidate = directory / filename
            if not candidate.is_file():
                continue
            if filename != "pyproject.toml" or _pyproject_has_pcat_section(candidate):
                return candidate
    return None


def _pyproject_has_pcat_section(path: Path) -> bool:
    """True if `path` parses as TOML and defines `[tool.pcat]`. Unreadable files don't."""
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError):
        return False
    return "pcat" in data.get("tool", {})


def load_config(config_path: Path) -> PcatFileConfig:
    """
    Load a `PcatFileConfig` from a TOML file. Supports both standalone
    `pcat.toml` / `.pcat.toml` and `pyproject.toml` (extracts `[tool.pcat]`).

    A malformed file produces a warning and an empty config rather than an error.
    """
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        print(f"Warning: ignoring invalid config file {config_path}: {e}", file=sys.stderr)
        return PcatFileConfig()

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("pcat", {})

    return _parse_config_data(data, source=config_path)


def _parse_config_data(data: dict[str, Any], source: Path | None = None) -> PcatFileConfig:
    """Parse a flat or sectioned TOML dict into `PcatFileConfig`."""
    # Flatten sections: e.g. [selection] and [output] merge into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = _KEBAB_TO_SNAKE.get(key, key.replace("-", "_"))
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = value
        else:
            where = f" in {source}" if source else ""
            print(f"Warning: unrecognized config key '{key}'{where}", file=sys.stderr)

    for name, value in list(mapped.items()):
        if not _has_valid_type(name, value):
            print(
                f"Warning: ignoring config key '{name}' with invalid value {value!r}",
                file=sys.stderr,
            )
            del mapped[name]

    return PcatFileConfig(**mapped)


def _has_valid_type(name: str, value: Any) -> bool:
    if name in ("extensions", "exclude"):
        return isinstance(value, list) and all(isinstance(v, str) for v in cast(list[Any], value))
    return isinstance(value, bool)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: PcatFileConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults. Exclusion
    patterns are additive: config patterns come first, then the CLI's.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(PcatFileConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue  # Not set in config

        if cfg_field.name == "exclude":
            current = getattr(cli_opts, "exclude", [])
            setattr(cli_opts, "exclude", list(cfg_value) + list(current))
            continue

        # Skip if CLI explicitly set this flag
        if cfg_field.name in explicit_flags:
            continue

        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
