"""Copy text to the system clipboard by piping it to a host clipboard utility."""

from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass

from pcat.render import encode_output


class ClipboardError(Exception):
    """No clipboard mechanism on this host accepted the text."""


@dataclass(frozen=True)
class ClipboardCommand:
    name: str
    args: tuple[str, ...] = ()

    @property
    def argv(self) -> list[str]:
        return [self.name, *self.args]


# Candidates per platform, highest priority first.
_COMMANDS: dict[str, list[ClipboardCommand]] = {
    "darwin": [ClipboardCommand("pbcopy")],
    "linux": [
        ClipboardCommand("wl-copy"),
        ClipboardCommand("xclip", ("-selection", "clipboard")),
        ClipboardCommand("xsel", ("--clipboard", "--input")),
    ],
    "win32": [ClipboardCommand("clip")],
}


def clipboard_commands(platform: str) -> list[ClipboardCommand]:
    """Clipboard commands to try on `platform` (a `sys.platform` value)."""
    if platform.startswith("linux") or "bsd" in platform:
        return _COMMANDS["linux"]
    if platform in _COMMANDS:
        return _COMMANDS[platform]
    raise ClipboardError(f"clipboard not supported on {platform}")


def _write_to_command(cmd: ClipboardCommand, text: str) -> bool:
    try:
        proc = subprocess.run(
            cmd.argv,
            input=encode_output(text),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError:
        return False
    return proc.returncode == 0


def copy_to_clipboard(text: str, platform: str = sys.platform) -> None:
    """
    Deliver `text` to the clipboard using the first available command that succeeds.

    Commands missing from `PATH` are skipped. Raises `ClipboardError` if none works.
    Empty text is a no-op.
    """
    if not text:
        return

    tried: list[str] = []
    for cmd in clipboard_commands(platform):
        tried.append(cmd.name)
        if shutil.which(cmd.name) is None:
            continue
        if _write_to_command(cmd, text):
            return

    raise ClipboardError(f"no clipboard tool found (tried {', '.join(tried)})")
