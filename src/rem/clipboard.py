"""System clipboard access through platform utilities.

macOS uses pbcopy/pbpaste. Linux prefers wl-copy/wl-paste under Wayland, then
xclip, then xsel. Other platforms are unsupported.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import subprocess
import sys
from typing import BinaryIO

from rem.content.peek import Readable
from rem.errors import ClipboardError

_COPY_BLOCK = 64 * 1024

# (read command, write command) candidates in preference order.
_MAC_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["pbpaste"], ["pbcopy"]),
]
_WAYLAND_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["wl-paste", "--no-newline"], ["wl-copy"]),
]
_X11_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["xclip", "-selection", "clipboard", "-o"], ["xclip", "-selection", "clipboard", "-i"]),
    (["xsel", "--clipboard", "--output"], ["xsel", "--clipboard", "--input"]),
]


class SystemClipboard:
    """Reads and writes the desktop clipboard by running an external utility."""

    def __init__(self, platform: str | None = None) -> None:
        self.platform = platform or sys.platform

    def _candidates(self) -> list[tuple[list[str], list[str]]]:
        if self.platform == "darwin":
            return _MAC_COMMANDS
        if self.platform.startswith("linux"):
            if os.environ.get("WAYLAND_DISPLAY"):
                return _WAYLAND_COMMANDS + _X11_COMMANDS
            return _X11_COMMANDS
        return []

    def _commands(self) -> tuple[list[str], list[str]]:
        for read_cmd, write_cmd in self._candidates():
            if shutil.which(read_cmd[0]) and shutil.which(write_cmd[0]):
                return read_cmd, write_cmd
        raise ClipboardError(
            f"no clipboard utility found for platform '{self.platform}' "
            "(install pbcopy, wl-clipboard, xclip or xsel)"
        )

    def is_supported(self) -> bool:
        """Return True if a usable clipboard utility is on PATH."""
        try:
            self._commands()
        except ClipboardError:
            return False
        return True

    def read(self) -> bytes:
        """Return the clipboard contents."""
        read_cmd, _ = self._commands()
        try:
            result = subprocess.run(read_cmd, capture_output=True, check=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise ClipboardError(f"failed to read clipboard with {read_cmd[0]}: {exc}") from exc
        return result.stdout

    def write(self, stream: Readable | BinaryIO) -> None:
        """Replace the clipboard contents with everything read from *stream*."""
        _, write_cmd = self._commands()
        try:
            proc = subprocess.Popen(write_cmd, stdin=subprocess.PIPE)
        except OSError as exc:
            raise ClipboardError(f"failed to start {write_cmd[0]}: {exc}") from exc
        stdin = proc.stdin
        broken: BrokenPipeError | None = None
        try:
            if stdin is not None:
                shutil.copyfileobj(stream, stdin, _COPY_BLOCK)
        except BrokenPipeError as exc:
            broken = exc
        except BaseException:
            # Source failed mid-copy: discard the partial write.
            proc.kill()
            raise
        finally:
            if stdin is not None:
                with contextlib.suppress(BrokenPipeError):
                    stdin.close()
            returncode = proc.wait()
        if broken is not None:
            raise ClipboardError(f"{write_cmd[0]} exited early: {broken}") from broken
        if returncode != 0:
            raise ClipboardError(f"{write_cmd[0]} exited with status {returncode}")
