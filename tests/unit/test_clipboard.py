"""Tests for system clipboard access (utilities are faked)."""

from __future__ import annotations

import io
import subprocess

import pytest

from rem import clipboard as clipboard_mod
from rem.clipboard import SystemClipboard
from rem.errors import ClipboardError, StorageError


def _which_only(*names):
    return lambda cmd: f"/usr/bin/{cmd}" if cmd in names else None


class _Sink(io.BytesIO):
    """Stays readable after the writer closes it."""

    was_closed = False

    def close(self):
        self.was_closed = True


class FakePopen:
    """Captures what would be written to the utility's stdin."""

    instances: list[FakePopen] = []

    def __init__(self, args, stdin=None):
        self.args = args
        self.stdin = _Sink()
        self.returncode = 0
        self.killed = False
        self.waited = False
        FakePopen.instances.append(self)

    def wait(self):
        self.waited = True
        return self.returncode

    def kill(self):
        self.killed = True
        self.returncode = -9


@pytest.fixture(autouse=True)
def _no_wayland(monkeypatch):
    monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
    FakePopen.instances = []


# ------------------------------------------------------------------
# Utility selection
# ------------------------------------------------------------------


def test_mac_uses_pbcopy(monkeypatch):
    monkeypatch.setattr(clipboard_mod.shutil, "which", _which_only("pbcopy", "pbpaste"))
    assert SystemClipboard("darwin")._commands() == (["pbpaste"], ["pbcopy"])


def test_linux_prefers_xclip(monkeypatch):
    monkeypatch.setattr(clipboard_mod.shutil, "which", _which_only("xclip", "xsel"))
    read_cmd, _ = SystemClipboard("linux")._commands()
    assert read_cmd[0] == "xclip"


def test_linux_falls_back_to_xsel(monkeypatch):
    monkeypatch.setattr(clipboard_mod.shutil, "which", _which_only("xsel"))
    read_cmd, write_cmd = SystemClipboard("linux")._commands()
    assert read_cmd[0] == write_cmd[0] == "xsel"


def test_wayland_preferred_when_available(monkeypatch):
    monkeypatch.setenv("WAYLAND_DISPLAY", "wayland-0")
    monkeypatch.setattr(clipboard_mod.shutil, "which", _which_only("wl-copy", "wl-paste", "xclip"))
    read_cmd, write_cmd = SystemClipboard("linux")._commands()
    assert read_cmd[0] == "wl-paste"
    assert write_cmd == ["wl-copy"]


def test_no_utility(monkeypatch):
    monkeypatch.setattr(clipboard_mod.shutil, "which", _which_only())
    cb = SystemClipboard("linux")
    assert cb.is_supported() is False
    with pytest.raises(ClipboardError):
        cb.read()


def test_unsupported_platform(monkeypatch):
    monkeypatch.setattr(clipboard_mod.shutil, "which", _which_only("pbcopy", "pbpaste"))
    assert SystemClipboard("win32").is_supported() is False


# ------------------------------------------------------------------
# Read / write
# ------------------------------------------------------------------


def test_read_returns_stdout(monkeypatch):
    monkeypatch.setattr(clipboard_mod.shutil, "which", _which_only("pbcopy", "pbpaste"))

    def fake_run(args, capture_output, check):
        return subprocess.CompletedProcess(args, 0, stdout=b"clip data", stderr=b"")

    monkeypatch.setattr(clipboard_mod.subprocess, "run", fake_run)
    assert SystemClipboard("darwin").read() == b"clip data"


def test_read_failure(monkeypatch):
    monkeypatch.setattr(clipboard_mod.shutil, "which", _which_only("pbcopy", "pbpaste"))

    def fake_run(args, capture_output, check):
        raise subprocess.CalledProcessError(1, args)

    monkeypatch.setattr(clipboard_mod.subprocess, "run", fake_run)
    with pytest.raises(ClipboardError):
        SystemClipboard("darwin").read()


def test_write_streams_content(monkeypatch):
    monkeypatch.setattr(clipboard_mod.shutil, "which", _which_only("pbcopy", "pbpaste"))
    monkeypatch.setattr(clipboard_mod.subprocess, "Popen", FakePopen)
    SystemClipboard("darwin").write(io.BytesIO(b"to the clipboard"))
    proc = FakePopen.instances[-1]
    assert proc.args == ["pbcopy"]
    assert proc.stdin.getvalue() == b"to the clipboard"
    assert proc.stdin.was_closed
    assert proc.waited and not proc.killed


def test_write_nonzero_exit(monkeypatch):
    class FailingPopen(FakePopen):
        def wait(self):
            return 1

    monkeypatch.setattr(clipboard_mod.shutil, "which", _which_only("pbcopy", "pbpaste"))
    monkeypatch.setattr(clipboard_mod.subprocess, "Popen", FailingPopen)
    with pytest.raises(ClipboardError, match="status 1"):
        SystemClipboard("darwin").write(io.BytesIO(b"x"))


def test_write_cannot_start(monkeypatch):
    def boom(*args, **kwargs):
        raise FileNotFoundError("pbcopy")

    monkeypatch.setattr(clipboard_mod.shutil, "which", _which_only("pbcopy", "pbpaste"))
    monkeypatch.setattr(clipboard_mod.subprocess, "Popen", boom)
    with pytest.raises(ClipboardError):
        SystemClipboard("darwin").write(io.BytesIO(b"x"))


def test_write_source_failure_kills_utility(monkeypatch):
    class FailingSource(io.RawIOBase):
        def readable(self):
            return True

        def readinto(self, buf):
            raise StorageError("chunk 1 missing")

    monkeypatch.setattr(clipboard_mod.shutil, "which", _which_only("pbcopy", "pbpaste"))
    monkeypatch.setattr(clipboard_mod.subprocess, "Popen", FakePopen)
    with pytest.raises(StorageError, match="chunk 1 missing"):
        SystemClipboard("darwin").write(FailingSource())
    proc = FakePopen.instances[-1]
    assert proc.killed
    assert proc.waited
    assert proc.stdin.was_closed


def test_write_utility_exits_early(monkeypatch):
    class ClosedSink(_Sink):
        def write(self, data):
            raise BrokenPipeError(32, "Broken pipe")

    class EarlyExitPopen(FakePopen):
        def __init__(self, args, stdin=None):
            super().__init__(args, stdin)
            self.stdin = ClosedSink()

    monkeypatch.setattr(clipboard_mod.shutil, "which", _which_only("pbcopy", "pbpaste"))
    monkeypatch.setattr(clipboard_mod.subprocess, "Popen", EarlyExitPopen)
    with pytest.raises(ClipboardError, match="exited early"):
        SystemClipboard("darwin").write(io.BytesIO(b"x"))
    proc = FakePopen.instances[-1]
    assert proc.waited and not proc.killed
    assert proc.stdin.was_closed
