"""
Global test fixtures: clean logging state, an isolated home directory and a
factory for fake executables on a private ``PATH``.
"""

import logging
import os
import stat
import sys
from pathlib import Path
from typing import Callable

import pytest

from mcp_gearbox.environment import HostEnvironment

posix_only = pytest.mark.skipif(sys.platform.startswith("win"), reason="uses /bin/sh scripts")


@pytest.fixture(autouse=True)
def disable_logging() -> None:
    """Clear and close all logging handlers before and after each test."""
    root = logging.getLogger()
    for h in root.handlers:
        try:
            h.close()
        except Exception:
            pass
    root.handlers.clear()
    root.setLevel(logging.CRITICAL)
    yield
    for h in root.handlers:
        try:
            h.close()
        except Exception:
            pass
    root.handlers.clear()


@pytest.fixture(autouse=True)
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME/USERPROFILE at a scratch directory so nothing touches ~/."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("USERPROFILE", str(home_dir))
    monkeypatch.delenv("MCP_GEARBOX_LOG_LEVEL", raising=False)
    return home_dir


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture
def make_script() -> Callable[..., Path]:
    """Write an executable ``/bin/sh`` script and return its path."""

    def _make(directory: Path, name: str, body: str = "exit 0") -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        script = directory / name
        script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def host(home: Path, bin_dir: Path) -> HostEnvironment:
    """Environment whose PATH holds only *bin_dir*."""
    return HostEnvironment(home=home, search_path=str(bin_dir), platform="linux")


@pytest.fixture
def path_only_bin(bin_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Make *bin_dir* the process-wide PATH for code using the live environment."""
    monkeypatch.setenv("PATH", str(bin_dir))
    return bin_dir


def pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True
