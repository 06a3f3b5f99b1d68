"""Host environment seen by discovery.

Resolution depends on the home directory, the ``PATH`` search list and the
platform.  Bundling them in :class:`HostEnvironment` lets tests point the
resolver and installer at a fake home and a fake ``PATH`` instead of whatever
happens to be installed on the machine.
"""

from __future__ import annotations

import os
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .constants import CONFIG_BASE_DIR, CONFIG_FILE_NAME, EXECUTABLE_NAME, UV_BIN_SEGMENTS

__all__ = ["HostEnvironment", "executable_suffix"]


def executable_suffix(platform: str) -> str:
    return ".exe" if platform.startswith("win") else ""


@dataclass(frozen=True)
class HostEnvironment:
    """Home directory, ``PATH`` and platform used for discovery."""

    home: Path = field(default_factory=Path.home)
    search_path: Optional[str] = None
    platform: str = sys.platform

    @classmethod
    def current(cls) -> "HostEnvironment":
        """Snapshot of the running process (read fresh on every call)."""
        return cls(home=Path.home(), search_path=os.environ.get("PATH"), platform=sys.platform)

    @property
    def config_path(self) -> Path:
        return self.home / CONFIG_BASE_DIR / CONFIG_FILE_NAME

    @property
    def default_install_path(self) -> Path:
        """Where ``uv tool install`` places the ``mcp-cli`` shim."""
        name = EXECUTABLE_NAME + executable_suffix(self.platform)
        return self.home.joinpath(*UV_BIN_SEGMENTS, name)

    def which(self, command: str) -> Optional[str]:
        """Return the absolute path of *command* on ``PATH`` or ``None``."""
        return shutil.which(command, path=self.search_path)

    def exists(self, command: str) -> bool:
        """Whether *command* names an existing file or something on ``PATH``."""
        if os.path.isabs(command) or os.sep in command:
            return Path(command).is_file()
        return self.which(command) is not None
