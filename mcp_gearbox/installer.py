"""Install ``mcp-cli`` with uv, falling back to pip.

The outcome is recorded in ``~/.mcpgearbox/config.json`` so the resolver can
go straight to the right command on later invocations.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import write_priority_config
from .constants import (
    MANUAL_INSTALL_HINT,
    MODULE_FLAG,
    MODULE_NAME,
    PIP_INSTALL_ARGS,
    PYTHON_COMMANDS,
    UV_COMMAND,
    UV_INSTALL_ARGS,
)
from .environment import HostEnvironment
from .exceptions import InstallationError, PythonNotFoundError, SpawnError
from .logging_utils import trace
from .models import InstallMethod, InstallOutcome, PriorityConfig, StdioMode
from .process import run_command

__all__ = ["install_mcp_cli"]

logger = logging.getLogger(__name__)


def _record(method: InstallMethod, executable_path: str, config_path: Path) -> InstallOutcome:
    written = write_priority_config(PriorityConfig(method, executable_path), config_path)
    return InstallOutcome(method=method, executable_path=executable_path, config_written=written)


async def _install_with_uv(env: HostEnvironment) -> bool:
    uv_path = env.which(UV_COMMAND)
    if uv_path is None:
        logger.info("uv not found, trying pip...", extra={"code_path": __name__})
        return False

    logger.info("Found uv, installing with uv tool...", extra={"code_path": __name__})
    try:
        result = await run_command([uv_path, *UV_INSTALL_ARGS], stdio=StdioMode.INHERIT, timeout=None)
    except SpawnError as exc:
        logger.warning("uv installation failed (%s), trying pip...", exc, extra={"code_path": __name__})
        return False
    if result.exit_code != 0:
        logger.warning(
            "uv installation failed with exit code %s, trying pip...",
            result.exit_code,
            extra={"code_path": __name__},
        )
        return False
    return True


def _find_python(env: HostEnvironment) -> str:
    for name in PYTHON_COMMANDS:
        found = env.which(name)
        if found is not None:
            return found
    raise PythonNotFoundError(
        "Python not found. Please install Python 3.11+ and try again.\n"
        "   Visit: https://www.python.org/downloads/"
    )


@trace
async def install_mcp_cli(
    environment: Optional[HostEnvironment] = None,
    *,
    config_path: Optional[Path] = None,
) -> InstallOutcome:
    """Install ``mcp-cli`` via uv, or pip when uv is missing or fails.

    Raises:
        PythonNotFoundError: uv did not succeed and no interpreter is on PATH.
        InstallationError: pip exited non-zero or could not be started.
    """
    env = environment or HostEnvironment.current()
    target = config_path or env.config_path

    if await _install_with_uv(env):
        logger.info("mcp-cli installed successfully with uv!", extra={"code_path": __name__})
        return _record(InstallMethod.UV, str(env.default_install_path), target)

    python_path = _find_python(env)
    logger.info("Found Python at: %s", python_path, extra={"code_path": __name__})
    logger.info("Installing mcp-cli with pip...", extra={"code_path": __name__})

    manual = f"Failed to install mcp-cli with pip.\n   Please install manually:\n   {MANUAL_INSTALL_HINT}"
    try:
        result = await run_command([python_path, *PIP_INSTALL_ARGS], stdio=StdioMode.INHERIT, timeout=None)
    except SpawnError as exc:
        raise InstallationError(f"{exc}\n{manual}") from exc
    if result.exit_code != 0:
        raise InstallationError(manual)

    logger.info("mcp-cli installed successfully with pip!", extra={"code_path": __name__})
    return _record(InstallMethod.PIP, f"{python_path} {MODULE_FLAG} {MODULE_NAME}", target)
