"""mcp_gearbox package.

Locate, install and run the ``mcp-cli`` tool.

Public API
----------
* ``execute_mcp_cli``     – resolve ``mcp-cli`` and run it once (async).
* ``is_mcp_cli_installed`` – whether ``mcp-cli --version`` succeeds (async).
* ``install_mcp_cli``     – install via uv, falling back to pip (async).
* ``Resolver``            – the discovery order, usable on its own.
* ``configure_logging``   – project-wide logging setup.
* ``trace``               – decorator logging entry/exit at TRACE level.

Anything else is internal and may change without notice.
"""

from importlib import metadata as _metadata

from .exceptions import (
    GearboxError,
    InstallationError,
    InvocationTimeoutError,
    NotFoundError,
    PythonNotFoundError,
    SpawnError,
)
from .installer import install_mcp_cli
from .launcher import execute_mcp_cli, is_mcp_cli_installed
from .logging_utils import configure_logging, trace
from .models import InstallMethod, InvocationResult, PriorityConfig, StdioMode
from .resolver import Resolver

__all__ = [
    "GearboxError",
    "InstallMethod",
    "InstallationError",
    "InvocationResult",
    "InvocationTimeoutError",
    "NotFoundError",
    "PriorityConfig",
    "PythonNotFoundError",
    "Resolver",
    "SpawnError",
    "StdioMode",
    "configure_logging",
    "execute_mcp_cli",
    "install_mcp_cli",
    "is_mcp_cli_installed",
    "trace",
]

# --------------------------------------------------------------------
# Single-source versioning – importlib.metadata keeps the value in sync with
# pyproject.toml; source checkouts read the TOML directly.
# --------------------------------------------------------------------

try:
    __version__: str = _metadata.version("mcp-gearbox-launcher")
except _metadata.PackageNotFoundError:  # pragma: no cover – dev environment only
    import pathlib as _pl
    import tomllib as _tomllib

    _toml_path = _pl.Path(__file__).resolve().parents[1] / "pyproject.toml"
    if _toml_path.exists():
        with _toml_path.open("rb") as _fp:
            __version__ = _tomllib.load(_fp)["project"]["version"]
    else:
        __version__ = "0.0.0.dev0"
