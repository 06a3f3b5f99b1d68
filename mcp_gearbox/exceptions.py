"""Custom exceptions used across :mod:`mcp_gearbox`."""

from __future__ import annotations

from .constants import NOT_FOUND_HINT


class GearboxError(RuntimeError):
    """Base class for every error raised by the launcher and installer."""


class NotFoundError(GearboxError):
    """Raised when no way of invoking ``mcp-cli`` could be discovered."""

    def __init__(self, message: str = NOT_FOUND_HINT) -> None:
        super().__init__(message)


class SpawnError(GearboxError):
    """Raised when the selected command could not be started."""

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f"failed to start {command}: {reason}")
        self.command = command


class InvocationTimeoutError(GearboxError):
    """Raised when the child did not finish within the allowed interval."""

    def __init__(self, command: str, timeout: float) -> None:
        super().__init__(f"{command} did not finish within {timeout:g} seconds")
        self.command = command
        self.timeout = timeout


class InstallationError(GearboxError):
    """Raised when neither install method succeeded."""


class PythonNotFoundError(InstallationError):
    """Raised by the installer when no Python interpreter is on PATH."""
