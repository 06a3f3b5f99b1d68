"""
Typed models for install records, invocation requests and results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Union

__all__ = [
    "Arguments",
    "InstallMethod",
    "InstallOutcome",
    "InvocationRequest",
    "InvocationResult",
    "PriorityConfig",
    "ResolutionSource",
    "ResolvedCommand",
    "StdioMode",
    "normalize_arguments",
]


Arguments = Union[str, Sequence[str]]

UNKNOWN_INSTALL_TIME = datetime.fromtimestamp(0, timezone.utc)


def _parse_timestamp(raw: Any) -> datetime:
    if not isinstance(raw, str) or not raw:
        return UNKNOWN_INSTALL_TIME
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return UNKNOWN_INSTALL_TIME
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class InstallMethod(str, Enum):
    """Package manager that installed ``mcp-cli``."""

    UV = "uv"
    PIP = "pip"


class StdioMode(str, Enum):
    """How the child's standard streams are wired."""

    INHERIT = "inherit"
    PIPE = "pipe"
    IGNORE = "ignore"


class ResolutionSource(str, Enum):
    """Discovery step that produced a :class:`ResolvedCommand`."""

    CONFIG = "config"
    DEFAULT_LOCATION = "default_location"
    INTERPRETER = "interpreter"
    PATH = "path"


@dataclass(frozen=True)
class PriorityConfig:
    """Install record persisted by the installer and read by the resolver."""

    install_method: InstallMethod
    executable_path: str
    installed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PriorityConfig":
        """Return a :class:`PriorityConfig` built from the on-disk JSON object.

        Only the method and the path are required.  A missing or unparsable
        ``installedAt`` becomes the Unix epoch so the directive stays usable.
        Raises ``ValueError`` when the method or the path is missing or malformed.
        """
        if not isinstance(data, Mapping):
            raise ValueError("config root must be an object")
        method = InstallMethod(data.get("installMethod"))
        path = data.get("executablePath")
        if not isinstance(path, str) or not path.strip():
            raise ValueError("executablePath must be a non-empty string")
        return cls(install_method=method, executable_path=path, installed_at=_parse_timestamp(data.get("installedAt")))

    def to_mapping(self) -> dict[str, Any]:
        return {
            "installMethod": self.install_method.value,
            "executablePath": self.executable_path,
            "installedAt": self.installed_at,
        }


def normalize_arguments(args: Optional[Arguments]) -> List[str]:
    """Return *args* as a fresh list.

    A single string is split on whitespace so ``"list -a continue -j"`` and
    ``["list", "-a", "continue", "-j"]`` produce the same argument vector.
    """
    if args is None:
        return []
    if isinstance(args, str):
        return args.split()
    return [str(a) for a in args]


@dataclass(frozen=True)
class InvocationRequest:
    """One call to the proxied tool."""

    arguments: List[str] = field(default_factory=list)
    stdio: StdioMode = StdioMode.INHERIT
    cwd: Optional[str] = None
    env: Optional[Mapping[str, str]] = None

    @classmethod
    def build(
        cls,
        args: Optional[Arguments] = None,
        *,
        stdio: Union[StdioMode, str] = StdioMode.INHERIT,
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> "InvocationRequest":
        return cls(
            arguments=normalize_arguments(args),
            stdio=StdioMode(stdio),
            cwd=cwd,
            env=dict(env) if env is not None else None,
        )


@dataclass(frozen=True)
class InvocationResult:
    """Exit status and, in ``pipe`` mode, captured output of the child."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""


@dataclass(frozen=True)
class ResolvedCommand:
    """Executable plus argument vector chosen by the resolver."""

    executable: str
    args: List[str]
    source: ResolutionSource

    @property
    def argv(self) -> List[str]:
        return [self.executable, *self.args]


@dataclass(frozen=True)
class InstallOutcome:
    """What the installer did."""

    method: InstallMethod
    executable_path: str
    config_written: bool
