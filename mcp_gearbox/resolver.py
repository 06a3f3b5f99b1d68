"""Discovery of the command used to invoke ``mcp-cli``.

:class:`Resolver` walks a fixed priority order and stops at the first step
that yields a usable command:

1. the install record written by the installer (``~/.mcpgearbox/config.json``),
   re-verified so a stale record falls through instead of failing the spawn;
2. the location where ``uv tool install`` puts the ``mcp-cli`` shim;
3. ``python3``/``python``/``py -m mcp_cli`` for the first interpreter on
   ``PATH`` that can actually import ``mcp_cli``;
4. a bare ``mcp-cli`` on ``PATH``.

Nothing is cached: the config and the filesystem are consulted afresh on
every call.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Sequence

from .config import read_priority_config
from .constants import EXECUTABLE_NAME, MODULE_FLAG, MODULE_NAME, MODULE_CHECK_TIMEOUT, PYTHON_COMMANDS
from .environment import HostEnvironment
from .exceptions import GearboxError, NotFoundError
from .logging_utils import TRACE_LEVEL, trace
from .models import InstallMethod, PriorityConfig, ResolutionSource, ResolvedCommand, StdioMode
from .process import run_command

__all__ = ["ModuleCheck", "Resolver", "has_module", "interpreter_from_record"]

logger = logging.getLogger(__name__)

ModuleCheck = Callable[[str], Awaitable[bool]]

_MODULE_SUFFIX = f" {MODULE_FLAG} {MODULE_NAME}"


async def has_module(interpreter: str) -> bool:
    """Return ``True`` when *interpreter* can import ``mcp_cli``."""
    try:
        result = await run_command(
            [interpreter, "-c", f"import {MODULE_NAME}"],
            stdio=StdioMode.IGNORE,
            timeout=MODULE_CHECK_TIMEOUT,
        )
    except GearboxError as exc:
        logger.debug("import check with %s failed: %s", interpreter, exc, extra={"code_path": __name__})
        return False
    return result.exit_code == 0


def interpreter_from_record(executable_path: str) -> str:
    """Extract the interpreter from a ``"<python> -m mcp_cli"`` record.

    The known suffix is stripped so interpreter paths containing spaces
    survive; records without it fall back to their first whitespace token.
    """
    value = executable_path.strip()
    if value.endswith(_MODULE_SUFFIX):
        return value[: -len(_MODULE_SUFFIX)].strip()
    return value.split()[0]


class Resolver:
    """Pick the command for one invocation of ``mcp-cli``.

    Parameters
    ----------
    environment:
        Home directory, ``PATH`` and platform to search.  Defaults to a fresh
        snapshot of the running process.
    config_path:
        Install record location; defaults to ``environment.config_path``.
    module_check:
        Coroutine confirming that an interpreter can import ``mcp_cli``.
    """

    def __init__(
        self,
        environment: Optional[HostEnvironment] = None,
        *,
        config_path: Optional[Path] = None,
        module_check: Optional[ModuleCheck] = None,
    ) -> None:
        self._env = environment or HostEnvironment.current()
        self._config_path = config_path or self._env.config_path
        self._has_module: ModuleCheck = module_check or has_module

    @property
    def environment(self) -> HostEnvironment:
        return self._env

    @trace
    async def resolve(self, args: Sequence[str] = ()) -> ResolvedCommand:
        """Return the first usable command for *args*.

        Raises ``NotFoundError`` when every step comes up empty.
        """
        caller_args = list(args)
        steps = (
            self._from_config,
            self._from_default_location,
            self._from_interpreter,
            self._from_path,
        )
        for step in steps:
            resolved = await step(caller_args)
            if resolved is not None:
                logger.debug(
                    "resolved via %s: %s",
                    resolved.source.value,
                    resolved.argv,
                    extra={"code_path": __name__},
                )
                return resolved
        raise NotFoundError()

    # ------------------------------------------------------------------
    # Steps, each returns None to fall through
    # ------------------------------------------------------------------

    async def _from_config(self, args: List[str]) -> Optional[ResolvedCommand]:
        config: Optional[PriorityConfig] = read_priority_config(self._config_path)
        if config is None:
            return None

        if config.install_method is InstallMethod.UV:
            executable = config.executable_path
            command_args = list(args)
        else:
            executable = interpreter_from_record(config.executable_path)
            command_args = [MODULE_FLAG, MODULE_NAME, *args]

        if not self._env.exists(executable):
            logger.warning(
                "Recorded %s install %s no longer exists, rediscovering",
                config.install_method.value,
                executable,
                extra={"code_path": __name__},
            )
            return None
        return ResolvedCommand(executable, command_args, ResolutionSource.CONFIG)

    async def _from_default_location(self, args: List[str]) -> Optional[ResolvedCommand]:
        candidate = self._env.default_install_path
        if not candidate.is_file():
            return None
        return ResolvedCommand(str(candidate), list(args), ResolutionSource.DEFAULT_LOCATION)

    async def _from_interpreter(self, args: List[str]) -> Optional[ResolvedCommand]:
        for name in PYTHON_COMMANDS:
            interpreter = self._env.which(name)
            if interpreter is None:
                continue
            if not await self._has_module(interpreter):
                logger.log(
                    TRACE_LEVEL,
                    "%s cannot import %s, skipping",
                    interpreter,
                    MODULE_NAME,
                    extra={"code_path": __name__},
                )
                continue
            return ResolvedCommand(interpreter, [MODULE_FLAG, MODULE_NAME, *args], ResolutionSource.INTERPRETER)
        return None

    async def _from_path(self, args: List[str]) -> Optional[ResolvedCommand]:
        found = self._env.which(EXECUTABLE_NAME)
        if found is None:
            return None
        return ResolvedCommand(found, list(args), ResolutionSource.PATH)
