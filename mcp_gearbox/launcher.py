"""Public entry points for running ``mcp-cli`` from Python code."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional, Union

from .constants import INVOCATION_TIMEOUT
from .environment import HostEnvironment
from .exceptions import GearboxError
from .models import Arguments, InvocationRequest, InvocationResult, StdioMode
from .process import run_command
from .resolver import ModuleCheck, Resolver

__all__ = ["execute_mcp_cli", "invoke", "is_mcp_cli_installed"]

logger = logging.getLogger(__name__)


async def invoke(
    request: InvocationRequest,
    *,
    resolver: Optional[Resolver] = None,
    timeout: Optional[float] = INVOCATION_TIMEOUT,
) -> InvocationResult:
    """Resolve the command for *request* and run it once."""
    resolved = await (resolver or Resolver()).resolve(request.arguments)
    return await run_command(
        resolved.argv,
        stdio=request.stdio,
        cwd=request.cwd,
        env=request.env,
        timeout=timeout,
    )


async def execute_mcp_cli(
    args: Optional[Arguments] = None,
    *,
    stdio: Union[StdioMode, str] = StdioMode.PIPE,
    cwd: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = INVOCATION_TIMEOUT,
    environment: Optional[HostEnvironment] = None,
    config_path: Optional[Path] = None,
    module_check: Optional[ModuleCheck] = None,
) -> InvocationResult:
    """Run ``mcp-cli`` with *args* and return its exit code and output.

    *args* may be a list or a single whitespace-separated string.  Output is
    captured by default (``stdio="pipe"``); pass ``"inherit"`` to stream it to
    this process's own stdout/stderr instead.

    Example
    -------
    >>> result = anyio.run(execute_mcp_cli, "list -a continue -j")
    >>> result.exit_code
    0
    """
    request = InvocationRequest.build(args, stdio=stdio, cwd=cwd, env=env)
    resolver = Resolver(environment, config_path=config_path, module_check=module_check)
    return await invoke(request, resolver=resolver, timeout=timeout)


async def is_mcp_cli_installed(
    *,
    environment: Optional[HostEnvironment] = None,
    config_path: Optional[Path] = None,
) -> bool:
    """Return ``True`` when ``mcp-cli --version`` runs and exits 0."""
    try:
        result = await execute_mcp_cli(
            ["--version"],
            stdio=StdioMode.PIPE,
            environment=environment,
            config_path=config_path,
        )
    except GearboxError as exc:
        logger.debug("mcp-cli unavailable: %s", exc, extra={"code_path": __name__})
        return False
    return result.exit_code == 0
