"""Child process spawning, stream relay and timeout handling on anyio.

:func:`run_command` starts exactly one child and waits for it.  Output is
drained by tasks running next to ``process.wait()`` in one task group, so the
call finishes exactly once: with a result, or with a single
:class:`~mcp_gearbox.exceptions.InvocationTimeoutError`.  A child that
outlives the timeout, or whose caller is cancelled, is terminated and then
killed after a grace period. It is never left running.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Mapping, Optional, Sequence

import anyio
from anyio.abc import ByteReceiveStream, Process

from .constants import INVOCATION_TIMEOUT, KILL_GRACE_PERIOD
from .exceptions import InvocationTimeoutError, SpawnError
from .logging_utils import TRACE_LEVEL
from .models import InvocationResult, StdioMode

__all__ = ["run_command", "exit_code_of"]

logger = logging.getLogger(__name__)

_STDIO = {
    # (stdin, stdout, stderr); None inherits the parent's handle.
    StdioMode.INHERIT: (None, None, None),
    StdioMode.PIPE: (subprocess.DEVNULL, subprocess.PIPE, subprocess.PIPE),
    StdioMode.IGNORE: (subprocess.DEVNULL, subprocess.DEVNULL, subprocess.DEVNULL),
}


def exit_code_of(returncode: Optional[int]) -> int:
    """Map a :attr:`Popen.returncode` to a shell-style exit status.

    Children killed by signal *N* report ``-N``; shells report ``128 + N``.
    """
    if returncode is None:
        return 0
    if returncode < 0:
        return 128 - returncode
    return returncode


def _merged_env(overrides: Optional[Mapping[str, str]]) -> Optional[dict[str, str]]:
    if overrides is None:
        return None
    env = dict(os.environ)
    env.update(overrides)
    return env


async def _drain(stream: ByteReceiveStream, sink: bytearray) -> None:
    async for chunk in stream:
        sink.extend(chunk)


async def _terminate(process: Process, grace: float) -> None:
    """Terminate *process*, escalating to kill after *grace* seconds."""
    with anyio.CancelScope(shield=True):
        if process.returncode is None:
            try:
                process.terminate()
            except ProcessLookupError:
                pass
            with anyio.move_on_after(grace):
                await process.wait()
            if process.returncode is None:
                logger.warning(
                    "pid %s ignored SIGTERM, killing",
                    process.pid,
                    extra={"code_path": __name__},
                )
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()
        await process.aclose()


async def run_command(
    argv: Sequence[str],
    *,
    stdio: StdioMode = StdioMode.INHERIT,
    cwd: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = INVOCATION_TIMEOUT,
    kill_grace: float = KILL_GRACE_PERIOD,
) -> InvocationResult:
    """Spawn *argv* and wait for it to exit.

    Args:
        argv: Executable followed by its arguments.
        stdio: ``inherit`` wires the child to our own streams, ``pipe``
            captures stdout/stderr, ``ignore`` discards everything.
        cwd: Working directory for the child.
        env: Variables merged over the current environment.
        timeout: Seconds before the child is terminated, ``None`` waits forever.
        kill_grace: Seconds between terminate and kill.

    Raises:
        SpawnError: The executable could not be started.
        InvocationTimeoutError: The child was still running, or its output
            streams were still open, after *timeout*.
    """
    stdin_spec, stdout_spec, stderr_spec = _STDIO[StdioMode(stdio)]
    command = str(argv[0])
    logger.log(TRACE_LEVEL, "spawn %s (stdio=%s)", list(argv), StdioMode(stdio).value, extra={"code_path": __name__})

    try:
        process = await anyio.open_process(
            [str(a) for a in argv],
            stdin=stdin_spec,
            stdout=stdout_spec,
            stderr=stderr_spec,
            cwd=cwd,
            env=_merged_env(env),
        )
    except OSError as exc:
        raise SpawnError(command, exc.strerror or str(exc)) from exc

    stdout_buf = bytearray()
    stderr_buf = bytearray()

    try:
        with anyio.move_on_after(timeout) as scope:
            async with anyio.create_task_group() as tg:
                if process.stdout is not None:
                    tg.start_soon(_drain, process.stdout, stdout_buf)
                if process.stderr is not None:
                    tg.start_soon(_drain, process.stderr, stderr_buf)
                await process.wait()
    except BaseException:
        # Caller cancellation (or any other failure) must not orphan the child.
        await _terminate(process, kill_grace)
        raise

    if scope.cancelled_caught:
        # Either the child is still running or something it left behind holds
        # the pipes open; in both cases the output is incomplete.
        await _terminate(process, kill_grace)
        raise InvocationTimeoutError(command, timeout or 0.0)

    await process.aclose()
    code = exit_code_of(process.returncode)
    logger.debug("%s exited with %s", command, code, extra={"code_path": __name__})
    return InvocationResult(
        exit_code=code,
        stdout=stdout_buf.decode("utf-8", errors="replace"),
        stderr=stderr_buf.decode("utf-8", errors="replace"),
    )
