from __future__ import annotations

import sys
from pathlib import Path

import anyio
import pytest

from conftest import pid_alive, posix_only
from mcp_gearbox.exceptions import InvocationTimeoutError, SpawnError
from mcp_gearbox.models import StdioMode
from mcp_gearbox.process import exit_code_of, run_command

PY = sys.executable


def test_exit_code_mapping() -> None:
    assert exit_code_of(0) == 0
    assert exit_code_of(3) == 3
    assert exit_code_of(None) == 0
    assert exit_code_of(-15) == 143


@pytest.mark.anyio
async def test_pipe_captures_output_and_exit_code() -> None:
    code = "import sys; print('out'); print('err', file=sys.stderr); sys.exit(4)"
    result = await run_command([PY, "-c", code], stdio=StdioMode.PIPE)
    assert result.exit_code == 4
    assert result.stdout.strip() == "out"
    assert result.stderr.strip() == "err"


@pytest.mark.anyio
async def test_pipe_captures_large_output() -> None:
    code = "import sys; sys.stdout.write('x' * 500000)"
    result = await run_command([PY, "-c", code], stdio=StdioMode.PIPE)
    assert len(result.stdout) == 500000


@pytest.mark.anyio
async def test_ignore_discards_output() -> None:
    result = await run_command([PY, "-c", "print('hidden')"], stdio=StdioMode.IGNORE)
    assert result.exit_code == 0
    assert result.stdout == "" and result.stderr == ""


@pytest.mark.anyio
async def test_env_overrides_and_cwd(tmp_path: Path) -> None:
    code = "import os; print(os.environ['GEARBOX_TEST'], os.getcwd())"
    result = await run_command(
        [PY, "-c", code],
        stdio=StdioMode.PIPE,
        cwd=str(tmp_path),
        env={"GEARBOX_TEST": "yes"},
    )
    value, cwd = result.stdout.split()
    assert value == "yes"
    assert Path(cwd).resolve() == tmp_path.resolve()


@pytest.mark.anyio
async def test_missing_executable_is_spawn_error(tmp_path: Path) -> None:
    with pytest.raises(SpawnError) as info:
        await run_command([str(tmp_path / "missing")], stdio=StdioMode.PIPE)
    assert isinstance(info.value.__cause__, OSError)


@posix_only
@pytest.mark.anyio
async def test_timeout_terminates_child(tmp_path: Path) -> None:
    pid_file = tmp_path / "pid"
    code = f"import os, time; open({str(pid_file)!r}, 'w').write(str(os.getpid())); time.sleep(30)"
    with pytest.raises(InvocationTimeoutError) as info:
        await run_command([PY, "-c", code], stdio=StdioMode.PIPE, timeout=1.0, kill_grace=2.0)
    assert info.value.timeout == 1.0
    assert not pid_alive(int(pid_file.read_text()))


@posix_only
@pytest.mark.anyio
async def test_timeout_kills_child_ignoring_sigterm(tmp_path: Path) -> None:
    pid_file = tmp_path / "pid"
    code = (
        "import os, signal, time; signal.signal(signal.SIGTERM, signal.SIG_IGN); "
        f"open({str(pid_file)!r}, 'w').write(str(os.getpid())); time.sleep(30)"
    )
    with pytest.raises(InvocationTimeoutError):
        await run_command([PY, "-c", code], stdio=StdioMode.IGNORE, timeout=1.5, kill_grace=0.5)
    assert not pid_alive(int(pid_file.read_text()))


@posix_only
@pytest.mark.anyio
async def test_caller_cancellation_terminates_child(tmp_path: Path) -> None:
    pid_file = tmp_path / "pid"
    code = f"import os, time; open({str(pid_file)!r}, 'w').write(str(os.getpid())); time.sleep(30)"
    with anyio.move_on_after(1.0) as scope:
        await run_command([PY, "-c", code], stdio=StdioMode.IGNORE, timeout=None, kill_grace=2.0)
    assert scope.cancelled_caught
    assert not pid_alive(int(pid_file.read_text()))


@pytest.mark.anyio
async def test_fast_child_is_not_a_timeout() -> None:
    result = await run_command([PY, "-c", "pass"], stdio=StdioMode.PIPE, timeout=20)
    assert result.exit_code == 0


@posix_only
@pytest.mark.anyio
async def test_timeout_when_background_job_holds_pipes(bin_dir: Path, make_script) -> None:
    script = make_script(bin_dir, "leaky", "sleep 5 &\necho hi\nexit 0")
    with pytest.raises(InvocationTimeoutError):
        await run_command([str(script)], stdio=StdioMode.PIPE, timeout=1.0, kill_grace=1.0)
