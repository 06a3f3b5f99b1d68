"""CLI tests – proxy exit codes, installer entrypoint and the admin app."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from conftest import posix_only
from mcp_gearbox import cli
from mcp_gearbox.cli import app, run_install, run_proxy

pytestmark = posix_only


def test_help_ok() -> None:
    result = CliRunner().invoke(app, ["--help"])
    assert result.exit_code == 0, result.output
    assert "Usage" in result.output or "USAGE" in result.output
    for name in ("install", "which", "status"):
        assert name in result.output


def test_proxy_exits_with_tool_code(path_only_bin, make_script) -> None:
    make_script(path_only_bin, "mcp-cli", "exit 7")
    with pytest.raises(SystemExit) as info:
        run_proxy(["list"])
    assert info.value.code == 7


def test_proxy_passes_arguments_verbatim(path_only_bin, make_script, tmp_path) -> None:
    out = tmp_path / "argv"
    make_script(path_only_bin, "mcp-cli", f'printf "%s\\n" "$@" > "{out}"')
    with pytest.raises(SystemExit) as info:
        run_proxy(["--help", "--", "-x"])
    assert info.value.code == 0
    assert out.read_text().splitlines() == ["--help", "--", "-x"]


def test_proxy_not_found(path_only_bin, capsys) -> None:
    with pytest.raises(SystemExit) as info:
        run_proxy(["list"])
    assert info.value.code == 1
    err = capsys.readouterr().err
    assert "Error executing mcp:" in err
    assert "mcp-gearbox-install" in err


def test_run_install_success(path_only_bin, make_script, capsys) -> None:
    make_script(path_only_bin, "uv")
    with pytest.raises(SystemExit) as info:
        run_install()
    assert info.value.code == 0
    assert "installed with uv" in capsys.readouterr().out


def test_run_install_failure(path_only_bin, capsys) -> None:
    with pytest.raises(SystemExit) as info:
        run_install()
    assert info.value.code == 1
    assert "Python not found" in capsys.readouterr().err


def test_which_reports_source(path_only_bin, make_script) -> None:
    make_script(path_only_bin, "mcp-cli")
    result = CliRunner().invoke(app, ["which", "list", "-j"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == f"path: {path_only_bin / 'mcp-cli'} list -j"


def test_which_not_found(path_only_bin) -> None:
    result = CliRunner().invoke(app, ["which"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_status_with_record(path_only_bin, make_script) -> None:
    make_script(path_only_bin, "uv")
    install = CliRunner().invoke(app, ["install"])
    assert install.exit_code == 0, install.output

    result = CliRunner().invoke(app, ["status"])

    assert "install record: uv" in result.output
    # the uv shim was never really created, so discovery finds nothing
    assert "mcp-cli available: no" in result.output
    assert result.exit_code == 1


def test_status_available(path_only_bin, make_script) -> None:
    make_script(path_only_bin, "mcp-cli")
    result = CliRunner().invoke(app, ["status"])
    assert result.exit_code == 0, result.output
    assert "install record: none" in result.output
    assert "mcp-cli available: yes" in result.output


def test_proxy_uses_live_argv(monkeypatch, path_only_bin, make_script, tmp_path) -> None:
    out = tmp_path / "argv"
    make_script(path_only_bin, "mcp-cli", f'echo "$*" > "{out}"')
    monkeypatch.setattr(cli.sys, "argv", ["mcp", "list", "-a", "continue"])
    with pytest.raises(SystemExit):
        run_proxy()
    assert out.read_text().strip() == "list -a continue"


def test_which_help_says_tool_is_not_started() -> None:
    result = CliRunner().invoke(app, ["which", "--help"])
    assert result.exit_code == 0, result.output
    assert "not started" in result.output
