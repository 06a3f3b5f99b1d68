"""mcp_gearbox.cli – console entry points.

Three console scripts are wired to this module:

* ``mcp`` → :func:`run_proxy`, forwards its whole command line to ``mcp-cli``
  and exits with the tool's exit code.  Arguments are not parsed here, so
  ``mcp --help`` reaches the tool, not us.
* ``mcp-gearbox-install`` → :func:`run_install`, the post-setup installer.
* ``mcp-gearbox`` → :func:`run`, a small Typer application for inspecting and
  repairing the setup (``install``, ``which``, ``status``).
"""

from __future__ import annotations

import functools
import logging
import sys
from typing import List, Optional

import anyio
import typer

from .config import read_priority_config
from .exceptions import GearboxError
from .installer import install_mcp_cli
from .launcher import execute_mcp_cli, is_mcp_cli_installed
from .logging_utils import configure_logging
from .models import StdioMode
from .resolver import Resolver

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# mcp – transparent proxy
# ---------------------------------------------------------------------------


def run_proxy(argv: Optional[List[str]] = None) -> None:  # noqa: D401 – console entrypoint
    """Console-script entrypoint for the ``mcp`` command.

    Args:
        argv: Arguments for ``mcp-cli``; defaults to ``sys.argv[1:]``.
    """

    args = list(sys.argv[1:] if argv is None else argv)
    configure_logging()

    try:
        result = anyio.run(functools.partial(execute_mcp_cli, args, stdio=StdioMode.INHERIT))
    except GearboxError as exc:
        logger.debug("invocation failed", exc_info=True, extra={"code_path": __name__})
        typer.echo(f"Error executing mcp: {exc}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)
    sys.exit(result.exit_code)


# ---------------------------------------------------------------------------
# mcp-gearbox-install
# ---------------------------------------------------------------------------


def _install() -> None:
    try:
        outcome = anyio.run(install_mcp_cli)
    except GearboxError as exc:
        typer.echo(f"Installation failed: {exc}", err=True)
        raise typer.Exit(1)

    if not outcome.config_written:
        typer.echo("Warning: could not record the install method; discovery will be used instead.", err=True)
    typer.echo(f"mcp-cli installed with {outcome.method.value}: {outcome.executable_path}")


def run_install() -> None:  # noqa: D401 – console entrypoint
    """Console-script entrypoint for ``mcp-gearbox-install``."""

    configure_logging(default_level=logging.INFO)
    try:
        _install()
    except typer.Exit as exc:
        sys.exit(exc.exit_code)
    sys.exit(0)


# ---------------------------------------------------------------------------
# mcp-gearbox – admin application
# ---------------------------------------------------------------------------

app = typer.Typer(add_completion=False, pretty_exceptions_enable=False, no_args_is_help=True)


@app.callback()
def main(
    debug: bool = typer.Option(False, "-d", "--debug", help="Verbose logging on stderr"),
) -> None:
    """Install and inspect the mcp-cli launcher."""

    configure_logging(debug=debug, default_level=logging.INFO)


@app.command()
def install() -> None:
    """Install mcp-cli with uv, falling back to pip, and record the method."""

    _install()


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def which(ctx: typer.Context) -> None:
    """Print the command `mcp` would run.

    mcp-cli itself is not started, though candidate interpreters are checked
    for the mcp_cli module.
    """

    try:
        resolved = anyio.run(Resolver().resolve, list(ctx.args))
    except GearboxError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1)
    typer.echo(f"{resolved.source.value}: {' '.join(resolved.argv)}")


@app.command()
def status() -> None:
    """Show the recorded install method and whether mcp-cli responds."""

    record = read_priority_config()
    if record is None:
        typer.echo("install record: none")
    else:
        typer.echo(f"install record: {record.install_method.value} ({record.executable_path})")
        typer.echo(f"installed at: {record.installed_at.isoformat()}")

    installed = anyio.run(is_mcp_cli_installed)
    typer.echo(f"mcp-cli available: {'yes' if installed else 'no'}")
    if not installed:
        raise typer.Exit(1)


def run() -> None:  # entrypoint wrapper for the console script
    """Console-script entrypoint for ``mcp-gearbox``."""

    app()
