"""Package entrypoint – allows `python -m mcp_gearbox …`.

Delegates to :pyfunc:`mcp_gearbox.cli.run` so the admin CLI lives in exactly
one place.
"""

from __future__ import annotations

from .cli import run


def main() -> None:  # noqa: D401 – CLI entrypoint
    """Package **entrypoint** (`python -m mcp_gearbox`)."""

    run()


if __name__ == "__main__":  # pragma: no cover – direct invocation
    main()
