#!/usr/bin/env python3
"""Demo script running mcp-cli through the launcher and printing the result."""

import anyio

from mcp_gearbox import NotFoundError, Resolver, execute_mcp_cli


async def main() -> None:
    """Show which command would run, then run ``mcp-cli list -j``."""
    try:
        resolved = await Resolver().resolve(["list", "-j"])
    except NotFoundError as exc:
        print(exc)
        return
    print(f"[{resolved.source.value}] {' '.join(resolved.argv)}")

    result = await execute_mcp_cli("list -j")
    print(f"exit code: {result.exit_code}")
    if result.stdout:
        print(result.stdout.strip())
    if result.stderr:
        print(f"stderr: {result.stderr.strip()}")


if __name__ == "__main__":
    anyio.run(main)
