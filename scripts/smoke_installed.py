#!/usr/bin/env python
from __future__ import annotations

import anyio

from mcp_gearbox import execute_mcp_cli, is_mcp_cli_installed

if not anyio.run(is_mcp_cli_installed):
    raise SystemExit("FAIL: mcp-cli not installed, run mcp-gearbox-install")

result = anyio.run(execute_mcp_cli, "--version")
print(f"PASS: {result.stdout.strip()}")
