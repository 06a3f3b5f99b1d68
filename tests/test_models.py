from __future__ import annotations

from datetime import datetime, timezone

import pytest

from mcp_gearbox.models import (
    InstallMethod,
    InvocationRequest,
    PriorityConfig,
    ResolutionSource,
    ResolvedCommand,
    StdioMode,
    normalize_arguments,
)


def test_string_and_list_arguments_match() -> None:
    assert normalize_arguments("list -a continue -j") == normalize_arguments(["list", "-a", "continue", "-j"])


def test_string_arguments_drop_empty_tokens() -> None:
    assert normalize_arguments("  list   -j ") == ["list", "-j"]
    assert normalize_arguments("") == []
    assert normalize_arguments(None) == []


def test_normalize_copies_sequence() -> None:
    original = ["list"]
    out = normalize_arguments(original)
    out.append("-j")
    assert original == ["list"]


def test_request_build_coerces_stdio() -> None:
    req = InvocationRequest.build("--version", stdio="pipe", env={"A": "1"})
    assert req.arguments == ["--version"]
    assert req.stdio is StdioMode.PIPE
    assert req.env == {"A": "1"}


def test_request_build_rejects_unknown_stdio() -> None:
    with pytest.raises(ValueError):
        InvocationRequest.build([], stdio="tty")


def test_priority_config_from_mapping() -> None:
    cfg = PriorityConfig.from_mapping(
        {
            "installMethod": "pip",
            "executablePath": "/usr/bin/python3 -m mcp_cli",
            "installedAt": "2025-03-01T10:00:00.000Z",
        }
    )
    assert cfg.install_method is InstallMethod.PIP
    assert cfg.installed_at == datetime(2025, 3, 1, 10, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "payload",
    [
        {"installMethod": "npm", "executablePath": "/x", "installedAt": "2025-01-01T00:00:00Z"},
        {"installMethod": "uv", "executablePath": "", "installedAt": "2025-01-01T00:00:00Z"},
        {"installMethod": "uv", "executablePath": 42, "installedAt": "2025-01-01T00:00:00Z"},
        ["uv", "/x"],
    ],
)
def test_priority_config_rejects_malformed(payload) -> None:
    with pytest.raises(ValueError):
        PriorityConfig.from_mapping(payload)


def test_resolved_command_argv() -> None:
    cmd = ResolvedCommand("/usr/bin/python3", ["-m", "mcp_cli", "list"], ResolutionSource.INTERPRETER)
    assert cmd.argv == ["/usr/bin/python3", "-m", "mcp_cli", "list"]


@pytest.mark.parametrize("payload_ts", [None, "yesterday", 1700000000])
def test_priority_config_tolerates_bad_timestamp(payload_ts) -> None:
    payload = {"installMethod": "uv", "executablePath": "/x"}
    if payload_ts is not None:
        payload["installedAt"] = payload_ts
    cfg = PriorityConfig.from_mapping(payload)
    assert cfg.install_method is InstallMethod.UV
    assert cfg.executable_path == "/x"
    assert cfg.installed_at == datetime.fromtimestamp(0, timezone.utc)
