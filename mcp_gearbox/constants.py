"""Project-wide constants shared by the resolver and the installer."""

# Persisted install record lives at ~/<CONFIG_BASE_DIR>/<CONFIG_FILE_NAME>.
CONFIG_BASE_DIR = ".mcpgearbox"
CONFIG_FILE_NAME = "config.json"
LOG_DIR_NAME = "logs"

# The proxied tool: dedicated executable and importable module.
EXECUTABLE_NAME = "mcp-cli"
MODULE_NAME = "mcp_cli"
MODULE_FLAG = "-m"

# Order matters: first resolvable interpreter wins.
PYTHON_COMMANDS = ("python3", "python", "py")

UV_COMMAND = "uv"
PACKAGE_NAME = "mcp-gearbox"
PACKAGE_SOURCE = "git+https://github.com/rohitsoni007/mcp-gearbox-cli"

UV_INSTALL_ARGS = ("tool", "install", PACKAGE_NAME, "--force", "--from", PACKAGE_SOURCE)
PIP_INSTALL_ARGS = (MODULE_FLAG, "pip", "install", PACKAGE_SOURCE)

# uv drops tool shims into ~/.local/bin on every platform.
UV_BIN_SEGMENTS = (".local", "bin")

INVOCATION_TIMEOUT = 30.0
KILL_GRACE_PERIOD = 5.0
MODULE_CHECK_TIMEOUT = 10.0

INSTALL_ENTRYPOINT = "mcp-gearbox-install"
NOT_FOUND_HINT = f"{EXECUTABLE_NAME} not found. Please install it using: {INSTALL_ENTRYPOINT}"
MANUAL_INSTALL_HINT = f"pip install {PACKAGE_SOURCE}"

LOG_LEVEL_ENV = "MCP_GEARBOX_LOG_LEVEL"

__all__ = [
    "CONFIG_BASE_DIR",
    "CONFIG_FILE_NAME",
    "EXECUTABLE_NAME",
    "INSTALL_ENTRYPOINT",
    "INVOCATION_TIMEOUT",
    "KILL_GRACE_PERIOD",
    "LOG_DIR_NAME",
    "LOG_LEVEL_ENV",
    "MANUAL_INSTALL_HINT",
    "MODULE_FLAG",
    "MODULE_NAME",
    "NOT_FOUND_HINT",
    "PACKAGE_NAME",
    "PACKAGE_SOURCE",
    "PIP_INSTALL_ARGS",
    "MODULE_CHECK_TIMEOUT",
    "PYTHON_COMMANDS",
    "UV_BIN_SEGMENTS",
    "UV_COMMAND",
    "UV_INSTALL_ARGS",
]
