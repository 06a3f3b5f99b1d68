"""mcp_gearbox.logging_utils – project-wide logging helpers.

1.  A custom **TRACE** level (numeric value 5).
2.  `configure_logging()` that installs three handlers on the root logger:
    • Console – `rich.logging.RichHandler` bound to *stderr*, so log output
      never mixes with the proxied tool's stdout.
    • Timestamped human-readable file `~/.mcpgearbox/logs/mcp-gearbox-YYYYMMDD-HHMMSS.log`.
    • `JsonLinesHandler` writing the matching `.jsonl` mirror.
3.  A `@trace` decorator that logs function entry/exit at TRACE level, for
    both plain and ``async`` functions.

Every record carries a *code_path* attribute.  The console handler defaults
to WARNING because the launcher sits in front of another CLI whose output
must stay clean; `debug=True` or ``MCP_GEARBOX_LOG_LEVEL`` lowers it.
"""

from __future__ import annotations

import functools
import inspect
import json
import logging
import os
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

from rich.console import Console
from rich.logging import RichHandler

from .constants import CONFIG_BASE_DIR, LOG_DIR_NAME, LOG_LEVEL_ENV

__all__ = ["TRACE_LEVEL", "JsonLinesHandler", "configure_logging", "default_log_dir", "trace"]

# ---------------------------------------------------------------------------
# TRACE level
# ---------------------------------------------------------------------------

TRACE_LEVEL = 5

if logging.getLevelName(TRACE_LEVEL) != "TRACE":
    logging.addLevelName(TRACE_LEVEL, "TRACE")


def _trace(self: logging.Logger, msg: str, *args: Any, **kwargs: Any) -> None:  # noqa: D401
    """`Logger.trace(msg, *args, **kwargs)` convenience method."""

    if self.isEnabledFor(TRACE_LEVEL):
        self._log(TRACE_LEVEL, msg, args, **kwargs)  # type: ignore[attr-defined]


if not hasattr(logging.Logger, "trace"):
    logging.Logger.trace = _trace  # type: ignore[attr-defined]


# ---------------------------------------------------------------------------
# Filters / handlers
# ---------------------------------------------------------------------------


class _EnsureCodePathFilter(logging.Filter):
    """Fill in *record.code_path* when the caller did not pass one via `extra`."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401 – logging callback
        if not hasattr(record, "code_path"):
            record.code_path = record.pathname  # type: ignore[attr-defined]
        return True


class JsonLinesHandler(logging.Handler):
    """Write one JSON object per record."""

    def __init__(self, file_path: Path):  # noqa: D401
        super().__init__(level=logging.NOTSET)
        self._fp = open(file_path, "a", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401 – logging callback
        try:
            log_obj: Dict[str, Any] = {
                "ts_epoch": record.created,
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
                "code_path": getattr(record, "code_path", record.pathname),
            }
            if record.exc_info:
                exc_type, exc_value, tb = record.exc_info
                log_obj["exc_type"] = exc_type.__name__ if exc_type else None
                log_obj["exc_msg"] = str(exc_value) if exc_value else None
                log_obj["exc_trace"] = "".join(traceback.format_exception(exc_type, exc_value, tb)).rstrip()

            self._fp.write(json.dumps(log_obj, separators=(",", ":"), ensure_ascii=False) + "\n")
            self._fp.flush()
        except Exception:  # noqa: BLE001 – must not propagate
            self.handleError(record)

    def close(self) -> None:  # noqa: D401 – logging callback
        try:
            self._fp.close()
        finally:
            super().close()


# ---------------------------------------------------------------------------
# configure_logging
# ---------------------------------------------------------------------------


def default_log_dir() -> Path:
    return Path.home() / CONFIG_BASE_DIR / LOG_DIR_NAME


def _make_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")


def _purge_old_logs(log_dir: Path, keep: int = 10) -> None:
    """Keep only the latest *keep* pairs of .log + .jsonl files."""

    files = sorted(log_dir.glob("mcp-gearbox-*.log"), key=lambda p: p.stat().st_mtime, reverse=True)
    for stale in files[keep:]:
        stale.unlink(missing_ok=True)
        stale.with_suffix(".jsonl").unlink(missing_ok=True)


def _update_symlink(link: Path, target: Path) -> None:
    if link.exists() or link.is_symlink():
        link.unlink()
    link.symlink_to(target.name)


def _resolve_level(debug: bool, default: int) -> int:
    env_level = os.getenv(LOG_LEVEL_ENV, "").strip().upper()
    if env_level == "TRACE":
        return TRACE_LEVEL
    if env_level:
        named = logging.getLevelName(env_level)
        if isinstance(named, int):
            return named
    return logging.DEBUG if debug else default


def _file_handlers(log_dir: Path) -> List[logging.Handler]:
    log_dir.mkdir(parents=True, exist_ok=True)
    _purge_old_logs(log_dir)

    ts = _make_timestamp()
    log_path = log_dir / f"mcp-gearbox-{ts}.log"
    json_path = log_dir / f"mcp-gearbox-{ts}.jsonl"

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d - %(message)s")
    )
    handlers: List[logging.Handler] = [file_handler, JsonLinesHandler(json_path)]

    # Symlinks are unavailable on some Windows setups; the timestamped files suffice.
    for link, target in ((log_dir / "latest.log", log_path), (log_dir / "latest.jsonl", json_path)):
        try:
            _update_symlink(link, target)
        except OSError:
            pass
    return handlers


def configure_logging(
    *,
    debug: bool = False,
    log_dir: Optional[Path] = None,
    file_logging: bool = True,
    default_level: int = logging.WARNING,
) -> Optional[Path]:
    """Set up project-wide logging.

    Returns
    -------
    Path | None
        Path of the human-readable log file, or ``None`` when file logging is
        disabled or the log directory is not writable.
    """

    console_level = _resolve_level(debug, default_level)
    root_level = min(console_level, logging.DEBUG) if file_logging else console_level

    console_handler: logging.Handler = RichHandler(
        console=Console(stderr=True),
        level=console_level,
        rich_tracebacks=False,
        show_path=False,
    )
    handlers: List[logging.Handler] = [console_handler]

    log_path: Optional[Path] = None
    if file_logging:
        try:
            extra = _file_handlers(log_dir or default_log_dir())
        except OSError as exc:
            # Logging problems never stop the launcher.
            logging.getLogger(__name__).debug("file logging disabled: %s", exc)
        else:
            handlers.extend(extra)
            log_path = Path(extra[0].baseFilename)  # type: ignore[attr-defined]

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(root_level)

    for h in handlers:
        h.addFilter(_EnsureCodePathFilter())
        root_logger.addHandler(h)

    return log_path


# ---------------------------------------------------------------------------
# @trace decorator
# ---------------------------------------------------------------------------


F = TypeVar("F", bound=Callable[..., Any])


def trace(func: F) -> F:
    """Decorator that logs function entry / exit at *TRACE* level."""

    logger = logging.getLogger(func.__module__)
    extra = {"code_path": func.__code__.co_filename}

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def _async_wrapper(*args: Any, **kwargs: Any) -> Any:
            logger.log(TRACE_LEVEL, f"→ {func.__qualname__}()", extra=extra)
            try:
                return await func(*args, **kwargs)
            finally:
                logger.log(TRACE_LEVEL, f"← {func.__qualname__}()", extra=extra)

        return _async_wrapper  # type: ignore[return-value]

    @functools.wraps(func)
    def _wrapper(*args: Any, **kwargs: Any) -> Any:
        logger.log(TRACE_LEVEL, f"→ {func.__qualname__}()", extra=extra)
        try:
            return func(*args, **kwargs)
        finally:
            logger.log(TRACE_LEVEL, f"← {func.__qualname__}()", extra=extra)

    return _wrapper  # type: ignore[return-value]
