"""Persistence of the :class:`~mcp_gearbox.models.PriorityConfig` record.

The installer writes ``~/.mcpgearbox/config.json`` once after a successful
install; the resolver reads it at the start of every invocation.  Reading
never raises: a missing, truncated or malformed file means "no directive".
Writing never raises either, the install itself already succeeded.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from .environment import HostEnvironment
from .json_utils import to_json
from .models import PriorityConfig

__all__ = ["default_config_path", "read_priority_config", "write_priority_config"]

logger = logging.getLogger(__name__)


def default_config_path() -> Path:
    return HostEnvironment.current().config_path


def read_priority_config(path: Optional[Path] = None) -> Optional[PriorityConfig]:
    """Return the persisted install record or ``None`` when unusable."""
    config_path = Path(path) if path is not None else default_config_path()
    try:
        raw = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        logger.debug("cannot read %s: %s", config_path, exc, extra={"code_path": __name__})
        return None

    try:
        return PriorityConfig.from_mapping(json.loads(raw))
    except (ValueError, TypeError) as exc:
        # json.JSONDecodeError is a ValueError
        logger.debug("ignoring malformed %s: %s", config_path, exc, extra={"code_path": __name__})
        return None


def write_priority_config(config: PriorityConfig, path: Optional[Path] = None) -> bool:
    """Persist *config*, replacing any previous record.

    The payload goes to a temporary sibling first and is moved into place with
    a single :func:`os.replace`, so readers see either the old or the new
    record.  Returns ``False`` (after logging a warning) on failure.
    """
    config_path = Path(path) if path is not None else default_config_path()
    payload = to_json(config.to_mapping(), indent=2) + "\n"

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.warning(
            "Could not create config directory %s: %s",
            config_path.parent,
            exc,
            extra={"code_path": __name__},
        )
        return False

    tmp_name: Optional[str] = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=".config-", suffix=".tmp", dir=config_path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as fp:
            fp.write(payload)
        os.replace(tmp_name, config_path)
    except OSError as exc:
        logger.warning("Could not write config %s: %s", config_path, exc, extra={"code_path": __name__})
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        return False

    logger.info(
        "Recorded %s install at %s",
        config.install_method.value,
        config_path,
        extra={"code_path": __name__},
    )
    return True
