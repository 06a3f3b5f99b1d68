from __future__ import annotations

import dataclasses
import datetime
import enum
import json
from typing import Any, Optional


def to_json(obj: Any, *, indent: Optional[int] = None) -> str:
    """Return a JSON string with dataclasses, enums and datetimes encoded as
    plain objects, their values and ISO-8601 ``Z`` strings.

    >>> to_json({"installedAt": datetime.datetime(2025, 1, 1, tzinfo=datetime.timezone.utc)})
    '{"installedAt":"2025-01-01T00:00:00Z"}'
    """

    def _encoder(o: Any) -> Any:  # noqa: D401
        if dataclasses.is_dataclass(o) and not isinstance(o, type):
            return dataclasses.asdict(o)
        if isinstance(o, enum.Enum):
            return o.value
        if isinstance(o, datetime.datetime):
            if o.tzinfo is None:
                o = o.replace(tzinfo=datetime.timezone.utc)
            o = o.astimezone(datetime.timezone.utc)
            return o.isoformat().replace("+00:00", "Z")
        raise TypeError(f"Object of type {type(o).__name__} is not JSON serialisable")

    if indent is None:
        return json.dumps(obj, default=_encoder, separators=(",", ":"))
    return json.dumps(obj, default=_encoder, indent=indent)
