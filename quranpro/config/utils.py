"""
Utility functions for the Quran Pro API
"""
import json
from datetime import datetime
from typing import Any, Optional

_DATETIME_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
)


def ensure_datetime(value) -> Optional[datetime]:
    """Normalize a datetime value read from either database backend"""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            for fmt in _DATETIME_FORMATS:
                try:
                    return datetime.strptime(value, fmt)
                except ValueError:
                    continue
    return None


def escape_like(term: str, escape_char: str = "\\") -> str:
    """Escape LIKE wildcards so the term matches literally.

    The escape character itself goes first, otherwise the backslashes added
    for ``%`` and ``_`` would be doubled.
    """
    return (
        term.replace(escape_char, escape_char * 2)
        .replace("%", escape_char + "%")
        .replace("_", escape_char + "_")
    )


def load_json(value: Any, default: Any = None) -> Any:
    """Decode a JSON text column; already-decoded values pass through."""
    if value is None or value == "":
        return default
    if isinstance(value, (dict, list)):
        return value
    try:
        return json.loads(value)
    except (TypeError, json.JSONDecodeError):
        return {"raw": value}
