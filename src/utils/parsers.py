"""Data parsing utilities for Bandix API responses.

The daemon writes its JSON from shell scripts on the router, so numbers
sometimes arrive as strings and booleans as "true"/"1". These helpers coerce
those values and raise PayloadError for anything that cannot be interpreted,
so callers can treat the whole payload as a failed read.

Usage Examples:
    from ..utils.parsers import parse_int, require_mapping

    entry = require_mapping(item, "client")
    downloaded = parse_int(entry, "download")
"""

from typing import Dict, Any, Optional

from ..bandix_client.exceptions import PayloadError


def require_mapping(value: Any, what: str) -> Dict[str, Any]:
    """Return value if it is a JSON object, otherwise raise PayloadError."""
    if not isinstance(value, dict):
        raise PayloadError(f"Expected {what} object, got {type(value).__name__}")
    return value


def require_list(value: Any, what: str) -> list:
    """Return value if it is a JSON array, otherwise raise PayloadError."""
    if not isinstance(value, list):
        raise PayloadError(f"Expected {what} list, got {type(value).__name__}")
    return value


def parse_int(data: Dict[str, Any], key: str, default: Optional[int] = 0) -> Optional[int]:
    """Read an integer field, truncating floats. Missing or null gives default."""
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        raise PayloadError(f"Field '{key}' must be numeric, got boolean")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise PayloadError(f"Field '{key}' must be numeric, got {value!r}")
    if not isinstance(value, (int, float)):
        raise PayloadError(f"Field '{key}' must be numeric, got {value!r}")
    # json accepts Infinity, NaN and out-of-range literals like 1e999
    try:
        return int(value)
    except (OverflowError, ValueError):
        raise PayloadError(f"Field '{key}' must be a finite number, got {value!r}")


def parse_bool(data: Dict[str, Any], key: str, default: bool = False) -> bool:
    """Read a boolean field, accepting the usual string and numeric spellings."""
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str) and value.lower() in ('true', '1', 'yes', 'on', 'false', '0', 'no', 'off'):
        return value.lower() in ('true', '1', 'yes', 'on')
    raise PayloadError(f"Field '{key}' must be boolean, got {value!r}")


def parse_str(data: Dict[str, Any], key: str, default: Optional[str] = None) -> Optional[str]:
    """Read a string field; empty strings count as missing."""
    value = data.get(key)
    if value is None or value == '':
        return default
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    raise PayloadError(f"Field '{key}' must be a string, got {value!r}")
