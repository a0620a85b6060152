"""
Input parsing and validation utilities.

Functions for parsing and normalizing tool and webhook inputs,
handling various input formats (strings, dicts, lists).
"""
import re
from typing import Any

_FIELD_SPLIT = re.compile(r"[\s,]+")


def strip_quotes(s: str) -> str:
    """
    Strip outer quotes from a string.

    Args:
        s: Input string

    Returns:
        String with leading/trailing quotes removed
    """
    s = s.strip()
    if len(s) >= 2 and ((s.startswith('"') and s.endswith('"')) or (s.startswith("'") and s.endswith("'"))):
        return s[1:-1]
    return s


def coerce_str(x: Any, keys: tuple[str, ...] = ()) -> str | None:
    """
    Extract a string from various input formats.

    Handles:
    - Direct string input
    - Dict with specified keys

    Args:
        x: Input value (string, dict, or other)
        keys: Tuple of keys to try in dict order

    Returns:
        Extracted string or None if not found
    """
    if isinstance(x, str):
        return strip_quotes(x)
    if isinstance(x, dict):
        for k in keys:
            v = x.get(k)
            if isinstance(v, str):
                return strip_quotes(v)
    return None


def coerce_int(x: Any, keys: tuple[str, ...] = ()) -> int | None:
    """
    Extract an integer from various input formats.

    Args:
        x: Input value
        keys: Tuple of keys to try in dict order

    Returns:
        Extracted integer or None if not found/invalid
    """
    if isinstance(x, bool):
        return None
    if isinstance(x, int):
        return x
    if isinstance(x, float) and x.is_integer():
        return int(x)
    if isinstance(x, str):
        try:
            return int(x.strip())
        except ValueError:
            return None
    if isinstance(x, dict):
        for k in keys:
            v = x.get(k)
            result = coerce_int(v, ())
            if result is not None:
                return result
    return None


def coerce_bool(x: Any, keys: tuple[str, ...] = ()) -> bool | None:
    """
    Extract a boolean from various input formats.

    Args:
        x: Input value
        keys: Tuple of keys to try in dict order

    Returns:
        Extracted boolean or None if not found/invalid
    """
    if isinstance(x, bool):
        return x
    if isinstance(x, str):
        lower = x.lower().strip()
        if lower in ("true", "1", "yes"):
            return True
        if lower in ("false", "0", "no"):
            return False
        return None
    if isinstance(x, dict):
        for k in keys:
            v = x.get(k)
            result = coerce_bool(v, ())
            if result is not None:
                return result
    return None


def split_fields(x: Any) -> list[str]:
    """
    Split a field list into tokens.

    Accepts "name type price", "name, type,price" or an already split list.
    Empty tokens are dropped.
    """
    if x is None:
        return []
    if isinstance(x, (list, tuple)):
        out: list[str] = []
        for v in x:
            out.extend(split_fields(v))
        return out
    return [t for t in _FIELD_SPLIT.split(strip_quotes(str(x))) if t]
