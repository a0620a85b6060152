"""
Common utility functions.
"""
import sys
from typing import Any


def log(*a: Any) -> None:
    print(*a, file=sys.stderr, flush=True)


def to_int_or_none(val: Any) -> int | None:
    """
    Convert a value to an int, or return None if not possible.
    Accepts whole-number floats and numeric strings ("3", " 3 ", "3.0").
    """
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, int):
        return val
    try:
        s = str(val).strip()
        if s == "":
            return None
        f = float(s)
    except (ValueError, TypeError):
        return None
    if f != f or f in (float("inf"), float("-inf")) or f != int(f):
        return None
    return int(f)


def ok(op: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
    """Create a successful response."""
    return {"ok": True, "op": op, "data": data or {}}


def ng(op: str, code: str, message: str, extra: dict[str, Any] | None = None) -> dict[str, Any]:
    """Create an error response."""
    error: dict[str, Any] = {"code": code, "message": message}
    if extra:
        error.update(extra)
    return {"ok": False, "op": op, "error": error}
