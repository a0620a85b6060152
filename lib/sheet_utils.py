"""
Sheet utility functions.
A1 notation helpers and spreadsheet ID extraction.
"""
import re
from typing import Any, NamedTuple

_A1_CELL = re.compile(r"^\$?([A-Za-z]{1,3})\$?(\d+)$")


class GridRange(NamedTuple):
    """A rectangular block of cells (1-based row/column)."""
    row: int
    num_rows: int
    column: int
    num_columns: int

    @property
    def last_row(self) -> int:
        return self.row + self.num_rows - 1

    @property
    def last_column(self) -> int:
        return self.column + self.num_columns - 1


def col_letter_to_index(letter: str) -> int:
    """
    Convert column letter(s) to 0-based index.
    A -> 0, B -> 1, ..., Z -> 25, AA -> 26, etc.
    """
    result = 0
    for char in letter.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result - 1


def index_to_col_letter(index: int) -> str:
    """
    Convert 0-based index to column letter(s).
    0 -> A, 1 -> B, ..., 25 -> Z, 26 -> AA, etc.
    """
    result = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        result = chr(ord("A") + remainder) + result
    return result


def a1_cell(row: int, column: int) -> str:
    """1-based (row, column) -> "B5"."""
    return f"{index_to_col_letter(column - 1)}{row}"


def a1_range(row: int, column: int, num_rows: int, num_columns: int) -> str:
    """1-based block -> "B5:D8"."""
    start = a1_cell(row, column)
    end = a1_cell(row + num_rows - 1, column + num_columns - 1)
    return start if start == end else f"{start}:{end}"


def parse_a1_cell(cell: str) -> tuple[int, int]:
    """
    Parse a single A1 cell reference into 1-based (row, column).

    Raises:
        ValueError: If the reference is not a plain cell like "B5"
    """
    match = _A1_CELL.match(str(cell).strip())
    if not match:
        raise ValueError(f"invalid A1 cell: {cell!r}")
    row = int(match.group(2))
    if row < 1:
        raise ValueError(f"invalid A1 cell: {cell!r}")
    return row, col_letter_to_index(match.group(1)) + 1


def parse_a1_range(notation: str) -> GridRange:
    """
    Parse "B5:D8" (or a single cell "C3") into a GridRange.
    A leading sheet prefix ("Sheet1!B5:D8") is ignored.

    Raises:
        ValueError: If the notation is not a bounded cell range
    """
    text = str(notation).strip()
    if "!" in text:
        text = text.rsplit("!", 1)[1]
    parts = text.split(":")
    if len(parts) > 2:
        raise ValueError(f"invalid A1 range: {notation!r}")
    r1, c1 = parse_a1_cell(parts[0])
    r2, c2 = parse_a1_cell(parts[-1])
    top, bottom = min(r1, r2), max(r1, r2)
    left, right = min(c1, c2), max(c1, c2)
    return GridRange(top, bottom - top + 1, left, right - left + 1)


def extract_spreadsheet_id(url: Any) -> str | None:
    """
    Extract spreadsheet ID from a Google Sheets URL or raw ID string.

    Args:
        url: A Google Sheets URL or raw spreadsheet ID

    Returns:
        The spreadsheet ID if found (at least 25 chars), None otherwise
    """
    if not url:
        return None
    match = re.search(r"[-\w]{25,}", str(url))
    return match.group(0) if match else None
