"""
Type definitions for Scryfall Sheets.
Provides type safety for responses, sheet data and card records.
"""
from typing import TypedDict, Any


class ErrorDetail(TypedDict):
    """Error detail structure."""
    code: str
    message: str


class SuccessResponse(TypedDict):
    """Successful API response."""
    ok: bool
    op: str
    data: dict[str, Any]


class ErrorResponse(TypedDict):
    """Error API response."""
    ok: bool
    op: str
    error: ErrorDetail


# Union type for all API responses
Response = SuccessResponse | ErrorResponse

# Sheet data types
CellValue = str | int | float | bool
SheetRow = list[CellValue]
SheetValues = list[SheetRow]

# A Scryfall card object as decoded from JSON
Card = dict[str, Any]
