"""
Utility libraries for Scryfall Sheets.
Contains pure functions with no Google or HTTP access.
"""
from .common import log, to_int_or_none, ok, ng
from .card_fields import resolve_field, resolve_order, card_to_row, deep_get, format_value
from .filenames import sanitize_filename, filename_from_url, filename_from_label, extension_for_content_type
from .sheet_utils import GridRange, a1_cell, a1_range, parse_a1_range
from .types import (
    Response,
    SuccessResponse,
    ErrorResponse,
    ErrorDetail,
    Card,
    CellValue,
    SheetRow,
    SheetValues,
)

__all__ = [
    # Response types
    "Response",
    "SuccessResponse",
    "ErrorResponse",
    "ErrorDetail",
    "Card",
    "CellValue",
    "SheetRow",
    "SheetValues",
    "GridRange",
    # Functions
    "log",
    "to_int_or_none",
    "ok",
    "ng",
    "resolve_field",
    "resolve_order",
    "card_to_row",
    "deep_get",
    "format_value",
    "sanitize_filename",
    "filename_from_url",
    "filename_from_label",
    "extension_for_content_type",
    "a1_cell",
    "a1_range",
    "parse_a1_range",
]
