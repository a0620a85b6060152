"""
Base handler class for spreadsheet-bound operations.

Provides common functionality for all handlers:
- Spreadsheet selection (explicit ID or SPREADSHEET_ID from the environment)
- Lazy access to the document property store
- Response helpers (ok/ng) and AppError translation
"""
from abc import ABC
from typing import Any

import gspread

from sheets_client import SheetsClient
from core.property_store import PropertyStore
from lib.common import ok, ng, log
from lib.errors import AppError, ErrorCode, UserInputError


class BaseHandler(ABC):
    """
    Abstract base class for handlers that work on one spreadsheet.

    Example:
        class SearchHandler(BaseHandler):
            def search(self, query):
                ...
                return self._ok("cards.search", {"rows": rows})
    """

    def __init__(
        self,
        sheets: SheetsClient,
        spreadsheet_id: str | None = None,
        store: PropertyStore | None = None,
    ) -> None:
        """
        Initialize handler with sheets client and optional overrides.

        Args:
            sheets: SheetsClient instance
            spreadsheet_id: Target spreadsheet; defaults to SPREADSHEET_ID
            store: Property store override (tests inject an in-memory one)
        """
        self.sheets = sheets
        if spreadsheet_id is None:
            from env_loader import get_spreadsheet_id
            spreadsheet_id = get_spreadsheet_id()
        self.spreadsheet_id = spreadsheet_id
        self._store = store

    # === Properties ===

    @property
    def store(self) -> PropertyStore:
        """Property store of the target spreadsheet (created lazily)."""
        if self._store is None:
            self._store = PropertyStore(self.sheets, self.require_spreadsheet_id())
        return self._store

    def require_spreadsheet_id(self) -> str:
        if not self.spreadsheet_id:
            raise UserInputError("spreadsheet_id is required (or set SPREADSHEET_ID)")
        return self.spreadsheet_id

    # === Response Helpers ===

    def _ok(self, op: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Return success response.

        Args:
            op: Operation name
            data: Response data

        Returns:
            Success response dict
        """
        return ok(op, data or {})

    def _error(
        self,
        op: str,
        code: str,
        message: str,
        extra: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Return error response.

        Args:
            op: Operation name
            code: Error code
            message: Error message
            extra: Additional error data

        Returns:
            Error response dict
        """
        return ng(op, code, message, extra)

    def _from_exception(self, op: str, exc: Exception) -> dict[str, Any]:
        """Translate an exception into an error response."""
        if isinstance(exc, AppError):
            return exc.to_response(op)
        log(f"{op} failed: {exc!r}")
        if isinstance(exc, gspread.exceptions.GSpreadException):
            return self._error(op, ErrorCode.SHEET_ERROR, str(exc) or type(exc).__name__)
        return self._error(op, ErrorCode.INTERNAL_ERROR, str(exc))
