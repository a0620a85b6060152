"""
Google Sheets API client using gspread.
Provides Service Account authentication and the sheet operations the
search and downloader handlers need.
"""
import json
import gspread
from gspread.utils import ValueInputOption, ValueRenderOption
from google.oauth2.service_account import Credentials
from typing import Any

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]


def load_credentials(credentials_json: str | dict) -> Credentials:
    """Build service account credentials from a JSON string or dict."""
    if isinstance(credentials_json, str):
        credentials_json = json.loads(credentials_json)
    return Credentials.from_service_account_info(credentials_json, scopes=SCOPES)


class SheetsClient:
    """Wrapper around gspread for Google Sheets API access."""

    def __init__(self, credentials_json: str | dict):
        """
        Initialize the client with Service Account credentials.

        Args:
            credentials_json: Either a JSON string or dict containing
                             the Service Account credentials.
        """
        self.credentials = load_credentials(credentials_json)
        self.gc = gspread.authorize(self.credentials)
        self._spreadsheet_cache: dict[str, gspread.Spreadsheet] = {}

    def open_by_id(self, spreadsheet_id: str) -> gspread.Spreadsheet:
        """Open a spreadsheet by ID with caching."""
        if spreadsheet_id not in self._spreadsheet_cache:
            self._spreadsheet_cache[spreadsheet_id] = self.gc.open_by_key(spreadsheet_id)
        return self._spreadsheet_cache[spreadsheet_id]

    def get_worksheet(self, spreadsheet_id: str, sheet_name: str) -> gspread.Worksheet:
        """Get a worksheet by name from a spreadsheet."""
        ss = self.open_by_id(spreadsheet_id)
        return ss.worksheet(sheet_name)

    def get_or_create_worksheet(
        self,
        spreadsheet_id: str,
        sheet_name: str,
        rows: int = 20,
        cols: int = 2,
        hidden: bool = False,
    ) -> gspread.Worksheet:
        """Get a worksheet by name, adding it when it does not exist yet."""
        ss = self.open_by_id(spreadsheet_id)
        try:
            return ss.worksheet(sheet_name)
        except gspread.exceptions.WorksheetNotFound:
            ws = ss.add_worksheet(title=sheet_name, rows=rows, cols=cols)
            if hidden:
                ws.hide()
            return ws

    def has_worksheet(self, spreadsheet_id: str, sheet_name: str) -> bool:
        """Check whether a worksheet exists."""
        ss = self.open_by_id(spreadsheet_id)
        return any(ws.title == sheet_name for ws in ss.worksheets())

    def get_all_values(self, spreadsheet_id: str, sheet_name: str) -> list[list[str]]:
        """Get all values from a worksheet as a 2D list."""
        ws = self.get_worksheet(spreadsheet_id, sheet_name)
        return ws.get_all_values()

    def get_displayed_value(self, spreadsheet_id: str, sheet_name: str, row: int, col: int) -> str:
        """
        Get the rendered text of a single cell (1-based row/col).
        Formulas come back as their displayed result, not their source.
        """
        ws = self.get_worksheet(spreadsheet_id, sheet_name)
        value = ws.cell(row, col, value_render_option=ValueRenderOption.formatted).value
        return "" if value is None else str(value)

    def update_range(
        self,
        spreadsheet_id: str,
        sheet_name: str,
        range_notation: str,
        values: list[list[Any]],
        raw: bool = False,
    ) -> None:
        """
        Update a range of cells.
        With raw=False values are parsed as if typed, so formulas evaluate.
        """
        ws = self.get_worksheet(spreadsheet_id, sheet_name)
        option = ValueInputOption.raw if raw else ValueInputOption.user_entered
        ws.update(values=values, range_name=range_notation, value_input_option=option)


# Singleton instance for the application
_sheets_client: SheetsClient | None = None


def get_sheets_client() -> SheetsClient:
    """
    Get the global SheetsClient instance.
    Initializes from environment variables on first call.
    """
    global _sheets_client
    if _sheets_client is None:
        from env_loader import get_google_credentials
        credentials = get_google_credentials()
        _sheets_client = SheetsClient(credentials)
    return _sheets_client


def reset_sheets_client() -> None:
    """Reset the global client (useful for testing)."""
    global _sheets_client
    _sheets_client = None
