"""
Single-image downloader: fetch one URL and store it in a Drive folder.
"""
from __future__ import annotations

from dataclasses import dataclass

import httpx

from drive_client import DriveClient
from sheets_client import SheetsClient
from lib.common import log
from lib.filenames import filename_from_label, filename_from_url


@dataclass
class SavedImage:
    """A file created in Drive for one row."""
    row: int
    url: str
    name: str
    file_id: str


class ImageDownloader:
    """
    Downloads images for rows of the watched sheet.

    Failures never propagate: a bad status or any exception is logged and
    the row yields None.
    """

    def __init__(
        self,
        sheets: SheetsClient,
        drive: DriveClient,
        http: httpx.Client | None = None,
        timeout: float = 60.0,
    ) -> None:
        self.sheets = sheets
        self.drive = drive
        self.http = http or httpx.Client(timeout=timeout)

    def download(
        self,
        url: str,
        row: int,
        folder_id: str,
        spreadsheet_id: str,
        sheet_name: str,
        name_column: int = 0,
    ) -> SavedImage | None:
        """
        Fetch `url` and create a file for it in `folder_id`.

        Args:
            url: Image URL from the sheet
            row: Sheet row the URL came from (used for naming)
            folder_id: Destination Drive folder
            spreadsheet_id: Spreadsheet holding the row
            sheet_name: Worksheet holding the row
            name_column: Column whose displayed value names the file (0 = derive from URL)

        Returns:
            SavedImage, or None if the row was not saved
        """
        try:
            response = self.http.get(url, follow_redirects=True)
            if not response.is_success:
                log(f"row {row}: HTTP {response.status_code} for {url}; skipped")
                return None

            content_type = response.headers.get("content-type", "")
            name = None
            if name_column > 0:
                name = self._name_from_cell(spreadsheet_id, sheet_name, row, name_column, content_type)
            if not name:
                name = filename_from_url(url, row, content_type)

            mime_type = content_type.split(";", 1)[0].strip() or "application/octet-stream"
            file_id = self.drive.create_file(folder_id, name, response.content, mime_type)
        except Exception as e:
            log(f"row {row}: failed to save {url}: {e!r}")
            return None

        log(f"row {row}: saved {url} as {name} ({file_id})")
        return SavedImage(row=row, url=url, name=name, file_id=file_id)

    def _name_from_cell(
        self,
        spreadsheet_id: str,
        sheet_name: str,
        row: int,
        name_column: int,
        content_type: str,
    ) -> str | None:
        """Filename from the name column; None (use the URL) when the cell is blank or unreadable."""
        try:
            label = self.sheets.get_displayed_value(spreadsheet_id, sheet_name, row, name_column)
        except Exception as e:
            log(f"row {row}: could not read name cell: {e!r}; naming from URL")
            return None
        return filename_from_label(label, content_type)
