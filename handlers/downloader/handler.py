"""
Edit trigger handler class.

Watches one column of one sheet for pasted image URLs and saves each
referenced image into the configured Drive folder. Every invocation is
independent; nothing is remembered between edits, so pasting the same
URL twice saves it twice.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import httpx

from core.base_handler import BaseHandler
from core.property_store import PropertyStore
from core.settings import Config, load_config
from drive_client import DriveClient
from handlers.downloader.events import EditEvent
from handlers.downloader.image_downloader import ImageDownloader, SavedImage
from sheets_client import SheetsClient
from lib.common import log

_URL_PREFIX = re.compile(r"^https?://", re.IGNORECASE)


@dataclass
class EditOutcome:
    """What one edit invocation did."""
    status: str  # "ignored" or "processed"
    reason: str = ""
    saved: list[SavedImage] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "reason": self.reason,
            "saved": [
                {"row": s.row, "url": s.url, "name": s.name, "file_id": s.file_id}
                for s in self.saved
            ],
            "skipped": self.skipped,
            "failed": self.failed,
        }


def candidate_rows(event: EditEvent, config: Config) -> list[int]:
    """
    Rows of the edit that may hold a new URL.

    Empty when the edit stays inside the header rows or does not touch
    the URL column.
    """
    grid = event.grid
    first = max(grid.row, config.header_rows + 1)
    if first > grid.last_row:
        return []
    if not grid.column <= config.url_column <= grid.last_column:
        return []
    return list(range(first, grid.last_row + 1))


class EditTriggerHandler(BaseHandler):
    """
    Handler for edit events on the watched sheet.

    Gates, in order (the first failing gate ends the invocation):
    1. the event describes a cell range
    2. the configuration is complete (raises ConfigMissingError otherwise)
    3. the edit is on the watched sheet
    4. the edit reaches below the header rows
    5. the edit covers the URL column
    """

    def __init__(
        self,
        sheets: SheetsClient,
        drive: DriveClient,
        spreadsheet_id: str | None = None,
        store: PropertyStore | None = None,
        http: httpx.Client | None = None,
        downloader: ImageDownloader | None = None,
    ) -> None:
        super().__init__(sheets, spreadsheet_id, store)
        self.downloader = downloader or ImageDownloader(sheets, drive, http=http)

    def on_edit(self, event: EditEvent | None) -> EditOutcome:
        if event is None or not event.is_valid():
            return EditOutcome("ignored", "no edited range")

        config = load_config(self.store)

        if event.sheet_name != config.watched_sheet_name:
            return EditOutcome("ignored", f"sheet {event.sheet_name!r} is not watched")

        rows = candidate_rows(event, config)
        if not rows:
            return EditOutcome("ignored", "edit does not touch the URL column below the header")

        outcome = EditOutcome("processed")
        for row in rows:
            self._process_row(event, config, row, outcome)
        log(
            f"edit {event.sheet_name}!R{event.row}C{event.column}: "
            f"saved={len(outcome.saved)} skipped={len(outcome.skipped)} failed={len(outcome.failed)}"
        )
        return outcome

    def _process_row(self, event: EditEvent, config: Config, row: int, outcome: EditOutcome) -> None:
        try:
            url = self.sheets.get_displayed_value(
                event.spreadsheet_id, event.sheet_name, row, config.url_column
            ).strip()
        except Exception as e:
            log(f"row {row}: could not read URL cell: {e!r}")
            outcome.failed.append(row)
            return

        if not _URL_PREFIX.match(url):
            outcome.skipped.append(row)
            return

        saved = self.downloader.download(
            url,
            row,
            config.folder_id,
            event.spreadsheet_id,
            event.sheet_name,
            config.name_column,
        )
        if saved is None:
            outcome.failed.append(row)
        else:
            outcome.saved.append(saved)

    def handle(self, payload: Any) -> dict[str, Any]:
        """Parse a webhook payload and run on_edit, as a response envelope."""
        op = "hooks.edit"
        try:
            event = EditEvent.from_payload(payload, self.spreadsheet_id)
            outcome = self.on_edit(event)
        except Exception as e:
            log(f"{op} failed: {e}")
            return self._from_exception(op, e)
        return self._ok(op, outcome.to_dict())
