"""
Tests for the edit-triggered image downloader.
"""
import httpx
import pytest
from unittest.mock import MagicMock

from core.property_store import PropertyStore
from core.settings import Config, save_config
from handlers.downloader import (
    EditEvent,
    EditTriggerHandler,
    ImageDownloader,
    candidate_rows,
)
from lib.errors import ConfigMissingError, UserInputError

SHEET_ID = "sheet-1"
CONFIG = Config("Images", 3, "folder-abc", 1, 0)


class ImageServer:
    """httpx transport serving canned images keyed by URL."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.requested = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, content=b"not found")
        if isinstance(route, Exception):
            raise route
        return route

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


def png(body=b"\x89PNG..."):
    return httpx.Response(200, content=body, headers={"content-type": "image/png"})


def event(row=5, num_rows=1, column=3, num_columns=1, sheet="Images"):
    return EditEvent(SHEET_ID, sheet, row, num_rows, column, num_columns)


@pytest.fixture
def store(sheets):
    s = PropertyStore(sheets, SHEET_ID)
    save_config(s, CONFIG)
    return s


@pytest.fixture
def server():
    return ImageServer()


@pytest.fixture
def handler(sheets, mock_drive_client, store, server):
    return EditTriggerHandler(sheets, mock_drive_client, SHEET_ID, store, http=server.client())


class TestCandidateRows:

    def test_block_covering_url_column(self):
        assert candidate_rows(event(5, 4, 2, 3), CONFIG) == [5, 6, 7, 8]

    def test_block_missing_url_column(self):
        assert candidate_rows(event(5, 4, 5, 2), CONFIG) == []

    def test_header_rows_trimmed(self):
        assert candidate_rows(event(1, 3, 3, 1), CONFIG) == [2, 3]

    def test_header_only_edit(self):
        assert candidate_rows(event(1, 1, 3, 1), CONFIG) == []

    def test_no_header_rows(self):
        config = Config("Images", 3, "folder-abc", 0)
        assert candidate_rows(event(1, 2, 3, 1), config) == [1, 2]


class TestEditEventPayload:

    def test_from_range(self):
        e = EditEvent.from_payload({"sheet_name": "Images", "range": "B5:D8"}, SHEET_ID)
        assert e == EditEvent(SHEET_ID, "Images", 5, 4, 2, 3)

    def test_from_row_column(self):
        e = EditEvent.from_payload({"spreadsheetId": "other", "sheetName": "Images", "row": 7, "column": 3})
        assert e == EditEvent("other", "Images", 7, 1, 3, 1)

    @pytest.mark.parametrize("payload", [
        [],
        {"range": "A1"},
        {"sheet_name": "Images"},
        {"sheet_name": "Images", "range": "nonsense"},
    ])
    def test_invalid_payloads(self, payload):
        with pytest.raises(UserInputError):
            EditEvent.from_payload(payload, SHEET_ID)

    def test_spreadsheet_id_required(self):
        with pytest.raises(UserInputError):
            EditEvent.from_payload({"sheet_name": "Images", "range": "A1"})


class TestOnEditGates:

    def test_missing_range_ignored(self, handler):
        assert handler.on_edit(None).status == "ignored"
        assert handler.on_edit(event(row=0)).status == "ignored"

    def test_missing_config_raises(self, sheets, mock_drive_client):
        handler = EditTriggerHandler(sheets, mock_drive_client, SHEET_ID, PropertyStore(sheets, SHEET_ID))
        with pytest.raises(ConfigMissingError) as exc:
            handler.on_edit(event())
        assert "FOLDER_ID" in exc.value.missing

    def test_other_sheet_ignored(self, handler, sheets, mock_drive_client):
        sheets.set_cell(SHEET_ID, "Other", 5, 3, "https://example.com/a.png")

        outcome = handler.on_edit(event(sheet="Other"))

        assert outcome.status == "ignored"
        mock_drive_client.create_file.assert_not_called()

    def test_header_edit_ignored(self, handler, sheets, mock_drive_client):
        sheets.set_cell(SHEET_ID, "Images", 1, 3, "https://example.com/a.png")

        assert handler.on_edit(event(row=1)).status == "ignored"
        mock_drive_client.create_file.assert_not_called()

    def test_edit_outside_url_column_ignored(self, handler, mock_drive_client):
        assert handler.on_edit(event(5, 4, 5, 2)).status == "ignored"
        mock_drive_client.create_file.assert_not_called()


class TestOnEditDownloads:

    def test_pasted_block_saves_each_row(self, handler, sheets, server, mock_drive_client):
        for row in range(5, 9):
            url = f"https://img.example.com/cards/card{row}.png"
            sheets.set_cell(SHEET_ID, "Images", row, 3, url)
            server.routes[url] = png()

        outcome = handler.on_edit(event(5, 4, 2, 3))

        assert outcome.status == "processed"
        assert [s.row for s in outcome.saved] == [5, 6, 7, 8]
        assert [s.name for s in outcome.saved] == ["card5.png", "card6.png", "card7.png", "card8.png"]
        assert mock_drive_client.create_file.call_count == 4
        folder, name, content, mime = mock_drive_client.create_file.call_args_list[0][0]
        assert (folder, name, content, mime) == ("folder-abc", "card5.png", b"\x89PNG...", "image/png")

    def test_non_url_cells_skipped(self, handler, sheets, server):
        sheets.set_cell(SHEET_ID, "Images", 5, 3, "not a url")
        sheets.set_cell(SHEET_ID, "Images", 6, 3, "ftp://example.com/a.png")
        sheets.set_cell(SHEET_ID, "Images", 7, 3, "  HTTPS://img.example.com/ok.png ")
        server.routes["https://img.example.com/ok.png"] = png()

        outcome = handler.on_edit(event(5, 4, 3, 1))

        assert outcome.skipped == [5, 6, 8]
        assert [s.row for s in outcome.saved] == [7]

    def test_failed_row_does_not_stop_others(self, handler, sheets, server):
        sheets.set_cell(SHEET_ID, "Images", 5, 3, "https://img.example.com/missing.png")
        sheets.set_cell(SHEET_ID, "Images", 6, 3, "https://img.example.com/ok.png")
        server.routes["https://img.example.com/ok.png"] = png()

        outcome = handler.on_edit(event(5, 2, 3, 1))

        assert outcome.failed == [5]
        assert [s.row for s in outcome.saved] == [6]

    def test_unreadable_cell_counts_as_failed(self, mock_sheets_client, mock_drive_client, store, server):
        mock_sheets_client.get_displayed_value.side_effect = RuntimeError("sheet gone")
        handler = EditTriggerHandler(
            mock_sheets_client, mock_drive_client, SHEET_ID, store, http=server.client(),
        )

        outcome = handler.on_edit(event())

        assert outcome.failed == [5]

    def test_repaste_saves_again(self, handler, sheets, server, mock_drive_client):
        url = "https://img.example.com/again.png"
        sheets.set_cell(SHEET_ID, "Images", 5, 3, url)
        server.routes[url] = png()

        handler.on_edit(event())
        handler.on_edit(event())

        assert mock_drive_client.create_file.call_count == 2


class TestHandle:

    def test_envelope(self, handler, sheets, server, assertions):
        sheets.set_cell(SHEET_ID, "Images", 5, 3, "https://img.example.com/x.png")
        server.routes["https://img.example.com/x.png"] = png()

        data = assertions.assert_success(
            handler.handle({"sheet_name": "Images", "range": "C5"}), "hooks.edit",
        )

        assert data["status"] == "processed"
        assert data["saved"] == [{
            "row": 5, "url": "https://img.example.com/x.png", "name": "x.png", "file_id": "file-x.png",
        }]

    def test_bad_payload(self, handler, assertions):
        assertions.assert_error(handler.handle({"sheet_name": "Images"}), "BAD_REQUEST", "hooks.edit")

    def test_missing_config(self, sheets, mock_drive_client, assertions):
        handler = EditTriggerHandler(sheets, mock_drive_client, SHEET_ID, PropertyStore(sheets, SHEET_ID))

        error = assertions.assert_error(
            handler.handle({"sheet_name": "Images", "range": "C5"}), "CONFIG_MISSING",
        )
        assert error["missing"] == ["WATCH_SHEET_NAME", "URL_COLUMN", "FOLDER_ID", "HEADER_ROWS"]


class TestImageDownloader:

    def test_non_success_status_not_saved(self, sheets, mock_drive_client, server):
        downloader = ImageDownloader(sheets, mock_drive_client, http=server.client())

        assert downloader.download("https://img.example.com/nope.png", 5, "f", SHEET_ID, "Images") is None
        mock_drive_client.create_file.assert_not_called()

    def test_follows_redirects(self, sheets, mock_drive_client, server):
        server.routes["https://img.example.com/short"] = httpx.Response(
            302, headers={"location": "https://cdn.example.com/full.webp"},
        )
        server.routes["https://cdn.example.com/full.webp"] = httpx.Response(
            200, content=b"RIFF", headers={"content-type": "image/webp"},
        )
        downloader = ImageDownloader(sheets, mock_drive_client, http=server.client())

        saved = downloader.download("https://img.example.com/short", 5, "f", SHEET_ID, "Images")

        assert saved.name == "short.webp"
        assert server.requested == ["https://img.example.com/short", "https://cdn.example.com/full.webp"]

    def test_name_column_used(self, sheets, mock_drive_client, server):
        sheets.set_cell(SHEET_ID, "Images", 5, 1, "Island #3!")
        server.routes["https://img.example.com/a.jpg"] = httpx.Response(
            200, content=b"jpg", headers={"content-type": "image/webp"},
        )
        downloader = ImageDownloader(sheets, mock_drive_client, http=server.client())

        saved = downloader.download("https://img.example.com/a.jpg", 5, "f", SHEET_ID, "Images", 1)

        assert saved.name == "Island__3_.webp"

    def test_blank_name_cell_falls_back_to_url(self, sheets, mock_drive_client, server):
        sheets.set_cell(SHEET_ID, "Images", 5, 1, "   ")
        server.routes["https://img.example.com/a.jpg"] = png()
        downloader = ImageDownloader(sheets, mock_drive_client, http=server.client())

        saved = downloader.download("https://img.example.com/a.jpg", 5, "f", SHEET_ID, "Images", 1)

        assert saved.name == "a.jpg"

    def test_unreadable_name_cell_falls_back_to_url(self, mock_sheets_client, mock_drive_client, server):
        mock_sheets_client.get_displayed_value.side_effect = RuntimeError("quota exceeded")
        server.routes["https://img.example.com/b.png"] = png()
        downloader = ImageDownloader(mock_sheets_client, mock_drive_client, http=server.client())

        saved = downloader.download("https://img.example.com/b.png", 5, "f", SHEET_ID, "Images", 2)

        assert saved.name == "b.png"
        mock_drive_client.create_file.assert_called_once()

    def test_missing_content_type(self, sheets, mock_drive_client, server):
        server.routes["https://img.example.com/blob"] = httpx.Response(200, content=b"data")
        downloader = ImageDownloader(sheets, mock_drive_client, http=server.client())

        saved = downloader.download("https://img.example.com/blob", 9, "f", SHEET_ID, "Images")

        assert saved.name == "blob.jpg"
        assert mock_drive_client.create_file.call_args[0][3] == "application/octet-stream"

    def test_transport_error_not_saved(self, sheets, mock_drive_client, server):
        server.routes["https://img.example.com/down.png"] = httpx.ConnectError("refused")
        downloader = ImageDownloader(sheets, mock_drive_client, http=server.client())

        assert downloader.download("https://img.example.com/down.png", 5, "f", SHEET_ID, "Images") is None

    def test_drive_error_not_saved(self, sheets, server):
        drive = MagicMock()
        drive.create_file.side_effect = RuntimeError("storage quota")
        server.routes["https://img.example.com/a.png"] = png()
        downloader = ImageDownloader(sheets, drive, http=server.client())

        assert downloader.download("https://img.example.com/a.png", 5, "f", SHEET_ID, "Images") is None
