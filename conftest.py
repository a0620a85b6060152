"""
Pytest configuration and fixtures for Scryfall Sheets tests.

Google Sheets and Drive are replaced by in-memory fakes or MagicMocks;
HTTP goes through httpx.MockTransport.
"""
import json
import os
import pytest
from typing import Any
from unittest.mock import MagicMock

import httpx

# Set test environment variables before importing anything
os.environ.setdefault("GOOGLE_CREDENTIALS_JSON", '{"type": "service_account", "project_id": "test"}')
os.environ.setdefault("SCRYFALL_USER_AGENT", "scryfall-sheets-tests/1.0")

from lib.sheet_utils import parse_a1_range


# ========== Response Assertion Helpers ==========

class ResponseAssertions:
    """Helper class for asserting API response structures."""

    @staticmethod
    def assert_success(response: dict, op: str | None = None) -> dict:
        """Assert response is successful and return data."""
        assert response.get("ok") is True, f"Expected success, got: {response}"
        if op:
            assert response.get("op") == op, f"Expected op={op}, got {response.get('op')}"
        return response.get("data", {})

    @staticmethod
    def assert_error(response: dict, code: str, op: str | None = None) -> dict:
        """Assert response is an error with given code and return the error."""
        assert response.get("ok") is False, f"Expected error, got success: {response}"
        assert response.get("error", {}).get("code") == code, \
            f"Expected error code {code}, got {response.get('error', {}).get('code')}"
        if op:
            assert response.get("op") == op, f"Expected op={op}, got {response.get('op')}"
        return response.get("error", {})


@pytest.fixture
def assertions():
    """Fixture providing response assertion helpers."""
    return ResponseAssertions()


@pytest.fixture(autouse=True)
def reset_singletons():
    """No client instance leaks from one test into the next."""
    from sheets_client import reset_sheets_client
    from drive_client import reset_drive_client
    from scryfall_client import reset_scryfall_client

    yield
    reset_sheets_client()
    reset_drive_client()
    reset_scryfall_client()


# ========== In-memory Google Sheets ==========

class InMemorySheets:
    """
    Stand-in for SheetsClient.

    Worksheets are dicts of {(row, col): value} with 1-based coordinates.
    `writes` records every update_range call.
    """

    def __init__(self) -> None:
        self.worksheets: dict[str, dict[str, dict[tuple[int, int], Any]]] = {}
        self.writes: list[tuple[str, str, str, list[list[Any]], bool]] = []
        self.created: list[tuple[str, str, bool]] = []

    def _sheet(self, spreadsheet_id: str, sheet_name: str) -> dict[tuple[int, int], Any]:
        return self.worksheets.setdefault(spreadsheet_id, {})[sheet_name]

    def set_cell(self, spreadsheet_id: str, sheet_name: str, row: int, col: int, value: Any) -> None:
        self.worksheets.setdefault(spreadsheet_id, {}).setdefault(sheet_name, {})[(row, col)] = value

    def has_worksheet(self, spreadsheet_id: str, sheet_name: str) -> bool:
        return sheet_name in self.worksheets.get(spreadsheet_id, {})

    def get_or_create_worksheet(self, spreadsheet_id, sheet_name, rows=20, cols=2, hidden=False):
        if not self.has_worksheet(spreadsheet_id, sheet_name):
            self.worksheets.setdefault(spreadsheet_id, {})[sheet_name] = {}
            self.created.append((spreadsheet_id, sheet_name, hidden))
        return sheet_name

    def get_all_values(self, spreadsheet_id: str, sheet_name: str) -> list[list[str]]:
        cells = self._sheet(spreadsheet_id, sheet_name)
        if not cells:
            return []
        height = max(r for r, _ in cells)
        width = max(c for _, c in cells)
        return [
            ["" if cells.get((r, c)) is None else str(cells.get((r, c))) for c in range(1, width + 1)]
            for r in range(1, height + 1)
        ]

    def get_displayed_value(self, spreadsheet_id: str, sheet_name: str, row: int, col: int) -> str:
        value = self._sheet(spreadsheet_id, sheet_name).get((row, col))
        return "" if value is None else str(value)

    def update_range(self, spreadsheet_id, sheet_name, range_notation, values, raw=False) -> None:
        self.writes.append((spreadsheet_id, sheet_name, range_notation, values, raw))
        grid = parse_a1_range(range_notation)
        for i, row_values in enumerate(values):
            for j, value in enumerate(row_values):
                self.set_cell(spreadsheet_id, sheet_name, grid.row + i, grid.column + j, value)


@pytest.fixture
def sheets():
    """Empty in-memory spreadsheet service."""
    return InMemorySheets()


@pytest.fixture
def mock_sheets_client():
    """
    Mock SheetsClient for unit tests.
    Returns a MagicMock that can be configured per test.
    """
    mock = MagicMock()
    mock.get_all_values.return_value = []
    mock.has_worksheet.return_value = False
    mock.get_displayed_value.return_value = ""
    return mock


@pytest.fixture
def mock_drive_client():
    """Mock DriveClient whose create_file returns sequential IDs."""
    mock = MagicMock()
    mock.create_file.side_effect = lambda folder_id, name, content, mime_type: f"file-{name}"
    return mock


# ========== Scryfall fixtures ==========

def make_card(name: str, **extra: Any) -> dict[str, Any]:
    """Minimal Scryfall card object."""
    card = {
        "object": "card",
        "name": name,
        "type_line": "Creature — Dragon",
        "color_identity": ["R"],
        "prices": {"usd": "1.00", "eur": None},
        "image_uris": {"normal": f"https://cards.scryfall.io/normal/{name.replace(' ', '_')}.jpg"},
        "scryfall_uri": f"https://scryfall.com/card/{name.replace(' ', '-').lower()}",
    }
    card.update(extra)
    return card


@pytest.fixture
def sample_card():
    return make_card(
        "Shivan Dragon",
        oracle_text="Flying\n{R}: Shivan Dragon gets +1/+0 until end of turn.",
        mana_cost="{4}{R}{R}",
        cmc=6.0,
    )


@pytest.fixture
def sample_dfc_card():
    """A double-faced card: faces carry name/oracle/image, the card carries prices."""
    return {
        "object": "card",
        "name": "Delver of Secrets // Insectile Aberration",
        "prices": {"usd": "0.25"},
        "color_identity": ["U"],
        "card_faces": [
            {
                "name": "Delver of Secrets",
                "type_line": "Creature — Human Wizard",
                "oracle_text": "At the beginning of your upkeep, look at the top card.",
                "image_uris": {"normal": "https://cards.scryfall.io/normal/front/delver.jpg"},
            },
            {
                "name": "Insectile Aberration",
                "type_line": "Creature — Human Insect",
                "oracle_text": "Flying",
                "flavor_text": "Back face only",
                "image_uris": {"normal": "https://cards.scryfall.io/normal/back/delver.jpg"},
            },
        ],
    }


class ScryfallStub:
    """
    Serves canned search pages through an httpx.MockTransport.

    `pages` is a list of response bodies (dicts, or raw strings for
    malformed responses); page N of a request gets pages[N-1].
    """

    def __init__(self, pages: list[Any], status_code: int = 200) -> None:
        self.pages = pages
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        page = int(request.url.params.get("page", "1"))
        body = self.pages[page - 1]
        if isinstance(body, (str, bytes)):
            return httpx.Response(self.status_code, content=body)
        return httpx.Response(self.status_code, content=json.dumps(body).encode("utf-8"),
                              headers={"content-type": "application/json"})

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    @property
    def pages_fetched(self) -> list[int]:
        return [int(r.url.params.get("page", "1")) for r in self.requests]


def search_page(cards: list[dict], has_more: bool) -> dict[str, Any]:
    return {"object": "list", "total_cards": len(cards), "has_more": has_more, "data": cards}


@pytest.fixture
def scryfall_stub():
    """Factory: scryfall_stub(pages) -> ScryfallStub."""
    return ScryfallStub
