"""
Card search handler class.

Exposes the search as a table for callers to render (`search`) and as a
sheet write at an anchor cell (`populate`).
"""
from __future__ import annotations

from typing import Any

from config import (
    DEFAULT_FIELDS,
    DEFAULT_NUM_RESULTS,
    DEFAULT_ORDER,
    DEFAULT_DIRECTION,
    DEFAULT_UNIQUE,
)
from core.base_handler import BaseHandler
from core.property_store import PropertyStore
from handlers.search.query import search_cards, SearchResult
from scryfall_client import ScryfallClient, get_scryfall_client
from sheets_client import SheetsClient, get_sheets_client
from lib.common import log
from lib.errors import UserInputError
from lib.sheet_utils import parse_a1_cell, a1_range


class CardSearchHandler(BaseHandler):
    """Handler for Scryfall searches that feed a spreadsheet."""

    def __init__(
        self,
        sheets: SheetsClient | None = None,
        scryfall: ScryfallClient | None = None,
        spreadsheet_id: str | None = None,
        store: PropertyStore | None = None,
    ) -> None:
        super().__init__(sheets, spreadsheet_id, store)
        self.scryfall = scryfall or get_scryfall_client()

    def run_query(
        self,
        query: Any,
        fields: Any = DEFAULT_FIELDS,
        num_results: Any = DEFAULT_NUM_RESULTS,
        order: str | None = DEFAULT_ORDER,
        direction: str | None = DEFAULT_DIRECTION,
        unique: str | None = DEFAULT_UNIQUE,
    ) -> SearchResult:
        """Raw search; raises on any failure."""
        return search_cards(self.scryfall, query, fields, num_results, order, direction, unique)

    # === Search ===

    def search(
        self,
        query: Any,
        fields: Any = DEFAULT_FIELDS,
        num_results: Any = DEFAULT_NUM_RESULTS,
        order: str | None = DEFAULT_ORDER,
        direction: str | None = DEFAULT_DIRECTION,
        unique: str | None = DEFAULT_UNIQUE,
        include_header: bool = False,
    ) -> dict[str, Any]:
        """
        Search Scryfall and return the table.

        Returns:
            Response with fields, rows and count
        """
        op = "cards.search"
        try:
            result = self.run_query(query, fields, num_results, order, direction, unique)
        except Exception as e:
            return self._from_exception(op, e)

        return self._ok(op, {
            "fields": result.fields,
            "rows": result.as_table(include_header),
            "count": len(result.rows),
        })

    # === Populate ===

    def populate(
        self,
        sheet_name: str,
        anchor: str = "A1",
        query: Any = None,
        fields: Any = DEFAULT_FIELDS,
        num_results: Any = DEFAULT_NUM_RESULTS,
        order: str | None = DEFAULT_ORDER,
        direction: str | None = DEFAULT_DIRECTION,
        unique: str | None = DEFAULT_UNIQUE,
        include_header: bool = True,
    ) -> dict[str, Any]:
        """
        Search Scryfall and write the table into a worksheet.

        The block starts at `anchor` and is written with USER_ENTERED
        input, so the injected =IMAGE(...) formulas render as images.
        Cells outside the written block are not touched.

        Args:
            sheet_name: Target worksheet
            anchor: Top-left cell, e.g. "A2"
            include_header: Write resolved field names as the first row

        Returns:
            Response with the written range and row count
        """
        op = "cards.populate"
        try:
            if not sheet_name:
                raise UserInputError("sheet_name is required")
            try:
                row, col = parse_a1_cell(anchor)
            except ValueError as e:
                raise UserInputError(str(e)) from e

            result = self.run_query(query, fields, num_results, order, direction, unique)
            table = result.as_table(include_header)
            if not table:
                return self._ok(op, {"range": None, "count": 0, "fields": result.fields})

            target = a1_range(row, col, len(table), len(result.fields))
            if self.sheets is None:
                self.sheets = get_sheets_client()
            self.sheets.update_range(self.require_spreadsheet_id(), sheet_name, target, table)
        except Exception as e:
            return self._from_exception(op, e)

        log(f"{op} wrote {len(result.rows)} rows to {sheet_name}!{target}")
        return self._ok(op, {
            "range": f"{sheet_name}!{target}",
            "count": len(result.rows),
            "fields": result.fields,
        })
