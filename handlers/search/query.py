"""
Card search: query Scryfall and flatten the matches into rows.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from config import (
    MAX_RESULTS,
    DEFAULT_FIELDS,
    DEFAULT_NUM_RESULTS,
    DEFAULT_ORDER,
    DEFAULT_DIRECTION,
    DEFAULT_UNIQUE,
)
from scryfall_client import ScryfallClient
from lib.card_fields import resolve_field, resolve_order, card_to_row
from lib.errors import UserInputError
from lib.input_parser import split_fields, coerce_int
from lib.types import SheetRow, SheetValues


@dataclass
class SearchResult:
    """Rows for one search, plus the resolved field names they follow."""
    fields: list[str]
    rows: list[SheetRow] = field(default_factory=list)

    def as_table(self, include_header: bool = False) -> SheetValues:
        if include_header:
            return [list(self.fields)] + self.rows
        return list(self.rows)


def clamp_num_results(num_results: Any) -> int:
    """
    Coerce the requested row count; values above MAX_RESULTS are clamped.

    Raises:
        UserInputError: If the value is not a positive integer
    """
    if num_results is None or num_results == "":
        return DEFAULT_NUM_RESULTS
    n = coerce_int(num_results)
    if n is None or n < 1:
        raise UserInputError(f"num_results must be a positive integer, got {num_results!r}")
    return min(n, MAX_RESULTS)


def search_cards(
    client: ScryfallClient,
    query: Any,
    fields: Any = DEFAULT_FIELDS,
    num_results: Any = DEFAULT_NUM_RESULTS,
    order: str | None = DEFAULT_ORDER,
    direction: str | None = DEFAULT_DIRECTION,
    unique: str | None = DEFAULT_UNIQUE,
) -> SearchResult:
    """
    Run a Scryfall search and return one row per card.

    Args:
        client: ScryfallClient used for the paginated fetch
        query: Scryfall search syntax, e.g. "t:dragon cmc<=4" (required)
        fields: Space/comma separated field names; shortcuts such as
                "price" or "type" are resolved through FIELD_ALIASES
        num_results: Max rows (default 150, clamped to MAX_RESULTS)
        order: Sort order; shortcuts resolved through ORDER_ALIASES
        direction: "auto", "asc" or "desc"
        unique: "cards", "art" or "prints"

    Returns:
        SearchResult in the order Scryfall returned the cards

    Raises:
        UserInputError: If query is missing or num_results is invalid
        UpstreamError: If any page of the search cannot be read
    """
    if query is None or not str(query).strip():
        raise UserInputError("query is required")

    limit = clamp_num_results(num_results)
    resolved = [resolve_field(f) for f in split_fields(fields)] or [DEFAULT_FIELDS]

    params = {
        "q": str(query).strip(),
        "order": resolve_order(order or DEFAULT_ORDER),
        "dir": direction or DEFAULT_DIRECTION,
        "unique": unique or DEFAULT_UNIQUE,
    }
    cards = client.search(params, limit)

    return SearchResult(
        fields=resolved,
        rows=[card_to_row(card, resolved) for card in cards[:limit]],
    )
