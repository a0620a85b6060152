"""
Card field resolution and formatting.

Turns Scryfall card objects into flat spreadsheet rows:
- alias resolution for field and order names
- first-face merge for multi-faced cards
- dotted-path extraction ("prices.usd")
- display formatting for strings and lists
"""
from typing import Any

from config import FIELD_ALIASES, ORDER_ALIASES, IMAGE_FORMULA
from lib.types import Card, CellValue, SheetRow


def resolve_field(name: str) -> str:
    """Map a field shortcut to its card path; unknown names pass through."""
    return FIELD_ALIASES.get(name, name)


def resolve_order(name: str) -> str:
    """Map an order shortcut to its API value; unknown names pass through."""
    return ORDER_ALIASES.get(name, name)


def merge_first_face(card: Card) -> Card:
    """
    Shallow-merge the first card face over the card itself.

    Only the first face is used; fields that exist on later faces only
    are not visible in the result.
    """
    faces = card.get("card_faces")
    if isinstance(faces, list) and faces and isinstance(faces[0], dict):
        return {**card, **faces[0]}
    return dict(card)


def image_formula(card: Card) -> str:
    """=IMAGE(...) formula for the card's normal-size image, or "" if it has none."""
    uris = card.get("image_uris")
    url = uris.get("normal") if isinstance(uris, dict) else None
    if not url:
        return ""
    return IMAGE_FORMULA.format(url=url)


def deep_get(record: Any, path: str) -> Any:
    """
    Walk a dotted path into nested dicts and lists.
    Numeric steps index into lists ("card_faces.1.name").
    Returns "" when any step is missing.
    """
    cur = record
    for key in path.split("."):
        if isinstance(cur, dict) and key in cur:
            cur = cur[key]
        elif isinstance(cur, list) and key.isdigit() and int(key) < len(cur):
            cur = cur[int(key)]
        else:
            return ""
    return "" if cur is None else cur


def format_value(field: str, value: Any) -> CellValue:
    """
    Format an extracted value for display in a cell.

    - strings: every newline is doubled
    - lists: joined with "" for color fields, ", " otherwise
    - nested objects: not representable in a cell, rendered as ""
    """
    if isinstance(value, str):
        return value.replace("\n", "\n\n")
    if isinstance(value, (list, tuple)):
        sep = "" if "color" in field else ", "
        return sep.join(str(v) for v in value)
    if isinstance(value, dict):
        return ""
    return value


def card_to_row(card: Card, fields: list[str]) -> SheetRow:
    """Flatten one card into a row of cells, one per resolved field."""
    merged = merge_first_face(card)
    merged["image"] = image_formula(merged)
    return [format_value(f, deep_get(merged, f)) for f in fields]
