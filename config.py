"""
Configuration constants for Scryfall Sheets.
Centralizes the search API endpoint, field/order aliases, limits and property keys.
"""
from typing import Final

# Scryfall search endpoint
SCRYFALL_SEARCH_URL: Final[str] = "https://api.scryfall.com/cards/search"
DEFAULT_USER_AGENT: Final[str] = "scryfall-sheets/1.0"

# Hard ceiling on rows returned by a single search
MAX_RESULTS: Final[int] = 700

# Search defaults
DEFAULT_FIELDS: Final[str] = "name"
DEFAULT_NUM_RESULTS: Final[int] = 150
DEFAULT_ORDER: Final[str] = "name"
DEFAULT_DIRECTION: Final[str] = "auto"
DEFAULT_UNIQUE: Final[str] = "cards"

# Field name shortcuts -> Scryfall card object paths
FIELD_ALIASES: Final[dict[str, str]] = {
    "color": "color_identity",
    "colors": "color_identity",
    "flavor": "flavor_text",
    "mana": "mana_cost",
    "o": "oracle_text",
    "oracle": "oracle_text",
    "price": "prices.usd",
    "type": "type_line",
    "uri": "scryfall_uri",
    "url": "scryfall_uri",
}

# Order name shortcuts -> Scryfall `order` parameter values
ORDER_ALIASES: Final[dict[str, str]] = {
    "price": "usd",
    "prices.usd": "usd",
    "prices.eur": "eur",
    "prices.tix": "tix",
}

# =IMAGE(url, mode 4 = custom size, height, width)
IMAGE_FORMULA: Final[str] = '=IMAGE("{url}", 4, 340, 244)'

# Document-scoped property keys
PROP_WATCH_SHEET: Final[str] = "WATCH_SHEET_NAME"
PROP_URL_COLUMN: Final[str] = "URL_COLUMN"
PROP_FOLDER_ID: Final[str] = "FOLDER_ID"
PROP_HEADER_ROWS: Final[str] = "HEADER_ROWS"
PROP_NAME_COLUMN: Final[str] = "NAME_COLUMN"
PROP_TRIGGER_ID: Final[str] = "EDIT_TRIGGER_ID"

REQUIRED_CONFIG_KEYS: Final[list[str]] = [
    PROP_WATCH_SHEET,
    PROP_URL_COLUMN,
    PROP_FOLDER_ID,
    PROP_HEADER_ROWS,
]
CONFIG_KEYS: Final[list[str]] = REQUIRED_CONFIG_KEYS + [PROP_NAME_COLUMN]

# Hidden worksheet that backs the property store
PROPERTIES_SHEET: Final[str] = "_properties"

# Wizard defaults (first run)
DEFAULT_WATCH_SHEET: Final[str] = "Sheet1"
DEFAULT_URL_COLUMN: Final[int] = 2
DEFAULT_FOLDER_ID: Final[str] = ""
DEFAULT_HEADER_ROWS: Final[int] = 1
DEFAULT_NAME_COLUMN: Final[int] = 0

# Sheets grid limits used for wizard validation
MAX_COLUMN: Final[int] = 18278  # ZZZ
MAX_ROW: Final[int] = 10_000_000

# Image extensions recognized at the end of a URL-derived filename
IMAGE_EXTENSIONS: Final[tuple[str, ...]] = ("png", "jpg", "jpeg", "webp", "gif")
DEFAULT_IMAGE_EXTENSION: Final[str] = "jpg"
