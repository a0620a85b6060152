"""
Downloader settings stored in the document property store.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any

from config import (
    CONFIG_KEYS,
    REQUIRED_CONFIG_KEYS,
    PROP_WATCH_SHEET,
    PROP_URL_COLUMN,
    PROP_FOLDER_ID,
    PROP_HEADER_ROWS,
    PROP_NAME_COLUMN,
)
from core.property_store import PropertyStore
from lib.common import to_int_or_none
from lib.errors import ConfigMissingError


@dataclass(frozen=True)
class Config:
    """Settings for the edit-triggered image downloader."""
    watched_sheet_name: str
    url_column: int
    folder_id: str
    header_rows: int
    name_column: int = 0  # 0 = use the URL for filenames

    def to_properties(self) -> dict[str, str]:
        return {
            PROP_WATCH_SHEET: self.watched_sheet_name,
            PROP_URL_COLUMN: str(self.url_column),
            PROP_FOLDER_ID: self.folder_id,
            PROP_HEADER_ROWS: str(self.header_rows),
            PROP_NAME_COLUMN: str(self.name_column),
        }

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def missing_keys(props: dict[str, str]) -> list[str]:
    """Required keys that are absent or blank."""
    return [k for k in REQUIRED_CONFIG_KEYS if not str(props.get(k, "")).strip()]


def config_from_properties(props: dict[str, str]) -> Config:
    """
    Build a Config from raw properties.

    Raises:
        ConfigMissingError: If a required key is absent or a stored
            number cannot be parsed
    """
    missing = missing_keys(props)
    if missing:
        raise ConfigMissingError(missing)

    url_column = to_int_or_none(props[PROP_URL_COLUMN])
    header_rows = to_int_or_none(props[PROP_HEADER_ROWS])
    name_column = to_int_or_none(props.get(PROP_NAME_COLUMN)) or 0

    invalid = []
    if url_column is None or url_column < 1:
        invalid.append(PROP_URL_COLUMN)
    if header_rows is None or header_rows < 0:
        invalid.append(PROP_HEADER_ROWS)
    if invalid:
        raise ConfigMissingError(
            invalid,
            "configuration is invalid; bad values for: " + ", ".join(invalid)
            + ". Run the configure command again.",
        )

    return Config(
        watched_sheet_name=props[PROP_WATCH_SHEET].strip(),
        url_column=url_column,
        folder_id=props[PROP_FOLDER_ID].strip(),
        header_rows=header_rows,
        name_column=max(name_column, 0),
    )


def load_config(store: PropertyStore) -> Config:
    """Read and validate the stored configuration."""
    return config_from_properties(store.get_properties())


def save_config(store: PropertyStore, config: Config) -> None:
    """
    Write all config values in a single batch.
    Non-config properties (such as the trigger id) are kept.
    """
    props = store.get_properties()
    for key in CONFIG_KEYS:
        props.pop(key, None)
    props.update(config.to_properties())
    store.set_properties(props, delete_all_others=True)
