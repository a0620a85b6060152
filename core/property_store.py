"""
Document-scoped key/value property store.

Properties live in a hidden two-column worksheet of the spreadsheet they
belong to, so they travel with the document and are shared by every
process that opens it.

Usage:
    store = PropertyStore(sheets, spreadsheet_id)
    store.set_properties({"FOLDER_ID": "abc"})
    store.get_property("FOLDER_ID")  # -> "abc"
"""
from __future__ import annotations

from typing import Any, Mapping

from config import PROPERTIES_SHEET
from sheets_client import SheetsClient
from lib.sheet_utils import a1_range


class PropertyStore:
    """Flat string properties backed by a hidden worksheet."""

    def __init__(
        self,
        sheets: SheetsClient,
        spreadsheet_id: str,
        sheet_name: str = PROPERTIES_SHEET,
    ) -> None:
        self.sheets = sheets
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name

    # === Read ===

    def _read_rows(self) -> list[list[Any]]:
        if not self.sheets.has_worksheet(self.spreadsheet_id, self.sheet_name):
            return []
        return self.sheets.get_all_values(self.spreadsheet_id, self.sheet_name)

    @staticmethod
    def _rows_to_dict(rows: list[list[Any]]) -> dict[str, str]:
        props: dict[str, str] = {}
        for row in rows:
            key = str(row[0]).strip() if row else ""
            if not key:
                continue
            props[key] = str(row[1]) if len(row) > 1 and row[1] is not None else ""
        return props

    def get_properties(self) -> dict[str, str]:
        """All stored properties."""
        return self._rows_to_dict(self._read_rows())

    def get_property(self, key: str) -> str | None:
        """A single property, or None when it was never set."""
        return self.get_properties().get(key)

    # === Write ===

    def set_properties(self, mapping: Mapping[str, Any], delete_all_others: bool = False) -> None:
        """
        Write several properties in one batch.

        Args:
            mapping: Keys and values to store (values are stored as strings)
            delete_all_others: Drop every property not in `mapping`
        """
        rows = self._read_rows()
        props = {} if delete_all_others else self._rows_to_dict(rows)
        props.update({str(k): str(v) for k, v in mapping.items()})
        self._write(props, len(rows))

    def set_property(self, key: str, value: Any) -> None:
        self.set_properties({key: value})

    def delete_properties(self, keys: list[str]) -> None:
        """Remove properties; unknown keys are ignored."""
        rows = self._read_rows()
        props = self._rows_to_dict(rows)
        for key in keys:
            props.pop(key, None)
        self._write(props, len(rows))

    def delete_property(self, key: str) -> None:
        self.delete_properties([key])

    def _write(self, props: dict[str, str], previous_rows: int) -> None:
        """Rewrite the whole block; rows left over from the old block are blanked."""
        values: list[list[Any]] = [[k, v] for k, v in props.items()]
        height = max(len(values), previous_rows)
        if height == 0:
            return
        values.extend([["", ""]] * (height - len(values)))
        self.sheets.get_or_create_worksheet(
            self.spreadsheet_id,
            self.sheet_name,
            rows=max(height, 20),
            cols=2,
            hidden=True,
        )
        self.sheets.update_range(
            self.spreadsheet_id,
            self.sheet_name,
            a1_range(1, 1, height, 2),
            values,
            raw=True,
        )
