"""
Edit event model.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lib.errors import UserInputError
from lib.input_parser import coerce_int, coerce_str
from lib.sheet_utils import GridRange, parse_a1_range


@dataclass(frozen=True)
class EditEvent:
    """One user edit: the sheet it happened on and the block of cells it touched."""
    spreadsheet_id: str
    sheet_name: str
    row: int
    num_rows: int
    column: int
    num_columns: int

    @property
    def grid(self) -> GridRange:
        return GridRange(self.row, self.num_rows, self.column, self.num_columns)

    def is_valid(self) -> bool:
        return (
            bool(self.sheet_name)
            and self.row >= 1
            and self.column >= 1
            and self.num_rows >= 1
            and self.num_columns >= 1
        )

    @classmethod
    def from_payload(cls, payload: Any, default_spreadsheet_id: str | None = None) -> "EditEvent":
        """
        Parse a webhook payload.

        Accepted shapes:
            {"spreadsheet_id": "...", "sheet_name": "Cards", "range": "B5:D8"}
            {"sheet_name": "Cards", "row": 5, "num_rows": 4, "column": 2, "num_columns": 3}

        Raises:
            UserInputError: If the payload does not describe a cell range
        """
        if not isinstance(payload, dict):
            raise UserInputError("edit payload must be a JSON object")

        spreadsheet_id = coerce_str(payload, ("spreadsheet_id", "spreadsheetId")) or default_spreadsheet_id
        if not spreadsheet_id:
            raise UserInputError("spreadsheet_id is required")
        sheet_name = coerce_str(payload, ("sheet_name", "sheetName", "sheet"))
        if not sheet_name:
            raise UserInputError("sheet_name is required")

        notation = coerce_str(payload, ("range", "a1"))
        if notation:
            try:
                grid = parse_a1_range(notation)
            except ValueError as e:
                raise UserInputError(str(e)) from e
        else:
            row = coerce_int(payload, ("row",))
            column = coerce_int(payload, ("column", "col"))
            if row is None or column is None:
                raise UserInputError("range or row/column is required")
            num_rows = coerce_int(payload, ("num_rows", "numRows"))
            num_columns = coerce_int(payload, ("num_columns", "numColumns"))
            grid = GridRange(
                row,
                1 if num_rows is None else num_rows,
                column,
                1 if num_columns is None else num_columns,
            )

        return cls(spreadsheet_id, sheet_name, grid.row, grid.num_rows, grid.column, grid.num_columns)
