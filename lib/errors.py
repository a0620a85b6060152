"""
Standardized error handling for Scryfall Sheets.
Provides consistent error codes, exception types and response helpers.
"""
from enum import Enum
from typing import Any

from lib.common import ng


class ErrorCode(str, Enum):
    """Standardized error codes used across tools, hooks and the CLI."""
    BAD_REQUEST = "BAD_REQUEST"
    CONFIG_MISSING = "CONFIG_MISSING"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    CANCELLED = "CANCELLED"
    SHEET_ERROR = "SHEET_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppError(Exception):
    """Base class for errors that map onto an ErrorCode."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def to_response(self, op: str) -> dict[str, Any]:
        return ng(op, self.code, str(self))


class UserInputError(AppError):
    """Invalid or missing input from the caller."""
    code = ErrorCode.BAD_REQUEST


class UpstreamError(AppError):
    """The search API returned something unusable."""
    code = ErrorCode.UPSTREAM_ERROR


class WizardCancelled(AppError):
    """The user cancelled a configuration prompt."""
    code = ErrorCode.CANCELLED

    def __init__(self, message: str = "configuration cancelled; nothing was saved") -> None:
        super().__init__(message)


class ConfigMissingError(AppError):
    """Required settings were never saved for this spreadsheet."""
    code = ErrorCode.CONFIG_MISSING

    def __init__(self, missing: list[str], message: str | None = None) -> None:
        self.missing = list(missing)
        if message is None:
            message = (
                "configuration is incomplete; missing: " + ", ".join(self.missing)
                + ". Run the setup command first."
            )
        super().__init__(message)

    def to_response(self, op: str) -> dict[str, Any]:
        return ng(op, self.code, str(self), {"missing": self.missing})


def bad_request(op: str, message: str) -> dict[str, Any]:
    """Create a BAD_REQUEST error response."""
    return ng(op, ErrorCode.BAD_REQUEST, message)
