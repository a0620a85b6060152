"""
Interactive configuration wizard for the image downloader.
"""
from __future__ import annotations

from dataclasses import dataclass

from config import (
    PROP_WATCH_SHEET,
    PROP_URL_COLUMN,
    PROP_FOLDER_ID,
    PROP_HEADER_ROWS,
    PROP_NAME_COLUMN,
    DEFAULT_WATCH_SHEET,
    DEFAULT_URL_COLUMN,
    DEFAULT_FOLDER_ID,
    DEFAULT_HEADER_ROWS,
    DEFAULT_NAME_COLUMN,
    MAX_COLUMN,
    MAX_ROW,
)
from core.property_store import PropertyStore
from core.settings import Config, save_config
from handlers.setup.prompter import Prompter
from lib.common import to_int_or_none
from lib.errors import WizardCancelled

TITLE = "Image downloader setup"


@dataclass(frozen=True)
class Question:
    key: str
    message: str
    default: str | int
    kind: str = "str"  # "str" or "int"
    minimum: int = 0
    maximum: int = 0


QUESTIONS: list[Question] = [
    Question(PROP_WATCH_SHEET, "Name of the sheet to watch", DEFAULT_WATCH_SHEET),
    Question(PROP_URL_COLUMN, "Column number holding image URLs (A=1, B=2, ...)",
             DEFAULT_URL_COLUMN, "int", 1, MAX_COLUMN),
    Question(PROP_FOLDER_ID, "Drive folder ID to save images into", DEFAULT_FOLDER_ID),
    Question(PROP_HEADER_ROWS, "Number of header rows to ignore",
             DEFAULT_HEADER_ROWS, "int", 0, MAX_ROW),
    Question(PROP_NAME_COLUMN, "Column number to name files by (0 = use the URL)",
             DEFAULT_NAME_COLUMN, "int", 0, MAX_COLUMN),
]


def validate_answer(question: Question, raw: str) -> tuple[str | int | None, str | None]:
    """
    Check one answer.

    Returns:
        (value, None) when valid, (None, error message) otherwise
    """
    text = raw.strip()
    if question.kind == "int":
        n = to_int_or_none(text)
        if n is None:
            return None, f"Please enter a whole number between {question.minimum} and {question.maximum}."
        if not question.minimum <= n <= question.maximum:
            return None, f"{n} is out of range ({question.minimum}-{question.maximum})."
        return n, None
    if not text:
        return None, "This value is required."
    return text, None


class ConfigWizard:
    """
    Prompts for the five downloader settings and saves them in one batch.

    Each prompt offers the stored value (or the first-run default).
    Invalid answers are reported and asked again; cancelling any prompt
    aborts without saving.
    """

    def __init__(self, store: PropertyStore, prompter: Prompter) -> None:
        self.store = store
        self.prompter = prompter

    def _ask(self, question: Question, current: str | None) -> str | int:
        default = current if current not in (None, "") else str(question.default)
        while True:
            raw = self.prompter.prompt(TITLE, question.message, default)
            if raw is None:
                raise WizardCancelled()
            if raw.strip() == "":
                raw = default
            value, error = validate_answer(question, raw)
            if error is None:
                return value
            self.prompter.alert(error)

    def run(self) -> Config:
        current = self.store.get_properties()
        answers = {q.key: self._ask(q, current.get(q.key)) for q in QUESTIONS}
        config = Config(
            watched_sheet_name=answers[PROP_WATCH_SHEET],
            url_column=answers[PROP_URL_COLUMN],
            folder_id=answers[PROP_FOLDER_ID],
            header_rows=answers[PROP_HEADER_ROWS],
            name_column=answers[PROP_NAME_COLUMN],
        )
        save_config(self.store, config)
        return config
