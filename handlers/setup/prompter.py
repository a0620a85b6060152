"""
Prompt/alert UI used by the configuration wizard and menu commands.
"""
from __future__ import annotations

import sys
from typing import Callable, Protocol


class Prompter(Protocol):
    """Blocking prompt UI."""

    def prompt(self, title: str, message: str, default: str = "") -> str | None:
        """Ask for one value; None means the user cancelled."""
        ...

    def alert(self, message: str) -> None:
        ...


class ConsolePrompter:
    """Terminal prompts; Ctrl-C or end of input cancels."""

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output=None,
    ) -> None:
        self._input = input_func
        self._out = output or sys.stdout

    def prompt(self, title: str, message: str, default: str = "") -> str | None:
        print(f"\n{title}", file=self._out)
        suffix = f" [{default}]" if default != "" else ""
        try:
            return self._input(f"{message}{suffix}: ")
        except (EOFError, KeyboardInterrupt):
            print("", file=self._out)
            return None

    def alert(self, message: str) -> None:
        print(message, file=self._out, flush=True)
