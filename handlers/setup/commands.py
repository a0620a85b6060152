"""
Setup handler class: the user-facing menu commands.

- setup: configure + install the edit trigger
- configure: run the wizard only
- show_config: display the stored configuration
- remove_trigger: stop reacting to edits

Errors are shown to the user through the prompter and returned as
error responses; nothing is raised to the caller.
"""
from __future__ import annotations

import uuid
from typing import Any

from config import PROP_TRIGGER_ID
from core.base_handler import BaseHandler
from core.property_store import PropertyStore
from core.settings import Config, load_config
from handlers.setup.prompter import Prompter, ConsolePrompter
from handlers.setup.wizard import ConfigWizard
from sheets_client import SheetsClient


def describe_config(config: Config) -> str:
    name_source = f"column {config.name_column}" if config.name_column > 0 else "URL"
    return "\n".join([
        f"Watched sheet:  {config.watched_sheet_name}",
        f"URL column:     {config.url_column}",
        f"Drive folder:   {config.folder_id}",
        f"Header rows:    {config.header_rows}",
        f"File names:     {name_source}",
    ])


class SetupHandler(BaseHandler):
    """Handler for the configuration and trigger commands."""

    def __init__(
        self,
        sheets: SheetsClient,
        prompter: Prompter | None = None,
        spreadsheet_id: str | None = None,
        store: PropertyStore | None = None,
    ) -> None:
        super().__init__(sheets, spreadsheet_id, store)
        self.prompter = prompter or ConsolePrompter()

    def _fail(self, op: str, exc: Exception) -> dict[str, Any]:
        self.prompter.alert(f"Error: {exc}")
        return self._from_exception(op, exc)

    # === Trigger ===

    def trigger_id(self) -> str | None:
        return self.store.get_property(PROP_TRIGGER_ID) or None

    def install_trigger(self) -> str:
        """Install the edit trigger, replacing any existing one."""
        trigger_id = str(uuid.uuid4())
        self.store.set_property(PROP_TRIGGER_ID, trigger_id)
        return trigger_id

    def trigger_status(self) -> dict[str, Any]:
        op = "trigger.status"
        try:
            tid = self.trigger_id()
        except Exception as e:
            return self._from_exception(op, e)
        return self._ok(op, {"installed": tid is not None, "trigger_id": tid})

    def remove_trigger(self) -> dict[str, Any]:
        op = "trigger.remove"
        try:
            tid = self.trigger_id()
            if tid is None:
                self.prompter.alert("No edit trigger is installed.")
                return self._ok(op, {"removed": False})
            self.store.delete_property(PROP_TRIGGER_ID)
        except Exception as e:
            return self._fail(op, e)
        self.prompter.alert("Edit trigger removed. Pasted URLs will no longer be downloaded.")
        return self._ok(op, {"removed": True, "trigger_id": tid})

    # === Configuration ===

    def configure(self) -> dict[str, Any]:
        op = "config.configure"
        try:
            config = ConfigWizard(self.store, self.prompter).run()
        except Exception as e:
            return self._fail(op, e)
        self.prompter.alert("Configuration saved.\n" + describe_config(config))
        return self._ok(op, {"config": config.to_dict()})

    def setup(self) -> dict[str, Any]:
        op = "config.setup"
        try:
            config = ConfigWizard(self.store, self.prompter).run()
            tid = self.install_trigger()
        except Exception as e:
            return self._fail(op, e)
        self.prompter.alert(
            "Setup complete. URLs pasted into the watched column will be downloaded.\n"
            + describe_config(config)
        )
        return self._ok(op, {"config": config.to_dict(), "trigger_id": tid})

    def get_config(self) -> dict[str, Any]:
        """Current configuration as a response, without any UI."""
        op = "config.get"
        try:
            config = load_config(self.store)
            tid = self.trigger_id()
        except Exception as e:
            return self._from_exception(op, e)
        return self._ok(op, {"config": config.to_dict(), "trigger_installed": tid is not None})

    def show_config(self) -> dict[str, Any]:
        op = "config.show"
        result = self.get_config()
        if not result["ok"]:
            self.prompter.alert(f"Error: {result['error']['message']}")
            return {**result, "op": op}
        data = result["data"]
        trigger = "installed" if data["trigger_installed"] else "not installed"
        self.prompter.alert(
            describe_config(Config(**data["config"])) + f"\nEdit trigger:   {trigger}"
        )
        return self._ok(op, data)
