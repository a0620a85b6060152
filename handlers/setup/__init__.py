"""
Setup handler package.

Exports the menu command handler, the configuration wizard and prompters.
"""
from handlers.setup.commands import SetupHandler, describe_config
from handlers.setup.prompter import Prompter, ConsolePrompter
from handlers.setup.wizard import ConfigWizard, QUESTIONS, validate_answer

__all__ = [
    "SetupHandler",
    "describe_config",
    "Prompter",
    "ConsolePrompter",
    "ConfigWizard",
    "QUESTIONS",
    "validate_answer",
]
