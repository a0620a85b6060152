"""
Core building blocks shared by the handlers.
"""
from .base_handler import BaseHandler
from .property_store import PropertyStore
from .settings import Config, load_config, save_config

__all__ = [
    "BaseHandler",
    "PropertyStore",
    "Config",
    "load_config",
    "save_config",
]
