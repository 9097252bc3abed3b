"""
Configuration module for the combat log metrics engine.

Provides engine settings, WoW game-data tables and YAML overrides.
"""

from .settings import (
    EngineSettings,
    get_settings,
    set_settings,
    reload_settings,
)
from .loader import ConfigLoader, load_and_apply_config

__all__ = [
    "EngineSettings",
    "get_settings",
    "set_settings",
    "reload_settings",
    "ConfigLoader",
    "load_and_apply_config",
]
