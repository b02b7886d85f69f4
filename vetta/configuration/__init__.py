"""Configuration utilities for Vetta."""
from __future__ import annotations

from .settings import CONFIG_ENV_VAR, DEFAULT_MAX_FILE_SIZE_BYTES, Settings, load_settings

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_MAX_FILE_SIZE_BYTES",
    "Settings",
    "load_settings",
]
