# FILE: config/__init__.py
"""Configuration package for Site Forge.

Contains:
- settings.py: environment-backed runtime settings
- providers.py: LLM provider catalogue and credential lookup
"""

from config.settings import Settings, get_settings
from config.providers import (
    PROVIDER_CATALOG,
    ProviderConfig,
    get_api_key,
    has_credential,
)

__all__ = [
    "Settings",
    "get_settings",
    "PROVIDER_CATALOG",
    "ProviderConfig",
    "get_api_key",
    "has_credential",
]
