# FILE: app/providers/__init__.py
"""
LLM provider layer.

- errors.py: provider exception family
- adapters.py: one adapter per provider, transport chosen by AdapterKind
- registry.py: the model manager (current provider, switching, resolve)
- router.py: /api/websites/models endpoints
"""

from app.providers.errors import (
    ProviderError,
    MissingCredentialError,
    ProviderUnavailableError,
    UpstreamError,
    MalformedResponseError,
)
from app.providers.adapters import AdapterKind, ProviderAdapter
from app.providers.registry import (
    ProviderDescriptor,
    ProviderRegistry,
    SwitchResult,
    build_registry,
)

__all__ = [
    "ProviderError",
    "MissingCredentialError",
    "ProviderUnavailableError",
    "UpstreamError",
    "MalformedResponseError",
    "AdapterKind",
    "ProviderAdapter",
    "ProviderDescriptor",
    "ProviderRegistry",
    "SwitchResult",
    "build_registry",
]
