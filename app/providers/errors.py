# FILE: app/providers/errors.py
"""
Provider error taxonomy.

Every failure an adapter can produce maps to one of these. The orchestrator
only ever catches ProviderError, so no vendor-specific branching leaks out of
app/providers.
"""
from __future__ import annotations

from typing import Any, Optional


class ProviderError(Exception):
    """Base exception for provider operations."""
    pass


class MissingCredentialError(ProviderError):
    """Adapter cannot be built: its credential is not configured."""

    def __init__(self, provider_id: str, env_key_name: str):
        super().__init__(f"{env_key_name} not set; provider '{provider_id}' unavailable")
        self.provider_id = provider_id
        self.env_key_name = env_key_name


class ProviderUnavailableError(ProviderError):
    """No adapter is registered under the requested (or current) id."""
    pass


class UpstreamError(ProviderError):
    """Network failure, non-2xx status or vendor-reported error."""

    def __init__(
        self,
        message: str,
        *,
        provider_id: Optional[str] = None,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.provider_id = provider_id
        self.status_code = status_code
        self.code = code

    def __str__(self) -> str:
        base = super().__str__()
        details = []
        if self.status_code is not None:
            details.append(f"status={self.status_code}")
        if self.code:
            details.append(f"code={self.code}")
        return f"{base} ({', '.join(details)})" if details else base


class MalformedResponseError(UpstreamError):
    """Response parsed but the completion text was not where the vendor puts it."""

    def __init__(self, message: str, raw: Any = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.raw = raw

    def __str__(self) -> str:
        return f"{super().__str__()}; raw={self.raw!r}"[:2000]


__all__ = [
    "ProviderError",
    "MissingCredentialError",
    "ProviderUnavailableError",
    "UpstreamError",
    "MalformedResponseError",
]
