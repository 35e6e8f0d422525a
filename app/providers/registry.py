# FILE: app/providers/registry.py
"""
Provider Registry (Model Manager)

- Holds the configured adapters in registration order.
- Tracks the "current" provider; switching never raises and reports a
  degraded switch (provider known but credential missing) as ok=False.
- Proxies the three generation capabilities to the current adapter.
- resolve() snapshots a provider for one request so a concurrent switch
  cannot move an in-flight generation to a different provider.

has_credential is recomputed from the environment on every query, so a key
added to the environment after startup shows up without a restart.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

import httpx

from config.providers import PROVIDER_CATALOG, ProviderConfig, has_credential
from app.providers.adapters import DEFAULT_TIMEOUT_SECONDS, ProviderAdapter
from app.providers.errors import MissingCredentialError, ProviderUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderDescriptor:
    id: str
    display_name: str
    vendor_name: str
    model: str
    description: str = ""
    capabilities: Tuple[str, ...] = field(default_factory=tuple)
    has_credential: bool = False
    enabled: bool = True

    @classmethod
    def from_config(cls, config: ProviderConfig, enabled: bool = True) -> "ProviderDescriptor":
        return cls(
            id=config.provider_id,
            display_name=config.display_name,
            vendor_name=config.vendor_name,
            model=config.model,
            description=config.description,
            capabilities=tuple(config.capabilities),
            has_credential=has_credential(config.provider_id),
            enabled=enabled,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.display_name,
            "provider": self.vendor_name,
            "model": self.model,
            "description": self.description,
            "capabilities": list(self.capabilities),
            "hasApiKey": self.has_credential,
            "enabled": self.enabled,
        }


@dataclass
class SwitchResult:
    ok: bool
    message: str

    def to_dict(self) -> dict:
        return {"success": self.ok, "message": self.message}


class ProviderRegistry:
    def __init__(self):
        self._entries: Dict[str, Tuple[ProviderDescriptor, ProviderAdapter]] = {}
        self._current_id: Optional[str] = None

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def register(self, descriptor: ProviderDescriptor, adapter: ProviderAdapter) -> None:
        """Add or replace a provider. Replacing keeps its original position."""
        if descriptor.id in self._entries:
            logger.info("[registry] Replacing adapter for %s", descriptor.id)
        self._entries[descriptor.id] = (descriptor, adapter)
        if self._current_id is None:
            self._current_id = descriptor.id

    def is_registered(self, provider_id: Optional[str]) -> bool:
        return bool(provider_id) and provider_id in self._entries

    def set_initial(self, preferred_id: Optional[str]) -> Optional[str]:
        """Pick the startup provider: preferred id if registered, else the first one."""
        if self.is_registered(preferred_id):
            self._current_id = preferred_id
        elif self._entries:
            fallback = next(iter(self._entries))
            if preferred_id:
                logger.warning(
                    "[registry] Default provider %s unavailable; using %s",
                    preferred_id,
                    fallback,
                )
            self._current_id = fallback
        else:
            self._current_id = None
        return self._current_id

    # =========================================================================
    # QUERIES
    # =========================================================================

    def _live(self, descriptor: ProviderDescriptor) -> ProviderDescriptor:
        return replace(descriptor, has_credential=has_credential(descriptor.id))

    def list_available(self) -> List[ProviderDescriptor]:
        return [self._live(d) for d, _ in self._entries.values() if d.enabled]

    def describe(self, provider_id: str) -> Optional[ProviderDescriptor]:
        entry = self._entries.get(provider_id)
        return self._live(entry[0]) if entry else None

    def get(self, provider_id: str) -> Optional[ProviderAdapter]:
        entry = self._entries.get(provider_id)
        return entry[1] if entry else None

    @property
    def current_id(self) -> Optional[str]:
        return self._current_id

    def current(self) -> ProviderDescriptor:
        if self._current_id is None or self._current_id not in self._entries:
            raise ProviderUnavailableError("No LLM provider is configured")
        return self._live(self._entries[self._current_id][0])

    def resolve(self, provider_id: Optional[str] = None) -> Tuple[ProviderDescriptor, ProviderAdapter]:
        """Provider for one request: the named one, else the current one."""
        pid = provider_id or self._current_id
        if not pid or pid not in self._entries:
            raise ProviderUnavailableError(f"Unsupported provider: {pid}")
        descriptor, adapter = self._entries[pid]
        return self._live(descriptor), adapter

    # =========================================================================
    # SWITCHING
    # =========================================================================

    def switch_current(self, provider_id: str) -> SwitchResult:
        entry = self._entries.get(provider_id)
        if entry is None:
            return SwitchResult(False, f"不支持的模型提供商: {provider_id}")

        descriptor = entry[0]
        self._current_id = provider_id
        if not has_credential(provider_id):
            logger.warning("[registry] Switched to %s without a credential", provider_id)
            return SwitchResult(False, f"{descriptor.display_name} API密钥未设置")

        logger.info("[registry] Switched current provider to %s", provider_id)
        return SwitchResult(True, f"已切换到 {descriptor.display_name}")

    # =========================================================================
    # PROXIES
    # =========================================================================

    async def generate_text(self, prompt: str) -> str:
        return await self.resolve()[1].generate_text(prompt)

    async def generate_requirement_doc(self, prompt: str) -> str:
        return await self.resolve()[1].generate_requirement_doc(prompt)

    async def generate_html_from_requirement(self, requirement_doc: str) -> str:
        return await self.resolve()[1].generate_html_from_requirement(requirement_doc)


def build_registry(
    default_provider: Optional[str] = None,
    *,
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
    catalog: Optional[Dict[str, ProviderConfig]] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> ProviderRegistry:
    """
    Construct adapters for every catalogue entry.

    Entries whose adapter fails to construct (missing required credential) are
    logged and skipped.
    """
    registry = ProviderRegistry()
    for provider_id, config in (catalog or PROVIDER_CATALOG).items():
        try:
            adapter = ProviderAdapter.from_config(
                config,
                timeout_seconds=timeout_seconds,
                http_client=http_client,
            )
        except MissingCredentialError as exc:
            logger.info("[registry] %s not initialised: %s", provider_id, exc)
            continue
        registry.register(ProviderDescriptor.from_config(config), adapter)

    current = registry.set_initial(default_provider)
    logger.info(
        "[registry] Providers: %s (current=%s)",
        ", ".join(d.id for d in registry.list_available()) or "none",
        current,
    )
    return registry


__all__ = [
    "ProviderDescriptor",
    "SwitchResult",
    "ProviderRegistry",
    "build_registry",
]
