# FILE: app/dependencies.py
"""
Process-wide singletons handed to routes through FastAPI Depends().

Tests replace them with app.dependency_overrides[get_registry] = ...
"""
from __future__ import annotations

import logging
from functools import lru_cache

from config.settings import get_settings
from app.generation.orchestrator import GenerationOrchestrator
from app.providers.registry import ProviderRegistry, build_registry
from app.sites.service import SiteStore

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_registry() -> ProviderRegistry:
    settings = get_settings()
    return build_registry(
        settings.default_provider,
        timeout_seconds=settings.llm_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_orchestrator() -> GenerationOrchestrator:
    return GenerationOrchestrator(get_registry())


@lru_cache(maxsize=1)
def get_site_store() -> SiteStore:
    settings = get_settings()
    logger.info("[sites] Store root: %s", settings.websites_dir)
    return SiteStore(
        settings.websites_dir,
        max_html_bytes=settings.max_html_bytes,
        default_generator=settings.default_generator,
    )
