# FILE: config/settings.py
"""
Runtime settings for Site Forge.

All values come from the environment (populated from .env by main.py via
python-dotenv). Settings are read once per process; tests call
get_settings.cache_clear() after patching the environment.

Keys:
- WEBSITES_DIR: root directory of deployed site containers
- DEFAULT_PROVIDER: provider id selected at startup
- DEFAULT_GENERATOR: generator id written to new site sidecars
- LLM_TIMEOUT_SECONDS: transport timeout for upstream LLM calls
- MAX_HTML_BYTES: largest accepted HTML payload for a site
- CORS_ORIGINS: comma separated allow-list ("*" allows all)
- LOG_LEVEL / PORT: process plumbing
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _int_env(name: str) -> Optional[int]:
    v = os.getenv(name, "").strip()
    if not v:
        return None
    try:
        return int(v)
    except ValueError:
        return None


def _list_env(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [p.strip() for p in raw.split(",") if p.strip()]


@dataclass(frozen=True)
class Settings:
    websites_dir: Path
    default_provider: str = "qwen3"
    default_generator: str = "qwen3-coder-plus"
    llm_timeout_seconds: int = 120
    max_html_bytes: int = 10 * 1024 * 1024
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    port: int = 3001


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    websites_dir = Path(os.getenv("WEBSITES_DIR", "").strip() or _PROJECT_ROOT / "public" / "websites")
    return Settings(
        websites_dir=websites_dir,
        default_provider=os.getenv("DEFAULT_PROVIDER", "qwen3").strip() or "qwen3",
        default_generator=os.getenv("DEFAULT_GENERATOR", "qwen3-coder-plus").strip() or "qwen3-coder-plus",
        llm_timeout_seconds=_int_env("LLM_TIMEOUT_SECONDS") or 120,
        max_html_bytes=_int_env("MAX_HTML_BYTES") or 10 * 1024 * 1024,
        cors_origins=_list_env("CORS_ORIGINS", "*"),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        port=_int_env("PORT") or 3001,
    )
