# FILE: tests/conftest.py
"""
Pytest configuration for the Site Forge test suite.

Configures:
- pytest-asyncio (auto mode, see pyproject.toml)
- provider credential isolation: every test starts with no API keys set
- shared fakes: a scripted provider adapter and registry builder
"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest

CREDENTIAL_ENV_KEYS = ("QWEN_API_KEY", "DOUBAO_API_KEY", "ZHIPU_API_KEY")

SAMPLE_HTML = "<!DOCTYPE html><html><head><title>博客</title></head><body>Hi</body></html>"


@pytest.fixture(autouse=True)
def clean_credentials(monkeypatch):
    for key in CREDENTIAL_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class FakeAdapter:
    """Scripted stand-in for ProviderAdapter; records every call."""

    def __init__(self, provider_id="qwen3", requirement_doc="# 需求文档", html=SAMPLE_HTML,
                 fail_on=None, error=None):
        self.provider_id = provider_id
        self.requirement_doc = requirement_doc
        self.html = html
        self.fail_on = fail_on
        self.error = error
        self.calls = []

    async def _answer(self, stage, value):
        self.calls.append(stage)
        if self.fail_on == stage:
            raise self.error
        return value

    async def generate_text(self, prompt):
        return await self._answer("text", self.html)

    async def generate_requirement_doc(self, prompt):
        return await self._answer("requirement", self.requirement_doc)

    async def generate_html_from_requirement(self, requirement_doc):
        return await self._answer("html", self.html)


def make_registry(*adapters):
    """Registry holding the given fake adapters, described from the catalogue."""
    from config.providers import PROVIDER_CATALOG
    from app.providers.registry import ProviderDescriptor, ProviderRegistry

    registry = ProviderRegistry()
    for adapter in adapters:
        registry.register(
            ProviderDescriptor.from_config(PROVIDER_CATALOG[adapter.provider_id]),
            adapter,
        )
    return registry


class StepClock:
    """Deterministic clock: each call is one second after the previous."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def fake_adapter():
    return FakeAdapter()


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def store(tmp_path, clock):
    from app.sites.service import SiteStore
    return SiteStore(tmp_path / "websites", clock=clock)
