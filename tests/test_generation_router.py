# FILE: tests/test_generation_router.py
"""
Tests for app/generation/router.py
Buffered and streaming generation endpoints.
"""

import json
import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tests.conftest import SAMPLE_HTML, FakeAdapter, make_registry


def _build_client(*adapters):
    from app.dependencies import get_orchestrator
    from app.errors import register_error_handlers
    from app.generation.orchestrator import GenerationOrchestrator
    from app.generation.router import router

    orchestrator = GenerationOrchestrator(make_registry(*adapters))
    app = FastAPI()
    app.include_router(router)
    register_error_handlers(app)
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    return TestClient(app)


def _parse_sse(body):
    return [
        json.loads(chunk[len("data: "):])
        for chunk in body.split("\n\n")
        if chunk.startswith("data: ")
    ]


@pytest.fixture
def client():
    """Client whose only provider succeeds."""
    return _build_client(FakeAdapter("qwen3"))


@pytest.fixture
def failing_client():
    """Client whose only provider fails on the requirement stage."""
    from app.providers.errors import UpstreamError

    return _build_client(
        FakeAdapter("qwen3", fail_on="requirement", error=UpstreamError("rate limited", status_code=429))
    )


class TestGenerateEndpoint:
    """Test cases for POST /api/websites/generate."""

    def test_generate_success(self, client):
        """Generated HTML is returned with provider and not degraded."""
        response = client.post("/api/websites/generate", json={"prompt": "创建一个简单的个人博客网站"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["html"] == SAMPLE_HTML
        assert data["degraded"] is False
        assert data["provider"] == "qwen3"

    def test_generate_failure_uses_fallback(self, failing_client):
        """Provider failure still returns 200 with fallback HTML."""
        response = failing_client.post("/api/websites/generate", json={"prompt": "咖啡馆主页"})

        assert response.status_code == 200
        data = response.json()
        assert data["degraded"] is True
        assert data["html"].startswith("<!DOCTYPE html>")
        assert "咖啡馆主页" in data["html"]

    @pytest.mark.parametrize("body", [{}, {"prompt": ""}, {"prompt": "   "}])
    def test_generate_empty_prompt(self, client, body):
        """Missing or blank prompts are a 400."""
        response = client.post("/api/websites/generate", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Prompt is required"}

    def test_generate_unknown_provider(self, client):
        """An unknown per-request provider degrades instead of failing."""
        response = client.post("/api/websites/generate", json={"prompt": "博客", "provider": "nope"})

        assert response.status_code == 200
        assert response.json()["degraded"] is True

    def test_generate_text(self, client):
        """The single-shot route returns HTML."""
        response = client.post("/api/websites/generate-text", json={"prompt": "博客"})
        assert response.json()["html"] == SAMPLE_HTML


class TestGenerateStreamEndpoint:
    """Test cases for POST /api/websites/generate-stream."""

    def test_stream_success(self, client):
        """The stream carries the full lifecycle as SSE frames."""
        response = client.post("/api/websites/generate-stream", json={"prompt": "创建一个简单的个人博客网站"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache"

        events = _parse_sse(response.text)
        assert [e["step"] for e in events] == [
            "start", "requirement", "requirement_complete", "html", "complete", "done",
        ]
        assert events[4]["type"] == "success"
        assert events[4]["content"] == SAMPLE_HTML

    def test_stream_failure(self, failing_client):
        """A failing provider yields one error event then done."""
        response = failing_client.post("/api/websites/generate-stream", json={"prompt": "博客"})

        events = _parse_sse(response.text)
        assert [e["step"] for e in events] == ["start", "requirement", "error", "done"]
        assert events[2]["type"] == "error"
        assert "rate limited" in events[2]["message"]

    def test_stream_empty_prompt(self, client):
        """Blank prompts are rejected before streaming starts."""
        response = client.post("/api/websites/generate-stream", json={"prompt": ""})
        assert response.status_code == 400
