# FILE: tests/test_app.py
"""
Tests for main.py
Application wiring: health check, static site serving and error bodies.
"""

import importlib
import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest
from fastapi.testclient import TestClient

from tests.conftest import SAMPLE_HTML


@pytest.fixture
def websites_dir(tmp_path, monkeypatch):
    from config.settings import get_settings
    from app.dependencies import get_site_store

    root = tmp_path / "websites"
    monkeypatch.setenv("WEBSITES_DIR", str(root))
    get_settings.cache_clear()
    get_site_store.cache_clear()
    yield root
    get_settings.cache_clear()
    get_site_store.cache_clear()


@pytest.fixture
def client(websites_dir):
    """Client for the real application, without running startup hooks."""
    sys.modules.pop("main", None)
    main = importlib.import_module("main")
    return TestClient(main.app)


class TestApplication:
    """Test the assembled FastAPI application."""

    def test_health(self, client):
        """Health check responds OK."""
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "OK"

    def test_websites_dir_created(self, client, websites_dir):
        """The static root exists once the app is built."""
        assert websites_dir.is_dir()

    def test_deployed_site_is_served(self, client):
        """A deployed site is reachable at its URL."""
        deployed = client.post("/api/websites/deploy", json={"html": SAMPLE_HTML, "path": "blog"}).json()

        response = client.get(deployed["url"])

        assert response.status_code == 200
        assert "<title>博客</title>" in response.text

    def test_unknown_route_error_body(self, client):
        """Unmatched API routes use the {error} body."""
        response = client.get("/api/nothing/here/at/all")

        assert response.status_code == 404
        assert "error" in response.json()
