"""
Pytest configuration and fixtures for the backend tests.
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project paths
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "mud_client"))
sys.path.insert(0, str(project_root / "backend"))


@pytest.fixture
def client(monkeypatch):
    """A test client for the backend running on the packaged content."""
    for name in ("MUDDY_CONTENT_DIR", "MUDDY_SETTINGS_PATH", "MUDDY_MINIMAP_DISTANCE"):
        monkeypatch.delenv(name, raising=False)

    import main

    with TestClient(main.app) as client:
        yield client


@pytest.fixture
def session_id(client):
    """A fresh game session id."""
    response = client.post("/api/sessions")
    assert response.status_code == 200
    return response.json()["session_id"]
