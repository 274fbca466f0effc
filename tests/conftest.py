"""Shared fixtures for DayPlanner tests."""

import sys
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from config import Settings
from api.http_server import create_app
from api.dependencies import get_today

TODAY = date(2024, 1, 26)
TEST_SECRET = "test-secret-key-with-enough-length-for-hs256"


@pytest.fixture
def web_dir(tmp_path):
    """Directory with a minimal web frontend."""
    directory = tmp_path / "web"
    (directory / "css").mkdir(parents=True)
    (directory / "index.html").write_text("<html><body><h1>Planner</h1></body></html>")
    (directory / "css" / "style.css").write_text("body { background-color: #fff; }")
    return directory


@pytest.fixture
def settings(web_dir):
    """Settings for an in-memory database without authentication."""
    return Settings(
        database_url="sqlite://",
        web_dir=str(web_dir),
        password="",
        token_secret=TEST_SECRET
    )


@pytest.fixture
def app(settings):
    """Application with "today" pinned to TODAY."""
    application = create_app(settings)
    application.dependency_overrides[get_today] = lambda: TODAY
    return application


@pytest.fixture
def client(app):
    """Test client running the application lifespan."""
    with TestClient(app) as test_client:
        yield test_client
