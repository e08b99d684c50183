"""Shared fixtures for the backend test suite.

Every test gets its own config directory through ``IMAGE_TOOLKIT_CONFIG_DIR``
so nothing touches ``~/.image_toolkit``, and the singletons are reset so a
previous test's settings or timings never leak into the next one.
"""

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from services.config_manager import ConfigManager
from services.performance import PerformanceMonitor


@pytest.fixture(autouse=True)
def config_dir(tmp_path, monkeypatch):
    path = tmp_path / "config"
    monkeypatch.setenv("IMAGE_TOOLKIT_CONFIG_DIR", str(path))
    ConfigManager.reset_instance()
    PerformanceMonitor.get_instance().reset()
    yield path
    ConfigManager.reset_instance()


@pytest.fixture
def client():
    from main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_image():
    """Factory for in-memory images: ``make_image(w, h, color, fmt="PNG")``"""

    def _make(width, height, color=(0, 0, 0), fmt="PNG", mode="RGB"):
        img = Image.new(mode, (width, height), color)
        buf = io.BytesIO()
        img.save(buf, format=fmt)
        return buf.getvalue()

    return _make
