"""Pytest configuration and common fixtures."""

import os
import sys
import warnings
from pathlib import Path

from dotenv import load_dotenv

# Try to load test-specific environment file if it exists
test_env_file = Path(__file__).parent / ".env.test"
if test_env_file.exists():
    load_dotenv(test_env_file)

# Set before any callbooker imports so settings never see a production ENV
os.environ.setdefault("ENV", "testing")

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from callbooker.core.config import reset_settings


def pytest_configure(config):
    """Configure pytest environment before tests run."""
    warnings.filterwarnings("ignore", message="coroutine.*was never awaited")


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Isolated caller identity and limits for every test."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ENV", "testing")
    monkeypatch.setenv("USER_NAME", "Test Caller")
    monkeypatch.setenv("USER_EMAIL", "caller@example.com")
    monkeypatch.delenv("USER_PHONE", raising=False)
    monkeypatch.setenv("TOPMATE_API_TOKEN", "test-token")
    monkeypatch.setenv("BOOKING_RATE_LIMIT", "1000/minute")
    monkeypatch.delenv("ROLE_SYNONYMS_FILE", raising=False)
    monkeypatch.delenv("BROWSER_TIMEZONE", raising=False)

    reset_settings()
    yield
    reset_settings()
