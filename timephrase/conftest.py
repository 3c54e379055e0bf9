"""Pytest configuration for timephrase tests."""

import os

import pytest

from timephrase.config import get_settings
from timephrase.models import Instant


@pytest.fixture(autouse=True)
def reset_env():
    """Reset environment variables and cached settings between tests."""
    original = os.environ.copy()
    get_settings.cache_clear()
    yield
    os.environ.clear()
    os.environ.update(original)
    get_settings.cache_clear()


@pytest.fixture
def now() -> Instant:
    """Saturday, June 15, 2024 at 10:00."""
    return Instant(2024, 6, 15, 10)
