"""Root conftest — shared test configuration."""

import os

import pytest

from reqbind.config import get_settings

# Ensure a developer's environment doesn't change phase behaviour under test
os.environ.pop("REQBIND_BODYLESS_METHODS", None)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached per process; every test starts from a clean cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
