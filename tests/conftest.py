"""Shared test fixtures."""

import pytest

from pyquel import _utils


@pytest.fixture
def restore_keywords():
    """Restore the process-wide keyword set after a test replaces it."""
    saved = _utils.default_keywords()
    yield
    _utils.set_default_keywords(saved)
