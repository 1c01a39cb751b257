"""Shared pytest fixtures."""

import os
from unittest.mock import patch

import pytest

from safedialer.settings import Settings


@pytest.fixture
def settings():
    """Settings built from defaults only, ignoring the caller's environment."""
    with patch.dict(os.environ, {}, clear=True):
        return Settings(_env_file=None, max_retries=3, request_timeout=5)
