"""Shared pytest fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import PluginRepo  # noqa: E402


@pytest.fixture
def origins(tmp_path):
    """Directory holding the 'remote' plugin repositories."""
    path = tmp_path / "origins"
    path.mkdir()
    return path


@pytest.fixture
def scratch_dir(tmp_path):
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def plugin_repo(origins):
    """Factory creating PluginRepo instances under the origins directory."""
    def factory(name: str) -> PluginRepo:
        return PluginRepo(origins / name)
    return factory
