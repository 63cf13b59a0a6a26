"""Pytest configuration and shared fixtures."""

from pathlib import Path
from unittest.mock import patch

import pytest

from strongbox.adapters.fs.local import LocalAdapter
from strongbox.domain.entities import LinkPolicy


@pytest.fixture(autouse=True)
def no_global_config(tmp_path_factory: pytest.TempPathFactory):
    """Point the global config path at a missing file for test isolation.

    Without this, a developer's ~/.config/strongbox/config.toml could
    change defaults asserted by tests.
    """
    nonexistent = tmp_path_factory.mktemp("global") / "missing" / "config.toml"
    with patch(
        "strongbox.adapters.config.toml_config_provider.get_global_config_path",
        return_value=nonexistent,
    ):
        yield nonexistent


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Empty storage root directory."""
    storage = tmp_path / "storage"
    storage.mkdir()
    return storage


@pytest.fixture
def adapter(root: Path) -> LocalAdapter:
    """Adapter over an empty root, refusing links (the default policy)."""
    return LocalAdapter(root)


@pytest.fixture
def skipping_adapter(root: Path) -> LocalAdapter:
    """Adapter over the same root that skips links."""
    return LocalAdapter(root, link_policy=LinkPolicy.SKIP_LINKS)