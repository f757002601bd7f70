"""Shared test fixtures for the seslog test suite.

Every test runs against an isolated config file (via SESLOG_CONFIG) so a
developer's ``~/.seslog/config.toml`` never leaks into assertions.
"""

import shutil

import pytest

from seslog.config import settings
from tests.helpers import ROADMAPS_DIR, write_test_config


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Point config loading at a throwaway TOML file for each test."""
    config_dir = tmp_path_factory.mktemp("seslog-config")
    monkeypatch.setattr(settings, "USER_CONFIG_PATH", config_dir / "missing.toml")
    monkeypatch.setenv("SESLOG_CONFIG", str(write_test_config(config_dir)))
    settings.reload_config()
    yield config_dir
    settings.load_config.cache_clear()


@pytest.fixture
def branching_roadmap(tmp_path):
    """Copy of the branching fixture roadmap as ``ROADMAP.md`` in a temp dir."""
    target = tmp_path / "ROADMAP.md"
    shutil.copy(ROADMAPS_DIR / "branching_roadmap.md", target)
    return target


@pytest.fixture
def legacy_roadmap(tmp_path):
    """Copy of the attribute-free fixture roadmap as ``ROADMAP.md``."""
    target = tmp_path / "ROADMAP.md"
    shutil.copy(ROADMAPS_DIR / "legacy_roadmap.md", target)
    return target
