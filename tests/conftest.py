"""Shared test fixtures for mdbinder."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from mdbinder.adapters.local_source import LocalRepositorySource, NoopCloner
from mdbinder.config import BinderConfig
from mdbinder.container import Container
from tests.helpers import PNG_BYTES, write_files


@pytest.fixture()
def docs_repo(tmp_path: Path) -> Path:
    """A repository whose README reaches a guide and an image."""
    return write_files(
        tmp_path / "git" / "docs",
        {
            "README.md": (
                "# Docs\n\nRead the [guide](guide.md) or [the site](https://example.com).\n"
            ),
            "guide.md": "# Guide\n\n![diagram](img/diagram.png)\n",
            "img/diagram.png": PNG_BYTES,
            "unlinked.md": "# Not reachable\n",
        },
    )


@pytest.fixture()
def test_config(tmp_path: Path) -> BinderConfig:
    """Config pointing at temp git and output directories."""
    return BinderConfig(
        git_dir=str(tmp_path / "git"),
        output_dir=str(tmp_path / "book"),
        project_id="DOCS",
    )


@pytest.fixture()
def local_container(test_config: BinderConfig) -> Container:
    """Container over local checkouts in the temp git directory."""
    return Container(
        config=test_config,
        source=LocalRepositorySource(test_config.git_dir),
        cloner=NoopCloner(),
    )


@pytest.fixture()
def mock_container(test_config: BinderConfig) -> Container:
    """Container with mocked source and cloner."""
    source = MagicMock()
    source.list_repositories.return_value = []
    cloner = MagicMock()
    cloner.ensure_clone.return_value = True
    return Container(config=test_config, source=source, cloner=cloner)
