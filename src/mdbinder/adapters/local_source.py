"""Repository source and cloner for checkouts that already exist on disk."""

from __future__ import annotations

from pathlib import Path

from mdbinder.core.errors import SourceError
from mdbinder.core.interfaces import ClonerPort, RepositorySourcePort


class LocalRepositorySource(RepositorySourcePort):
    """Treats every subdirectory of a directory as a repository."""

    def __init__(self, git_dir: str) -> None:
        self.git_dir = git_dir

    def list_repositories(self) -> list[str]:
        root = Path(self.git_dir).expanduser()
        if not root.is_dir():
            raise SourceError(f"Repository directory not found: {root}")
        return sorted(p.name for p in root.iterdir() if p.is_dir() and not p.name.startswith("."))


class NoopCloner(ClonerPort):
    """Cloner for local sources: checkouts are used as they are."""

    def ensure_clone(self, slug: str, dest: str) -> bool:
        return Path(dest).is_dir()
