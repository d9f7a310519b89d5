"""Port interfaces for mdbinder (hexagonal architecture)."""

from __future__ import annotations

from abc import ABC, abstractmethod


class RepositorySourcePort(ABC):
    """Port for enumerating the repositories of a project."""

    @abstractmethod
    def list_repositories(self) -> list[str]:
        """List repository slugs.

        Returns:
            Repository slugs, in the order the source reports them.

        Raises:
            SourceError: If the source cannot be queried.
        """


class ClonerPort(ABC):
    """Port for making a local checkout of a repository available."""

    @abstractmethod
    def ensure_clone(self, slug: str, dest: str) -> bool:
        """Make sure `dest` holds a checkout of `slug`.

        Args:
            slug: Repository slug.
            dest: Directory the checkout should live in.

        Returns:
            True if the checkout is usable, False if cloning failed.
        """
