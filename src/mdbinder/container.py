"""Dependency injection container for mdbinder."""

from __future__ import annotations

from dataclasses import dataclass

from mdbinder.config import BinderConfig
from mdbinder.core.interfaces import ClonerPort, RepositorySourcePort


@dataclass
class Container:
    """DI container holding all ports and adapters."""

    config: BinderConfig
    source: RepositorySourcePort
    cloner: ClonerPort

    @staticmethod
    def create_default(config: BinderConfig) -> Container:
        """Create a container with production adapters.

        Bitbucket is used when configured, local checkouts otherwise.
        """
        from mdbinder.adapters.bitbucket_source import BitbucketRepositorySource
        from mdbinder.adapters.git_cloner import GitCloner
        from mdbinder.adapters.local_source import LocalRepositorySource, NoopCloner

        bitbucket = config.bitbucket
        if bitbucket is None:
            return Container(
                config=config,
                source=LocalRepositorySource(config.git_dir),
                cloner=NoopCloner(),
            )

        source = BitbucketRepositorySource(
            base_url=bitbucket.base_url,
            project_id=config.project_id,
            user=bitbucket.user,
            password=bitbucket.password,
            page_limit=bitbucket.page_limit,
        )
        cloner = GitCloner(
            base_url=bitbucket.base_url,
            project_id=config.project_id,
            user=bitbucket.user,
            password=bitbucket.password,
            branch=bitbucket.branch,
        )
        return Container(config=config, source=source, cloner=cloner)

    @staticmethod
    def create_for_testing(
        config: BinderConfig | None = None,
        source: RepositorySourcePort | None = None,
        cloner: ClonerPort | None = None,
    ) -> Container:
        """Create a container with test/mock adapters.

        All parameters are optional. Provide mocks for the components
        you want to control in tests.
        """
        if config is None:
            config = BinderConfig(git_dir="/tmp/mdbinder/git", output_dir="/tmp/mdbinder/book")

        # Use stubs that raise if accidentally called without being mocked
        class StubSource(RepositorySourcePort):
            def list_repositories(self) -> list[str]:
                raise NotImplementedError("Provide a mock source")

        class StubCloner(ClonerPort):
            def ensure_clone(self, slug: str, dest: str) -> bool:
                raise NotImplementedError("Provide a mock cloner")

        return Container(
            config=config,
            source=source or StubSource(),
            cloner=cloner or StubCloner(),
        )
