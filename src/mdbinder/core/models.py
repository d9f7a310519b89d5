"""Domain models for mdbinder."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class UriKind(str, Enum):
    """Classification of a link target."""

    ABSOLUTE = "absolute"
    RELATIVE = "relative"


class UnresolvedLink(BaseModel):
    """A relative link target that does not correspond to a local file."""

    source: str = Field(description="Document containing the link")
    target: str = Field(description="Link target as written")


class ClosureResult(BaseModel):
    """Outcome of a closure computation for one starting document."""

    ok: bool = Field(description="Whether the starting document parsed as markdown")
    reachable: set[str] = Field(
        default_factory=set,
        description="Repository-relative paths reachable from the start document",
    )
    unresolved: list[UnresolvedLink] = Field(
        default_factory=list,
        description="Relative targets that were dropped",
    )


class Repository(BaseModel):
    """A documentation repository checked out locally."""

    slug: str = Field(description="Repository identifier, used as namespace")
    path: str = Field(description="Local checkout path")


class RepositoryReport(BaseModel):
    """What happened to one repository during a run."""

    slug: str
    readme: str | None = Field(default=None, description="Detected README file name")
    files: list[str] = Field(
        default_factory=list,
        description="Reachable files, relative to the repository",
    )
    unresolved: list[UnresolvedLink] = Field(default_factory=list)
    error: str | None = Field(default=None, description="Failure message, if any")


class BuildReport(BaseModel):
    """Result of a collect or build run over all repositories."""

    repos: list[RepositoryReport] = Field(default_factory=list)
    copied: list[str] = Field(default_factory=list, description="Files copied to the output")
    rewritten: list[str] = Field(
        default_factory=list,
        description="Output files whose links were rewritten",
    )

    @property
    def files(self) -> list[str]:
        """All reachable files as slug/path entries, sorted."""
        return sorted(f"{r.slug}/{f}" for r in self.repos for f in r.files)

    @property
    def failed(self) -> list[RepositoryReport]:
        """Repositories that could not be processed."""
        return [r for r in self.repos if r.error is not None]
