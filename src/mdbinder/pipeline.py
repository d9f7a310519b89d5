"""Book pipeline: enumerate repositories, compute closures, assemble the book."""

from __future__ import annotations

import logging
from pathlib import Path

from mdbinder.adapters.file_copier import copy_preserved_files
from mdbinder.book.summary import write_book_readme, write_summary
from mdbinder.book.templates import (
    DEFAULT_README_TEMPLATE,
    DEFAULT_SUMMARY_TEMPLATE,
    load_template,
)
from mdbinder.closure import collect_repository
from mdbinder.container import Container
from mdbinder.core.errors import FileAccessError
from mdbinder.core.models import BuildReport, Repository, RepositoryReport
from mdbinder.markdown.links import rewrite_repository

logger = logging.getLogger(__name__)


def collect(container: Container) -> BuildReport:
    """List repositories, make sure they are cloned and compute each closure.

    A repository that cannot be cloned or read is reported and skipped;
    the others are still processed.

    Raises:
        SourceError: If the repositories cannot be listed.
    """
    config = container.config
    report = BuildReport()
    for slug in container.source.list_repositories():
        repo = Repository(slug=slug, path=config.repo_path(slug))
        report.repos.append(_collect_one(container, repo))

    for failed in report.failed:
        logger.warning("Skipped repo %s: %s", failed.slug, failed.error)
    return report


def _collect_one(container: Container, repo: Repository) -> RepositoryReport:
    """Clone and walk a single repository."""
    if not container.cloner.ensure_clone(repo.slug, repo.path):
        return RepositoryReport(slug=repo.slug, error=f"Could not clone into {repo.path}")

    repo_logger = logger.getChild(repo.slug)
    try:
        readme, result = collect_repository(
            repo.path, strict=container.config.strict, log=repo_logger
        )
    except (FileAccessError, OSError) as e:
        path = getattr(e, "path", None) or getattr(e, "filename", None)
        logger.error("Cannot read '%s' in repo %s: %s", path, repo.slug, e)
        return RepositoryReport(slug=repo.slug, error=str(e))

    if readme is None:
        return RepositoryReport(slug=repo.slug, error="No README found")

    # A README that is not markdown is still copied, just not followed
    files = sorted(result.reachable) if result.ok else [readme]
    return RepositoryReport(
        slug=repo.slug,
        readme=readme,
        files=files,
        unresolved=result.unresolved,
    )


def build(container: Container) -> BuildReport:
    """Assemble the book: collect, copy, rewrite links, write index pages.

    Raises:
        SourceError: If the repositories cannot be listed.
        OutputDirError: If the output directory is not empty.
        ConfigError: If a configured template cannot be read.
    """
    config = container.config
    readme_template = load_template(config.readme_template, DEFAULT_README_TEMPLATE)
    summary_template = load_template(config.summary_template, DEFAULT_SUMMARY_TEMPLATE)

    report = collect(container)
    git_dir = Path(config.git_dir).expanduser()
    output = Path(config.output_dir).expanduser()

    report.copied = copy_preserved_files(report.files, git_dir, output)
    output.mkdir(parents=True, exist_ok=True)

    for repo in report.repos:
        repo_dir = output / repo.slug
        if repo.error is not None or not repo_dir.is_dir():
            continue
        try:
            names = rewrite_repository(
                repo_dir, repo.slug, config.markdown_suffixes, log=logger.getChild(repo.slug)
            )
        except FileAccessError as e:
            logger.error("Cannot rewrite '%s' in repo %s: %s", e.path, repo.slug, e)
            repo.error = str(e)
            continue
        report.rewritten.extend(f"{repo.slug}/{name}" for name in names)

    write_summary(output, summary_template, project=config.project_id)
    write_book_readme(output, config.project_id, readme_template)
    logger.info(
        "Book assembled in %s: %d file(s) copied, %d rewritten",
        output,
        len(report.copied),
        len(report.rewritten),
    )
    return report
