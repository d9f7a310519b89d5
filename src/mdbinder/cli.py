"""CLI entry point for mdbinder."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import click

from mdbinder import __version__
from mdbinder.core.errors import BinderError, redact_text

if TYPE_CHECKING:
    from mdbinder.config import BinderConfig

_config_option = click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Path to config file (default: ~/.mdbinder/config.yaml)",
)
_verbose_option = click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose (DEBUG) logging",
)


@click.group()
@click.version_option(version=__version__, prog_name="mdbinder")
def main() -> None:
    """mdbinder: bind the README-reachable docs of many repositories into one book."""
    pass


@main.command()
@click.argument("repo_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--start", default=None, help="Starting document (default: detected README)")
@click.option("--strict", is_flag=True, help="Warn about links that resolve to no file")
@_verbose_option
def closure(repo_dir: str, start: str | None, strict: bool, verbose: bool) -> None:
    """Print the files reachable from a repository's README, one per line."""
    _setup_logging(verbose)

    from mdbinder.closure import collect_repository, compute_closure

    try:
        if start is None:
            readme, result = collect_repository(repo_dir, strict=strict)
            if readme is None:
                click.echo(f"No README found in {repo_dir}", err=True)
                sys.exit(1)
        else:
            result = compute_closure(start, root=repo_dir, strict=strict)
    except BinderError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not result.ok:
        click.echo("Starting document is not markdown", err=True)
        sys.exit(1)

    for path in sorted(result.reachable):
        click.echo(path)


@main.command()
@click.argument("output_dir", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--suffix",
    "suffixes",
    multiple=True,
    default=(".md", ".markdown"),
    show_default=True,
    help="Suffix of files to rewrite (repeatable)",
)
@_verbose_option
def rewrite(output_dir: str, suffixes: tuple[str, ...], verbose: bool) -> None:
    """Prefix relative links below each repository directory with its name."""
    _setup_logging(verbose)

    from mdbinder.markdown.links import rewrite_tree

    try:
        rewritten = rewrite_tree(output_dir, suffixes)
    except BinderError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Rewrote {len(rewritten)} file(s).")


@main.command()
@_config_option
@_verbose_option
def collect(config_path: str | None, verbose: bool) -> None:
    """List, clone and walk all repositories; print the reachable files."""
    config = _load(config_path)
    _setup_logging(verbose, config.log_level)

    from mdbinder.container import Container
    from mdbinder.pipeline import collect as run_collect

    container = Container.create_default(config)
    try:
        report = run_collect(container)
    except BinderError as e:
        click.echo(f"Collect failed: {redact_text(str(e))}", err=True)
        sys.exit(1)

    for path in report.files:
        click.echo(path)


@main.command()
@_config_option
@_verbose_option
def build(config_path: str | None, verbose: bool) -> None:
    """Assemble the book in the configured output directory."""
    config = _load(config_path)
    _setup_logging(verbose, config.log_level)

    from mdbinder.container import Container
    from mdbinder.pipeline import build as run_build

    container = Container.create_default(config)
    try:
        report = run_build(container)
    except BinderError as e:
        click.echo(f"Build failed: {redact_text(str(e))}", err=True)
        sys.exit(1)

    click.echo(
        f"Copied {len(report.copied)} file(s), rewrote {len(report.rewritten)} "
        f"from {len(report.repos)} repo(s)."
    )
    for failed in report.failed:
        click.echo(f"  {failed.slug}: {failed.error}", err=True)


def _load(config_path: str | None) -> BinderConfig:
    """Load config or exit with an error message."""
    from mdbinder.config import load_config

    try:
        return load_config(config_path)
    except Exception as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)


def _setup_logging(verbose: bool, default_level: str = "INFO") -> None:
    """Configure logging to stderr; stdout carries results only."""
    level = logging.DEBUG if verbose else default_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
