"""Generate the book's README.md and SUMMARY.md from the output tree."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from mdbinder.book.templates import (
    DEFAULT_README_TEMPLATE,
    DEFAULT_SUMMARY_TEMPLATE,
    resolve_template,
)
from mdbinder.core.errors import FileAccessError

logger = logging.getLogger(__name__)

README_FILE = "README.md"
SUMMARY_FILE = "SUMMARY.md"


def summary_entries(output_dir: str | Path) -> str:
    """Table-of-contents lines for everything below `output_dir`.

    READMEs and summaries are skipped since the book tooling picks them up
    on its own. Nesting follows directory depth.
    """
    root = Path(output_dir)
    entries = ""
    for relative in sorted(p.relative_to(root).as_posix() for p in root.rglob("*")):
        lowered = relative.lower()
        if "readme" in lowered or "summary" in lowered:
            continue
        path = PurePosixPath(relative)
        depth = len(path.parts)
        logger.debug("File '%s' has depth %d", relative, depth)
        indentation = "    " * (depth - 1)
        entries += f"{indentation}* [{path.name}]({path.parent}/{path.name})\n"
    return entries


def write_book_readme(
    output_dir: str | Path,
    project: str,
    template: str = DEFAULT_README_TEMPLATE,
) -> Path:
    """Render the top-level README.md of the book."""
    logger.info("Generating %s", README_FILE)
    return _write(Path(output_dir) / README_FILE, resolve_template(template, {"project": project}))


def write_summary(
    output_dir: str | Path,
    template: str = DEFAULT_SUMMARY_TEMPLATE,
    project: str = "",
) -> Path:
    """Render SUMMARY.md by crawling `output_dir`.

    Call before any other index page is added so the crawl only sees
    copied files.
    """
    logger.info("Generating %s", SUMMARY_FILE)
    logger.debug("Scraping through %s for files", output_dir)
    entries = summary_entries(output_dir)
    text = resolve_template(template, {"entries": entries, "project": project})
    return _write(Path(output_dir) / SUMMARY_FILE, text)


def _write(path: Path, text: str) -> Path:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise FileAccessError(f"Cannot write {path}: {e}", path=str(path)) from e
    return path
