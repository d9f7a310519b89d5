"""Copy reachable files into the book output tree, preserving structure."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from mdbinder.core.errors import FileAccessError, OutputDirError

logger = logging.getLogger(__name__)


def copy_preserved_files(
    files: Iterable[str],
    source_dir: str | Path,
    output_dir: str | Path,
) -> list[str]:
    """Copy `files` (relative to `source_dir`) to the same paths under `output_dir`.

    The output directory must be empty (or not exist yet) because the
    summary is generated by crawling it afterwards. Directories in `files`
    are skipped.

    Returns:
        The files actually copied.

    Raises:
        OutputDirError: If `output_dir` exists and is not empty.
        FileAccessError: If a file cannot be copied.
    """
    source = Path(source_dir)
    output = Path(output_dir)
    if output.exists() and any(output.iterdir()):
        raise OutputDirError(f"Cannot copy files because output directory is not empty: {output}")

    logger.info("Copying files from '%s' to '%s'", source, output)
    copied = []
    for name in files:
        src = source / name
        dest = output / name
        if src.is_dir():
            continue
        logger.debug("Copying '%s' to '%s'", src, dest)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dest)
        except OSError as e:
            raise FileAccessError(f"Cannot copy {src}: {e}", path=str(src)) from e
        copied.append(name)
    return copied
