"""Closure walker: find every local file reachable from a starting document.

Starting from a markdown file, relative link and image targets are resolved
against the directory of the document containing them and followed. Markdown
targets are parsed and walked in turn; targets that are not markdown (images,
archives, ...) end the walk but are still part of the closure as long as they
exist on disk. Targets that resolve to nothing are dropped and reported as
unresolved links.

All paths handed out are POSIX paths relative to the repository root.
"""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path, PurePosixPath
from urllib.parse import unquote

from mdbinder.core.errors import FileAccessError, ParseError
from mdbinder.core.models import ClosureResult, UnresolvedLink
from mdbinder.markdown.document import MarkdownDocument
from mdbinder.markdown.links import extract_links
from mdbinder.markdown.uri import is_relative

logger = logging.getLogger(__name__)


def compute_closure(
    start_file: str | Path,
    *,
    root: str | Path | None = None,
    visited: set[str] | None = None,
    strict: bool = False,
    log: logging.Logger | None = None,
) -> ClosureResult:
    """Compute the set of files reachable from `start_file`.

    Args:
        start_file: Starting document, relative to `root` when given.
        root: Repository root. Defaults to the directory of `start_file`.
        visited: Paths already discovered by the caller; extended in place.
        strict: Log unresolved links as warnings instead of debug messages.
        log: Logger to report progress to.

    Returns:
        ClosureResult with ok=False and no files if the start file is not
        markdown, otherwise ok=True and every reachable file including the
        start file itself.

    Raises:
        FileAccessError: If an existing file cannot be read.
    """
    log = log or logger
    visited = visited if visited is not None else set()
    root_path, start_key = _locate_start(Path(start_file), root)

    log.info("Parsing '%s'", start_key)
    visited.add(start_key)
    try:
        doc = MarkdownDocument.load(root_path / start_key)
    except ParseError as e:
        log.warning("Could not parse markdown file '%s': %s", start_key, e)
        return ClosureResult(ok=False)

    result = ClosureResult(ok=True, reachable={start_key})
    pending: list[tuple[str, MarkdownDocument]] = [(start_key, doc)]

    while pending:
        current, doc = pending.pop()
        relative_uris = [uri for uri in extract_links(doc) if is_relative(uri)]
        log.debug("Detected relative uris in '%s': %s", current, relative_uris)

        for uri in relative_uris:
            path = resolve_target(root_path, current, uri)
            if path is None:
                result.unresolved.append(UnresolvedLink(source=current, target=uri))
                log.log(
                    logging.WARNING if strict else logging.DEBUG,
                    "Unresolved link in '%s': '%s'",
                    current,
                    uri,
                )
                continue
            if path in visited:
                continue

            log.debug("Detected new file in '%s' to parse: '%s'", current, path)
            visited.add(path)
            result.reachable.add(path)
            try:
                child = MarkdownDocument.load(root_path / path)
            except ParseError:
                log.debug("Adding file '%s' because it is found locally", path)
                continue
            log.info("Parsing '%s'", path)
            pending.append((path, child))

    log.debug("Files connected to '%s': %s", start_key, sorted(result.reachable))
    return result


def resolve_target(root: Path, current: str, target: str) -> str | None:
    """Resolve a relative link target to an existing file under `root`.

    The literal target is tried first, then the target without its
    ``#fragment`` / ``?query``, then its percent-decoded form. A target that
    is empty once the fragment is removed refers to `current` itself.
    Leading ``/`` means the repository root. Symlinks are followed; the
    returned key is the real path, and files whose real path is outside
    `root` are not resolved.

    Returns:
        The file's canonical path relative to `root`, or None.
    """
    real_root = root.resolve()
    base = PurePosixPath(current).parent
    for candidate in _candidates(target):
        if candidate == "":
            return current
        if candidate.startswith("/"):
            relative = candidate.lstrip("/")
        else:
            relative = (base / candidate).as_posix()
        normalized = posixpath.normpath(relative)
        # Outside the repository
        if normalized == ".." or normalized.startswith("../"):
            continue
        path = root / normalized
        if not path.is_file():
            continue
        real = path.resolve()
        if real.is_relative_to(real_root):
            return real.relative_to(real_root).as_posix()
    return None


def _candidates(target: str) -> list[str]:
    bare = target.split("#", 1)[0].split("?", 1)[0]
    candidates = []
    for candidate in (target, bare, unquote(bare)):
        if candidate not in candidates:
            candidates.append(candidate)
    return candidates


def _locate_start(start: Path, root: str | Path | None) -> tuple[Path, str]:
    if root is None:
        return start.parent, start.name
    root_path = Path(root)
    if not start.is_absolute():
        return root_path, posixpath.normpath(start.as_posix())
    try:
        return root_path, start.resolve().relative_to(root_path.resolve()).as_posix()
    except ValueError as e:
        raise FileAccessError(f"{start} is not inside {root}", path=str(start)) from e


def find_readme(repo_dir: str | Path) -> str | None:
    """Name of the repository's README.

    The first file, in case-insensitive name order, whose name contains
    "readme".
    """
    entries = sorted(Path(repo_dir).iterdir(), key=lambda p: (p.name.lower(), p.name))
    for entry in entries:
        if "readme" in entry.name.lower() and entry.is_file():
            return entry.name
    return None


def collect_repository(
    repo_dir: str | Path,
    *,
    strict: bool = False,
    log: logging.Logger | None = None,
) -> tuple[str | None, ClosureResult]:
    """Find a repository's README and compute its closure.

    Each call uses its own visited set.

    Returns:
        (README name or None, closure result). Without a README the result
        is not ok and holds no files.
    """
    log = log or logger
    readme = find_readme(repo_dir)
    if readme is None:
        log.warning("No README found in '%s'", repo_dir)
        return None, ClosureResult(ok=False)
    return readme, compute_closure(readme, root=repo_dir, visited=set(), strict=strict, log=log)
