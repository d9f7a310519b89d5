"""Extract and rewrite link/image targets of a markdown document."""

from __future__ import annotations

import logging
from pathlib import Path

from mdbinder.core.errors import ParseError
from mdbinder.markdown.document import MarkdownDocument, target_attribute
from mdbinder.markdown.uri import is_relative

logger = logging.getLogger(__name__)

DEFAULT_MARKDOWN_SUFFIXES = (".md", ".markdown")


def extract_links(doc: MarkdownDocument) -> list[str]:
    """All link hrefs and image srcs of a document, in document order.

    Duplicates are kept.
    """
    links = []
    for node in doc.walk():
        attr = target_attribute(node)
        if attr is not None:
            links.append(str(node.attrs[attr]))
    return links


def rewrite_links(
    doc: MarkdownDocument,
    namespace: str,
    log: logging.Logger | None = None,
) -> int:
    """Prefix every relative link/image target with ``{namespace}/``.

    Absolute targets are left alone. Calling this twice with the same
    namespace prefixes twice.

    Returns:
        Number of targets rewritten.
    """
    log = log or logger
    rewritten = 0
    relabelled: set[str] = set()
    for node in doc.walk():
        attr = target_attribute(node)
        if attr is None:
            continue
        target = str(node.attrs[attr])
        if not is_relative(target):
            continue
        log.debug("Prepending '%s' to link '%s'", namespace, target)
        node.attrs[attr] = f"{namespace}/{target}"
        rewritten += 1

        # Reference-style links render their target from the definition
        label = node.meta.get("label")
        if label and label not in relabelled:
            definition = doc.references.get(label)
            if definition is not None:
                definition["href"] = f"{namespace}/{definition['href']}"
            relabelled.add(label)

    # Definitions no link uses are still written back
    used = doc.used_labels()
    for label, definition in doc.references.items():
        if label in used or not is_relative(definition["href"]):
            continue
        log.debug("Prepending '%s' to unused definition '%s'", namespace, label)
        definition["href"] = f"{namespace}/{definition['href']}"
        rewritten += 1
    return rewritten


def rewrite_file(
    path: str | Path,
    namespace: str,
    log: logging.Logger | None = None,
) -> bool:
    """Rewrite the relative links of a markdown file in place.

    Returns:
        False if the file is not markdown (left untouched), True otherwise.

    Raises:
        FileAccessError: If the file cannot be read or written.
    """
    log = log or logger
    try:
        doc = MarkdownDocument.load(path)
    except ParseError as e:
        log.warning("Skipping '%s': %s", path, e)
        return False
    count = rewrite_links(doc, namespace, log=log)
    doc.save(path)
    log.info("Rewrote %d link(s) in '%s'", count, path)
    return True


def rewrite_tree(
    output_dir: str | Path,
    suffixes: tuple[str, ...] | list[str] = DEFAULT_MARKDOWN_SUFFIXES,
    log: logging.Logger | None = None,
) -> list[str]:
    """Rewrite every markdown file below each repository directory of `output_dir`.

    Each top-level directory is a repository; its name is the namespace.
    Files directly inside `output_dir` (the book's own index pages) are not
    touched.

    Returns:
        Rewritten files, relative to `output_dir`.
    """
    log = log or logger
    root = Path(output_dir)
    rewritten = []
    log.info("Modifying links in '%s'", root)
    for repo_path in sorted(root.iterdir()):
        if not repo_path.is_dir():
            continue
        log.info("Found repo '%s'", repo_path.name)
        rewritten.extend(
            f"{repo_path.name}/{name}"
            for name in rewrite_repository(repo_path, repo_path.name, suffixes, log=log)
        )
    return rewritten


def rewrite_repository(
    repo_dir: str | Path,
    namespace: str,
    suffixes: tuple[str, ...] | list[str] = DEFAULT_MARKDOWN_SUFFIXES,
    log: logging.Logger | None = None,
) -> list[str]:
    """Rewrite every markdown file below `repo_dir` with `namespace`.

    Returns:
        Rewritten files, relative to `repo_dir`.
    """
    log = log or logger
    repo_path = Path(repo_dir)
    wanted = {s.lower() for s in suffixes}
    rewritten = []
    for file in sorted(repo_path.rglob("*")):
        if not file.is_file() or file.suffix.lower() not in wanted:
            continue
        if rewrite_file(file, namespace, log=log):
            rewritten.append(file.relative_to(repo_path).as_posix())
    return rewritten
