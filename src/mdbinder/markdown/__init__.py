"""Markdown parsing, link extraction and link rewriting."""

from mdbinder.markdown.document import MarkdownDocument
from mdbinder.markdown.links import (
    extract_links,
    rewrite_file,
    rewrite_links,
    rewrite_repository,
    rewrite_tree,
)
from mdbinder.markdown.uri import classify, is_relative

__all__ = [
    "MarkdownDocument",
    "classify",
    "extract_links",
    "is_relative",
    "rewrite_file",
    "rewrite_links",
    "rewrite_repository",
    "rewrite_tree",
]
