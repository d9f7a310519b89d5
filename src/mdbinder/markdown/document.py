"""Markdown tree adapter: parse markdown into a node tree and render it back.

Parsing is done by markdown-it-py (CommonMark), rendering by mdformat's
markdown renderer. Link and image nodes expose their targets through
``node.attrs`` (``href`` / ``src``); mutating those dicts changes what
``render()`` emits.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import mdformat_frontmatter
from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdformat.renderer import MDRenderer

from mdbinder.core.errors import FileAccessError, ParseError

LINK = "link"
IMAGE = "image"

# Attribute holding the target, per node kind
TARGET_ATTRIBUTES: dict[str, str] = {LINK: "href", IMAGE: "src"}


def _build_parser() -> MarkdownIt:
    """Create a CommonMark parser wired to mdformat's renderer.

    YAML front matter is parsed as its own node and rendered back as front
    matter.
    """
    mdit = MarkdownIt("commonmark", {"store_labels": True}, renderer_cls=MDRenderer)
    mdformat_frontmatter.update_mdit(mdit)
    # Keep line breaks as written; ordered lists numbered consecutively
    mdit.options["mdformat"] = {"wrap": "keep", "number": True, "end_of_line": "lf"}
    mdit.options["parser_extension"] = [mdformat_frontmatter]
    mdit.options["codeformatters"] = {}
    return mdit


class MarkdownDocument:
    """A parsed markdown document owning its node tree.

    Reference-style links keep their label; their targets live in
    ``references`` (label -> definition) as well as on the link node.
    """

    def __init__(self, parser: MarkdownIt, root: SyntaxTreeNode, env: dict[str, Any]) -> None:
        self._parser = parser
        self.root = root
        self._env = env

    @classmethod
    def parse(cls, text: str) -> MarkdownDocument:
        """Parse markdown text.

        Raises:
            ParseError: If the text is not markdown (binary content).
        """
        if "\x00" in text:
            raise ParseError("Content contains NUL bytes")
        parser = _build_parser()
        env: dict[str, Any] = {}
        try:
            tokens = parser.parse(text, env)
        except Exception as e:
            raise ParseError(f"Cannot parse markdown: {e}") from e
        return cls(parser, SyntaxTreeNode(tokens), env)

    @classmethod
    def parse_bytes(cls, data: bytes) -> MarkdownDocument:
        """Parse raw file content, rejecting anything that is not UTF-8 text."""
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Content is not UTF-8 text: {e}") from e
        return cls.parse(text)

    @classmethod
    def load(cls, path: str | Path) -> MarkdownDocument:
        """Read and parse a markdown file.

        Raises:
            FileAccessError: If the file cannot be read.
            ParseError: If the file is not markdown.
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise FileAccessError(f"Cannot read {path}: {e}", path=str(path)) from e
        return cls.parse_bytes(data)

    @property
    def references(self) -> dict[str, dict[str, Any]]:
        """Reference definitions collected while parsing, keyed by normalized label."""
        return self._env.setdefault("references", {})

    def walk(self) -> Iterator[SyntaxTreeNode]:
        """Yield every node in pre-order (document order)."""
        yield from self.root.walk()

    def used_labels(self) -> set[str]:
        """Reference labels used by link and image nodes."""
        return {
            node.meta["label"]
            for node in self.walk()
            if target_attribute(node) is not None and node.meta.get("label")
        }

    def render(self) -> str:
        """Render the (possibly mutated) tree back to markdown text.

        mdformat only emits the reference definitions some link uses; the
        others are appended after the rendered text.
        """
        tokens = self.root.to_tokens()
        text = self._parser.renderer.render(tokens, self._parser.options, self._env)
        used = self.used_labels()
        unused = [
            _definition_line(label, definition)
            for label, definition in self.references.items()
            if label not in used
        ]
        if not unused:
            return text
        separator = "\n" if text else ""
        return text + separator + "\n".join(unused) + "\n"

    def save(self, path: str | Path) -> None:
        """Write the rendered document to `path`."""
        try:
            Path(path).write_text(self.render(), encoding="utf-8")
        except OSError as e:
            raise FileAccessError(f"Cannot write {path}: {e}", path=str(path)) from e


def target_attribute(node: SyntaxTreeNode) -> str | None:
    """Name of the attribute holding a node's link target, or None."""
    return TARGET_ATTRIBUTES.get(node.type)


def _definition_line(label: str, definition: dict[str, Any]) -> str:
    href = definition["href"]
    if not href or " " in href:
        href = f"<{href}>"
    line = f"[{label.lower()}]: {href}"
    title = definition.get("title")
    if title:
        escaped = title.replace('"', '\\"')
        line += f' "{escaped}"'
    return line
