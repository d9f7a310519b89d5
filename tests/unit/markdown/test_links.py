"""Tests for link extraction and rewriting."""

from __future__ import annotations

from pathlib import Path

from mdbinder.markdown.document import MarkdownDocument
from mdbinder.markdown.links import (
    extract_links,
    rewrite_file,
    rewrite_links,
    rewrite_repository,
    rewrite_tree,
)
from tests.helpers import PNG_BYTES, write_files


def links_of(text: str) -> list[str]:
    return extract_links(MarkdownDocument.parse(text))


class TestExtractLinks:
    """Tests for extract_links()."""

    def test_document_order(self) -> None:
        text = "[a](one.md) then ![b](two.png)\n\n# Head [c](https://x.com)\n"
        assert links_of(text) == ["one.md", "two.png", "https://x.com"]

    def test_image_inside_link_visited_after_link(self) -> None:
        text = "[![badge](badge.svg)](https://ci.example.com)\n"
        assert links_of(text) == ["https://ci.example.com", "badge.svg"]

    def test_duplicates_kept(self) -> None:
        assert links_of("[a](x.md) [b](x.md)\n") == ["x.md", "x.md"]

    def test_nested_blocks(self) -> None:
        text = "- item with [link](nested/a.md)\n\n> quote ![img](q.png)\n"
        assert links_of(text) == ["nested/a.md", "q.png"]

    def test_reference_links(self) -> None:
        assert links_of("[a][ref]\n\n[ref]: target.md\n") == ["target.md"]

    def test_no_links(self) -> None:
        assert links_of("# Nothing\n\nplain text\n") == []

    def test_code_spans_ignored(self) -> None:
        assert links_of("`[a](b.md)`\n\n```\n[c](d.md)\n```\n") == []


class TestRewriteLinks:
    """Tests for rewrite_links()."""

    def test_only_relative_targets_prefixed(self) -> None:
        doc = MarkdownDocument.parse("[text](../x.md)\n\n![img](http://ext.com/i.png)\n")
        count = rewrite_links(doc, "repo1")

        assert count == 1
        rendered = doc.render()
        assert "[text](repo1/../x.md)" in rendered
        assert "![img](http://ext.com/i.png)" in rendered
        assert extract_links(doc) == ["repo1/../x.md", "http://ext.com/i.png"]

    def test_fragment_only_links_are_relative(self) -> None:
        doc = MarkdownDocument.parse("[top](#top)\n")
        rewrite_links(doc, "docs")
        assert extract_links(doc) == ["docs/#top"]

    def test_second_call_prefixes_again(self) -> None:
        doc = MarkdownDocument.parse("[a](a.md)\n")
        rewrite_links(doc, "docs")
        rewrite_links(doc, "docs")
        assert extract_links(doc) == ["docs/docs/a.md"]

    def test_reference_definitions_prefixed_once(self) -> None:
        doc = MarkdownDocument.parse("[a][ref] and [b][ref]\n\n[ref]: target.md\n")
        assert rewrite_links(doc, "docs") == 2

        reparsed = MarkdownDocument.parse(doc.render())
        assert extract_links(reparsed) == ["docs/target.md", "docs/target.md"]

    def test_unused_definitions_prefixed(self) -> None:
        doc = MarkdownDocument.parse("[a](x.md)\n\n[later]: other.md\n[site]: https://x.com\n")
        assert rewrite_links(doc, "docs") == 2

        rendered = doc.render()
        assert "[a](docs/x.md)" in rendered
        assert "[later]: docs/other.md" in rendered
        assert "[site]: https://x.com" in rendered

    def test_nothing_to_rewrite(self) -> None:
        doc = MarkdownDocument.parse("[site](https://example.com)\n")
        assert rewrite_links(doc, "docs") == 0


class TestRewriteFiles:
    """Tests for rewrite_file(), rewrite_repository() and rewrite_tree()."""

    def test_rewrite_file_in_place(self, tmp_path: Path) -> None:
        path = write_files(tmp_path, {"guide.md": "[intro](intro.md)\n"}) / "guide.md"
        assert rewrite_file(path, "docs") is True
        assert "[intro](docs/intro.md)" in path.read_text()

    def test_rewrite_file_keeps_front_matter(self, tmp_path: Path) -> None:
        text = "---\ntitle: Guide\n---\n\n[x](x.md)\n"
        path = write_files(tmp_path, {"guide.md": text}) / "guide.md"
        assert rewrite_file(path, "docs") is True

        rewritten = path.read_text()
        assert rewritten.startswith("---\ntitle: Guide\n---\n")
        assert "[x](docs/x.md)" in rewritten
        assert "___" not in rewritten

    def test_rewrite_file_skips_binary(self, tmp_path: Path) -> None:
        path = write_files(tmp_path, {"logo.md": PNG_BYTES}) / "logo.md"
        assert rewrite_file(path, "docs") is False
        assert path.read_bytes() == PNG_BYTES

    def test_rewrite_repository_filters_suffixes(self, tmp_path: Path) -> None:
        write_files(
            tmp_path,
            {
                "README.md": "[g](guide.md)\n",
                "sub/notes.markdown": "[r](../README.md)\n",
                "script.py": "# [not](markdown.md)\n",
            },
        )
        rewritten = rewrite_repository(tmp_path, "docs")

        assert rewritten == ["README.md", "sub/notes.markdown"]
        assert (tmp_path / "script.py").read_text() == "# [not](markdown.md)\n"
        assert "docs/../README.md" in (tmp_path / "sub" / "notes.markdown").read_text()

    def test_rewrite_tree_uses_directory_names(self, tmp_path: Path) -> None:
        write_files(
            tmp_path,
            {
                "README.md": "[a](alpha/README.md)\n",
                "alpha/README.md": "[g](guide.md)\n",
                "beta/README.md": "![i](img/i.png)\n",
            },
        )
        rewritten = rewrite_tree(tmp_path)

        assert rewritten == ["alpha/README.md", "beta/README.md"]
        assert (tmp_path / "README.md").read_text() == "[a](alpha/README.md)\n"
        assert "(alpha/guide.md)" in (tmp_path / "alpha" / "README.md").read_text()
        assert "(beta/img/i.png)" in (tmp_path / "beta" / "README.md").read_text()
