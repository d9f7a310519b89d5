"""Tests for the collect and build pipeline."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from mdbinder.container import Container
from mdbinder.core.errors import OutputDirError, SourceError
from mdbinder.pipeline import build, collect
from tests.helpers import PNG_BYTES, write_files


class TestCollect:
    """Tests for collect()."""

    def test_collects_each_repository(self, mock_container: Container, docs_repo: Path) -> None:
        write_files(docs_repo.parent / "api", {"readme.md": "[ref](ref.md)\n", "ref.md": "x\n"})
        mock_container.source.list_repositories.return_value = ["docs", "api"]

        report = collect(mock_container)

        assert [r.slug for r in report.repos] == ["docs", "api"]
        assert report.files == [
            "api/readme.md",
            "api/ref.md",
            "docs/README.md",
            "docs/guide.md",
            "docs/img/diagram.png",
        ]
        assert report.failed == []
        mock_container.cloner.ensure_clone.assert_any_call("docs", str(docs_repo))

    def test_clone_failure_skips_repository(
        self, mock_container: Container, docs_repo: Path
    ) -> None:
        mock_container.source.list_repositories.return_value = ["broken", "docs"]
        mock_container.cloner.ensure_clone.side_effect = lambda slug, dest: slug == "docs"

        report = collect(mock_container)

        assert [r.slug for r in report.failed] == ["broken"]
        assert "Could not clone" in (report.failed[0].error or "")
        assert report.files == ["docs/README.md", "docs/guide.md", "docs/img/diagram.png"]

    def test_missing_readme_reported(self, mock_container: Container, tmp_path: Path) -> None:
        write_files(tmp_path / "git" / "empty", {"index.md": "x\n"})
        mock_container.source.list_repositories.return_value = ["empty"]

        report = collect(mock_container)

        assert report.repos[0].error == "No README found"
        assert report.files == []

    def test_binary_readme_still_listed(self, mock_container: Container, tmp_path: Path) -> None:
        write_files(tmp_path / "git" / "odd", {"README.md": PNG_BYTES})
        mock_container.source.list_repositories.return_value = ["odd"]

        report = collect(mock_container)

        assert report.files == ["odd/README.md"]

    def test_unreadable_file_does_not_abort_siblings(
        self, mock_container: Container, docs_repo: Path
    ) -> None:
        write_files(docs_repo.parent / "locked", {"README.md": "[a](a.md)\n", "a.md": "a\n"})
        mock_container.source.list_repositories.return_value = ["locked", "docs"]

        real_read_bytes = Path.read_bytes

        def read_bytes(self: Path) -> bytes:
            if self.name == "a.md":
                raise PermissionError(13, "Permission denied", str(self))
            return real_read_bytes(self)

        with patch.object(Path, "read_bytes", read_bytes):
            report = collect(mock_container)

        assert [r.slug for r in report.failed] == ["locked"]
        assert "a.md" in (report.failed[0].error or "")
        assert "docs/guide.md" in report.files

    def test_unresolved_links_reported(self, mock_container: Container, tmp_path: Path) -> None:
        write_files(tmp_path / "git" / "docs", {"README.md": "[gone](gone.md)\n"})
        mock_container.source.list_repositories.return_value = ["docs"]

        report = collect(mock_container)

        assert [u.target for u in report.repos[0].unresolved] == ["gone.md"]

    def test_source_error_propagates(self, mock_container: Container) -> None:
        mock_container.source.list_repositories.side_effect = SourceError("down")
        with pytest.raises(SourceError):
            collect(mock_container)


class TestBuild:
    """Tests for build()."""

    def test_assembles_book(self, mock_container: Container, docs_repo: Path) -> None:
        mock_container.source.list_repositories.return_value = ["docs"]
        out = Path(mock_container.config.output_dir)

        report = build(mock_container)

        assert report.copied == ["docs/README.md", "docs/guide.md", "docs/img/diagram.png"]
        assert report.rewritten == ["docs/README.md", "docs/guide.md"]
        assert "[guide](docs/guide.md)" in (out / "docs" / "README.md").read_text()
        assert "(https://example.com)" in (out / "docs" / "README.md").read_text()
        assert "![diagram](docs/img/diagram.png)" in (out / "docs" / "guide.md").read_text()
        assert (out / "docs" / "img" / "diagram.png").read_bytes() == PNG_BYTES
        assert not (out / "docs" / "unlinked.md").exists()
        # Sources are left untouched
        assert "[guide](guide.md)" in (docs_repo / "README.md").read_text()

    def test_index_pages_written(self, mock_container: Container, docs_repo: Path) -> None:
        mock_container.source.list_repositories.return_value = ["docs"]
        out = Path(mock_container.config.output_dir)

        build(mock_container)

        summary = (out / "SUMMARY.md").read_text()
        assert "* [docs](./docs)\n" in summary
        assert "    * [guide.md](docs/guide.md)\n" in summary
        assert (out / "README.md").read_text().startswith("# DOCS\n")

    def test_custom_templates(
        self, mock_container: Container, docs_repo: Path, tmp_path: Path
    ) -> None:
        (tmp_path / "readme.tmpl").write_text("Book of {{project}}\n")
        mock_container.config.readme_template = str(tmp_path / "readme.tmpl")
        mock_container.source.list_repositories.return_value = ["docs"]

        build(mock_container)

        readme = Path(mock_container.config.output_dir) / "README.md"
        assert readme.read_text() == "Book of DOCS\n"

    def test_non_empty_output_rejected(self, mock_container: Container, docs_repo: Path) -> None:
        write_files(Path(mock_container.config.output_dir), {"old.md": "x"})
        mock_container.source.list_repositories.return_value = ["docs"]
        with pytest.raises(OutputDirError):
            build(mock_container)

    def test_no_repositories(self, mock_container: Container) -> None:
        report = build(mock_container)
        out = Path(mock_container.config.output_dir)
        assert report.copied == []
        assert sorted(os.listdir(out)) == ["README.md", "SUMMARY.md"]
