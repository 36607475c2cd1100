"""
Tests for the ProjectWorkspace.
"""

import os

import pytest

from crumbler.errors import ProcessingError, ProjectStateError
from crumbler.ingestors import FetchedPage, InputValidator
from crumbler.pipeline import ProjectWorkspace
from crumbler.pipeline.artifacts import source_name
from crumbler.pipeline.workspace import default_project_name, unique_directory, url_seed_name


class FakeFetcher:
    def __init__(self, content=b"", error=None):
        self.content = content
        self.error = error

    def fetch(self, url):
        if self.error:
            raise self.error
        return FetchedPage(url=url, content=self.content, encoding="utf-8")


class TestCreateFromFile:
    """Tests for single-file projects."""

    def setup_method(self):
        self.validator = InputValidator()

    def test_seed_artifact(self, workspace, output_dir, sample_file, sample_text):
        project = workspace.create(self.validator.validate(str(sample_file)), "p")

        assert project.directory == output_dir / "p"
        assert project.seed_file_count == 1
        assert project.heads == {"test.txt": output_dir / "p" / "test.txt"}
        assert (output_dir / "p" / "test.txt").read_text(encoding="utf-8") == sample_text
        assert project.stats.processed == 1

    def test_unique_directory_names(self, workspace, output_dir, sample_file):
        report = self.validator.validate(str(sample_file))
        first = workspace.create(report, "p")
        second = workspace.create(report, "p")
        third = workspace.create(report, "p")

        assert first.directory.name == "p"
        assert second.directory.name == "p1"
        assert third.directory.name == "p2"
        assert second.name == "p1"

    def test_html_source_is_kept_next_to_seed(self, workspace, tmp_path):
        source = tmp_path / "page.html"
        source.write_text("<p>Hello there</p><p>General Kenobi</p>", encoding="utf-8")

        project = workspace.create(self.validator.validate(str(source)))

        assert project.name == "page"
        assert (project.directory / "page.html").exists()
        seed = project.directory / "page.txt"
        assert seed.read_text(encoding="utf-8") == "Hello there\nGeneral Kenobi"

    def test_windows_1252_source(self, workspace, tmp_path):
        source = tmp_path / "legacy.txt"
        source.write_bytes("Grüße aus Köln".encode("cp1252"))

        project = workspace.create(self.validator.validate(str(source)))
        assert project.heads["legacy.txt"].read_text(encoding="utf-8") == "Grüße aus Köln"

    def test_single_file_errors_propagate(self, workspace, tmp_path):
        source = tmp_path / "song.wav"
        source.write_bytes(b"RIFF")
        with pytest.raises(ProcessingError):
            workspace.create(self.validator.validate(str(source)))


class TestCreateFromDirectory:
    """Tests for directory projects."""

    def setup_method(self):
        self.validator = InputValidator()

    def test_members_are_seeded(self, workspace, tmp_path):
        corpus = tmp_path / "corpus"
        (corpus / "sub").mkdir(parents=True)
        (corpus / "a.txt").write_text("alpha", encoding="utf-8")
        (corpus / "sub" / "b.html").write_text("<p>beta</p>", encoding="utf-8")
        (corpus / "empty.md").write_text("", encoding="utf-8")
        (corpus / "song.mp3").write_bytes(b"ID3")

        project = workspace.create(self.validator.validate(str(corpus)))

        assert project.name == "corpus_process"
        assert sorted(project.heads) == ["a.txt", "sub/b.txt"]
        assert project.seed_file_count == 2
        assert (project.directory / "sub" / "b.txt").read_text(encoding="utf-8") == "beta"
        assert (project.directory / "song.mp3").exists()
        assert project.stats.processed == 2
        assert project.stats.failed == 1
        assert project.stats.warnings == 1

    def test_seed_name_collisions(self, workspace, tmp_path):
        corpus = tmp_path / "corpus"
        corpus.mkdir()
        (corpus / "a.txt").write_text("plain", encoding="utf-8")
        (corpus / "a.html").write_text("<p>markup</p>", encoding="utf-8")

        project = workspace.create(self.validator.validate(str(corpus)), "c")

        assert sorted(project.heads) == ["a.txt", "a_html.txt"]
        assert (project.directory / "a.txt").read_text(encoding="utf-8") == "plain"
        assert (project.directory / "a_html.txt").read_text(encoding="utf-8") == "markup"

    def test_source_named_like_an_artifact(self, workspace, tmp_path):
        corpus = tmp_path / "corpus"
        corpus.mkdir()
        (corpus / "report.txt").write_text("Alpha", encoding="utf-8")
        (corpus / "report_cl.txt").write_text("Beta draft", encoding="utf-8")

        project = workspace.create(self.validator.validate(str(corpus)), "c")

        assert sorted(project.heads) == ["report.txt", "report_cl_src.txt"]
        assert not (project.directory / "report_cl.txt").exists()
        assert workspace.open(project.directory).heads == project.heads


class TestCreateFromUrl:
    """Tests for URL projects."""

    def setup_method(self):
        self.validator = InputValidator()

    def test_seed_named_after_url(self, output_dir):
        workspace = ProjectWorkspace(
            str(output_dir), fetcher=FakeFetcher(b"<html><p>News</p><text>Caption</text></html>")
        )
        project = workspace.create(self.validator.validate("https://example.com/news/article.html"))

        assert project.name == "article"
        assert project.heads == {"article.txt": project.directory / "article.txt"}
        assert project.heads["article.txt"].read_text(encoding="utf-8") == "News\nCaption"

    def test_fetch_failure_is_tallied(self, output_dir):
        workspace = ProjectWorkspace(
            str(output_dir), fetcher=FakeFetcher(error=ProcessingError("timeout"))
        )
        project = workspace.create(self.validator.validate("https://example.com/"), "web")

        assert project.directory.is_dir()
        assert project.seed_file_count == 0
        assert project.stats.failed == 1

    @pytest.mark.parametrize("url,name", [
        ("https://example.com/news/article.html", "article.txt"),
        ("https://example.com/news/", "news.txt"),
        ("https://example.com", "example.com.txt"),
        ("https://example.com/caf%C3%A9", "café.txt"),
        ("https://example.com/page_n", "page_n_src.txt"),
    ])
    def test_url_seed_name(self, url, name):
        assert url_seed_name(url) == name


class TestOpen:
    """Tests for reopening an existing project."""

    def _touch(self, path, text, mtime):
        path.write_text(text, encoding="utf-8")
        os.utime(path, (mtime, mtime))

    def test_heads_follow_longest_chain(self, workspace, tmp_path):
        directory = tmp_path / "proj"
        directory.mkdir()
        self._touch(directory / "test.txt", "seed", 100)
        self._touch(directory / "test_cl.txt", "cl", 200)
        self._touch(directory / "test_cl_n.txt", "n", 300)
        self._touch(directory / "test_cl_n_tok.txt", "tok", 400)
        self._touch(directory / "test_cl_n_tok_lem.txt", "lem", 500)
        self._touch(directory / "test_cl_n_tok_pos.txt", "pos", 600)
        self._touch(directory / "other.txt", "other", 50)

        project = workspace.open(directory)

        assert project.name == "proj"
        assert project.seed_file_count == 2
        assert project.heads == {
            "test.txt": directory / "test_cl_n_tok.txt",
            "other.txt": directory / "other.txt",
        }
        assert not project.tokenized

    def test_mtime_breaks_ties(self, workspace, tmp_path):
        directory = tmp_path / "proj"
        directory.mkdir()
        self._touch(directory / "test.txt", "seed", 100)
        self._touch(directory / "test_nl.txt", "older", 200)
        self._touch(directory / "test_n.txt", "newer", 300)

        assert workspace.open(directory).heads["test.txt"] == directory / "test_n.txt"

    def test_missing_directory(self, workspace, tmp_path):
        with pytest.raises(ProjectStateError):
            workspace.open(tmp_path / "missing")

    def test_empty_directory(self, workspace, tmp_path):
        with pytest.raises(ProjectStateError):
            workspace.open(tmp_path)


class TestNaming:
    """Tests for naming helpers."""

    def test_unique_directory(self, tmp_path):
        assert unique_directory(tmp_path, "p") == tmp_path / "p"
        (tmp_path / "p").mkdir()
        (tmp_path / "p1").mkdir()
        assert unique_directory(tmp_path, "p") == tmp_path / "p2"

    def test_default_project_name_for_file(self, sample_file):
        assert default_project_name(InputValidator().validate(str(sample_file))) == "test"

    @pytest.mark.parametrize("filename,name", [
        ("report.txt", "report.txt"),
        ("report_cl.txt", "report_cl_src.txt"),
        ("notes_n_tok.html", "notes_n_tok_src.html"),
        ("a_b.md", "a_b.md"),
        ("cl.txt", "cl.txt"),
    ])
    def test_source_name(self, filename, name):
        assert source_name(filename) == name
