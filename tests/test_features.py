"""
Tests for the StageOrchestrator.
"""

import logging
import shutil
from dataclasses import replace

import pytest

from crumbler.errors import CrumblerError, ProjectStateError, ValidationError
from crumbler.pipeline import ProjectWorkspace, Stage, StageOrchestrator, StageRequest
from crumbler.processors import read_tokens


def tokens_of(path):
    return read_tokens(path.read_text(encoding="utf-8"))


class TestNewProject:
    """Tests for newproject()."""

    def test_creates_seeded_project(self, features, sample_file, output_dir):
        project = features.newproject(str(sample_file), "p")
        assert project.directory == output_dir / "p"
        assert project.seed_file_count == 1

    def test_same_name_twice(self, features, sample_file):
        first = features.newproject(str(sample_file), "p")
        second = features.newproject(str(sample_file), "p")
        assert (first.name, second.name) == ("p", "p1")

    def test_validation_error_has_no_side_effects(self, features, tmp_path, output_dir):
        bad = tmp_path / "notes.docx"
        bad.write_text("x")
        with pytest.raises(ValidationError):
            features.newproject(str(bad), "p")
        assert not output_dir.exists()

    def test_unexpected_errors_are_wrapped(self, engine, sample_file, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        features = StageOrchestrator(
            engine=engine, workspace=ProjectWorkspace(str(blocker / "nested"))
        )
        with pytest.raises(CrumblerError) as excinfo:
            features.newproject(str(sample_file), "p")
        assert excinfo.type is CrumblerError


class TestEndToEnd:
    """The sample document through every stage."""

    def test_scenario(self, features, sample_file):
        project = features.newproject(str(sample_file), "p")
        directory = project.directory

        project = features.cleantext(project)
        project = features.normalize(project)
        normalized = (directory / "test_cl_n.txt").read_text(encoding="utf-8")
        assert "!" not in normalized
        assert "," not in normalized

        project = features.tokenize(project, "EN")
        tokens = tokens_of(directory / "test_cl_n_tok.txt")
        assert "Hello" in tokens
        assert "World" in tokens

        project = features.stopwordsclean(project, "EN")
        remaining = tokens_of(directory / "test_cl_n_tok_nost.txt")
        assert "is" not in remaining
        assert "a" not in remaining
        assert "Hello" in remaining

        project = features.lemmatizer(project, "EN")
        project = features.tagger(project, "EN")
        project = features.ner(project, "EN")

        assert project.outputs[Stage.LEMMATIZE] == (directory / "test_cl_n_tok_nost_lem.txt",)
        assert project.outputs[Stage.TAG] == tuple(
            directory / f"test_cl_n_tok_nost_pos.{ext}" for ext in ("txt", "csv", "xml")
        )
        assert project.outputs[Stage.NER] == tuple(
            directory / f"test_cl_n_tok_nost_ner.{ext}" for ext in ("txt", "csv", "xml")
        )
        # Terminal stages never become the input of later stages
        assert project.heads == {"test.txt": directory / "test_cl_n_tok_nost.txt"}
        assert project.stats.processed == 8
        assert project.stats.failed == 0

    def test_normalization_suffixes(self, features, sample_file):
        project = features.newproject(str(sample_file), "p")
        project = features.normalize(project, contractions=True, lowercase=True)
        head = project.heads["test.txt"]
        assert head.name == "test_nlc.txt"
        text = head.read_text(encoding="utf-8")
        assert text == text.lower()
        assert "is not" in text

    def test_artifacts_are_never_overwritten(self, features, sample_file):
        project = features.newproject(str(sample_file), "p")
        project = features.cleantext(project)
        first = (project.directory / "test_cl.txt").read_text(encoding="utf-8")
        project = features.cleantext(project)

        assert (project.directory / "test_cl.txt").read_text(encoding="utf-8") == first
        assert project.heads["test.txt"].name == "test_cl_cl.txt"

    def test_source_named_like_an_artifact_is_not_overwritten(self, features, tmp_path):
        corpus = tmp_path / "corpus"
        corpus.mkdir()
        (corpus / "report.txt").write_text("Alpha 1 text", encoding="utf-8")
        (corpus / "report_cl.txt").write_text("Beta draft", encoding="utf-8")

        project = features.newproject(str(corpus), "p")
        project = features.cleantext(project)
        directory = project.directory

        assert project.stats.processed == 4
        assert (directory / "report_cl.txt").read_text(encoding="utf-8") == "Alpha text"
        assert (directory / "report_cl_src.txt").read_text(encoding="utf-8") == "Beta draft"
        assert project.heads["report_cl_src.txt"].read_text(encoding="utf-8") == "Beta draft"
        assert project.heads["report_cl_src.txt"].name == "report_cl_src_cl.txt"

    def test_tokenize_logs_token_counts(self, features, sample_file, caplog):
        project = features.newproject(str(sample_file), "p")
        with caplog.at_level(logging.INFO, logger="crumbler"):
            features.tokenize(project, "EN")
        assert "test.txt: 15 tokens" in caplog.messages


class TestImplicitTokenize:
    """Dependent stages tokenize first when needed."""

    @pytest.mark.parametrize("method,suffix", [
        ("lemmatizer", "lem"),
        ("tagger", "pos"),
        ("ner", "ner"),
        ("stopwordsclean", "nost"),
    ])
    def test_dependent_stage_without_tokenize(self, features, sample_file, method, suffix):
        project = features.newproject(str(sample_file), "p")
        project = getattr(features, method)(project, "EN")

        assert project.tokenized
        assert (project.directory / "test_tok.txt").exists()
        assert (project.directory / f"test_tok_{suffix}.txt").exists()

    def test_tokenize_runs_once(self, features, engine, sample_file):
        project = features.newproject(str(sample_file), "p")
        project = features.tagger(project, "EN")
        project = features.ner(project, "EN")
        assert [c[0] for c in engine.calls].count("tokenize") == 1

    def test_analysis_sees_joined_tokens(self, features, engine, sample_file):
        project = features.newproject(str(sample_file), "p")
        features.tagger(project, "EN")
        tagged_text = [text for name, text in engine.calls if name == "tag"][0]
        assert tagged_text.startswith("Hello , World ! This is a test")

    def test_run_counts_two_units(self, features, sample_file):
        project = features.newproject(str(sample_file), "p")
        seen = []
        project = features.run(
            project,
            StageRequest(frozenset({Stage.TAG})),
            on_progress=lambda pct, label: seen.append((pct, label))
        )
        assert seen == [(50, "tokenize"), (100, "tag")]
        assert project.outputs[Stage.TAG]

    def test_reopened_project_is_not_tokenized_twice(self, features, workspace, sample_file):
        project = features.newproject(str(sample_file), "p")
        project = features.tokenize(project, "EN")

        reopened = workspace.open(project.directory)
        reopened = features.tagger(reopened, "EN")

        assert reopened.heads["test.txt"].name == "test_tok.txt"
        assert not (project.directory / "test_tok_tok.txt").exists()
        assert (project.directory / "test_tok_pos.csv").exists()


class TestRun:
    """Tests for run()."""

    def test_full_run(self, features, sample_file):
        project = features.newproject(str(sample_file), "p")
        seen = []
        project = features.run(
            project,
            StageRequest.everything(lowercase=True, contractions=True),
            on_progress=lambda pct, label: seen.append(pct)
        )

        assert seen == [11, 44, 56, 67, 78, 89, 100]
        assert project.heads["test.txt"].name == "test_cl_nlc_tok_nost.txt"
        assert set(project.outputs) == set(Stage)

    def test_unsupported_language(self, features, sample_file):
        project = features.newproject(str(sample_file), "p")
        with pytest.raises(ValidationError):
            features.run(project, StageRequest(frozenset({Stage.TOKENIZE}), language="FR"))


class TestFailures:
    """Per-file isolation and fatal failures."""

    def test_per_file_failure(self, engine_factory, workspace, tmp_path):
        corpus = tmp_path / "corpus"
        corpus.mkdir()
        (corpus / "good.txt").write_text("Fine text", encoding="utf-8")
        (corpus / "bad.txt").write_text("Broken text", encoding="utf-8")
        features = StageOrchestrator(engine=engine_factory(fail_on="Broken"), workspace=workspace)

        project = features.newproject(str(corpus), "c")
        project = features.tokenize(project, "EN")

        assert project.stats.failed == 1
        assert project.heads["good.txt"].name == "good_tok.txt"
        assert project.heads["bad.txt"].name == "bad.txt"
        assert project.outputs[Stage.TOKENIZE] == (project.directory / "good_tok.txt",)

    def test_stats_never_decrease(self, engine_factory, workspace, tmp_path):
        corpus = tmp_path / "corpus"
        corpus.mkdir()
        (corpus / "good.txt").write_text("Fine text", encoding="utf-8")
        (corpus / "bad.txt").write_text("Broken text", encoding="utf-8")
        features = StageOrchestrator(engine=engine_factory(fail_on="Broken"), workspace=workspace)

        project = features.newproject(str(corpus), "c")
        history = [project.stats]
        for stage in (features.cleantext, features.tokenize, features.tagger):
            project = stage(project)
            history.append(project.stats)

        for before, after in zip(history, history[1:]):
            assert after.processed >= before.processed
            assert after.failed >= before.failed
            assert after.warnings >= before.warnings

    def test_missing_project_directory(self, features, sample_file):
        project = features.newproject(str(sample_file), "p")
        shutil.rmtree(project.directory)
        with pytest.raises(ProjectStateError):
            features.cleantext(project)

    def test_unsupported_language(self, features, sample_file):
        project = features.newproject(str(sample_file), "p")
        with pytest.raises(ValidationError):
            features.tagger(project, "FR")

    def test_heads_limited_to_seed_count(self, features, sample_file):
        project = features.newproject(str(sample_file), "p")
        extra = project.directory / "stray.txt"
        extra.write_text("stray", encoding="utf-8")
        project = replace(project, heads={**project.heads, "stray.txt": extra})

        project = features.cleantext(project)
        assert project.outputs[Stage.CLEAN] == (project.directory / "stray_cl.txt",)
