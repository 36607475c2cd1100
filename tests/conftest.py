"""
Shared fixtures: a deterministic NLP engine and temporary workspaces.
"""

import re

import pytest

from crumbler.errors import ProcessingError, ValidationError
from crumbler.pipeline import ProjectWorkspace, StageOrchestrator
from crumbler.processors.engine import NLPEngine

SAMPLE_TEXT = "Hello, World! This is a test.\nIt's working, isn't it?"


class FakeEngine(NLPEngine):
    """
    Rule-based stand-in for a language model.

    Tokens are runs of word characters and apostrophes, or single
    punctuation marks. Capitalized tokens are proper nouns and entities.
    """

    STOP_WORDS = {
        "EN": {"is", "a", "this", "it", "the"},
        "DE": {"der", "die", "das", "und"},
    }

    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.calls = []

    def _check(self, text, language):
        if language not in self.STOP_WORDS:
            raise ValidationError(f"Unsupported language: {language}")
        if self.fail_on and self.fail_on in text:
            raise ProcessingError(f"cannot analyze text containing {self.fail_on!r}")

    def tokenize(self, text, language):
        self._check(text, language)
        self.calls.append(("tokenize", text))
        return re.findall(r"[\w']+|[^\w\s]", text)

    def lemmatize(self, text, language):
        self._check(text, language)
        self.calls.append(("lemmatize", text))
        return [(t, t.lower()) for t in text.split()]

    def tag(self, text, language):
        self._check(text, language)
        self.calls.append(("tag", text))
        return [
            (t, "PROPN", "NNP") if t[:1].isupper() else (t, "X", "XX")
            for t in text.split()
        ]

    def entities(self, text, language):
        self._check(text, language)
        self.calls.append(("entities", text))
        return [(t, "MISC") for t in text.split() if t[:1].isupper()]

    def stop_words(self, language):
        self._check("", language)
        return set(self.STOP_WORDS[language])


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "output"


@pytest.fixture
def workspace(output_dir):
    return ProjectWorkspace(output_directory=str(output_dir))


@pytest.fixture
def features(engine, workspace):
    return StageOrchestrator(engine=engine, workspace=workspace)


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "sources" / "test.txt"
    path.parent.mkdir()
    path.write_text(SAMPLE_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def sample_text():
    return SAMPLE_TEXT


@pytest.fixture
def engine_factory():
    return FakeEngine
