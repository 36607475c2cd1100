"""
NLP Engine - Tokenization, lemmas, POS tags and named entities.

The orchestrator only talks to the NLPEngine interface. SpacyEngine is the
default implementation: models are loaded lazily, once per language code,
and reused for the lifetime of the engine.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Set, Tuple

from ..errors import ProcessingError, ValidationError

logger = logging.getLogger(__name__)


class NLPEngine(ABC):
    """Language-model collaborator used by the stage orchestrator."""

    @abstractmethod
    def tokenize(self, text: str, language: str) -> List[str]:
        ...

    @abstractmethod
    def lemmatize(self, text: str, language: str) -> List[Tuple[str, str]]:
        ...

    @abstractmethod
    def tag(self, text: str, language: str) -> List[Tuple[str, str, str]]:
        ...

    @abstractmethod
    def entities(self, text: str, language: str) -> List[Tuple[str, str]]:
        ...

    @abstractmethod
    def stop_words(self, language: str) -> Set[str]:
        ...


class SpacyEngine(NLPEngine):
    """
    spaCy-backed NLP engine.

    Usage:
        engine = SpacyEngine()
        engine.tokenize("Hello, World!", "EN")  # ['Hello', ',', 'World', '!']
    """

    def __init__(
        self,
        models: Optional[Dict[str, str]] = None,
        loader: Optional[Callable[[str], object]] = None
    ):
        """
        Initialize engine.

        Args:
            models: Language code -> spaCy model name (defaults to config)
            loader: Callable turning a model name into a pipeline
                    (defaults to spacy.load)
        """
        from ..config import config

        self.models = dict(models or config.language.models)
        self._loader = loader
        self._pipelines: Dict[str, object] = {}

    def _load(self, language: str):
        """Return the cached pipeline for a language, loading it on first use."""
        code = (language or "").upper()
        if code not in self.models:
            raise ValidationError(f"Unsupported language: {language}")

        if code in self._pipelines:
            return self._pipelines[code]

        model_name = self.models[code]
        loader = self._loader
        if loader is None:
            import spacy
            loader = spacy.load

        try:
            nlp = loader(model_name)
        except OSError as e:
            raise ProcessingError(
                f"spaCy model '{model_name}' not found. "
                f"Run: python -m spacy download {model_name}"
            ) from e

        logger.info("Loaded spaCy model: %s", model_name)
        self._pipelines[code] = nlp
        return nlp

    def _doc(self, text: str, language: str):
        return self._load(language)(text)

    def tokenize(self, text: str, language: str) -> List[str]:
        return [t.text for t in self._doc(text, language) if not t.is_space]

    def lemmatize(self, text: str, language: str) -> List[Tuple[str, str]]:
        return [
            (t.text, t.lemma_)
            for t in self._doc(text, language)
            if not t.is_space
        ]

    def tag(self, text: str, language: str) -> List[Tuple[str, str, str]]:
        return [
            (t.text, t.pos_, t.tag_)
            for t in self._doc(text, language)
            if not t.is_space
        ]

    def entities(self, text: str, language: str) -> List[Tuple[str, str]]:
        return [(ent.text, ent.label_) for ent in self._doc(text, language).ents]

    def stop_words(self, language: str) -> Set[str]:
        """Stopword list shipped with the language's spaCy defaults."""
        return set(self._load(language).Defaults.stop_words)
