"""
Stage Orchestrator - Run pipeline stages over a project's artifacts.

Each stage:
1. Takes a Project and consumes the current head artifact of every seed
2. Writes a new artifact named after the head plus the stage suffix
3. Returns an updated Project (new heads, outputs and stats)

clean, normalize, tokenize and stopwords advance the heads. lemmatize,
tag and ner only export; their artifacts are never consumed again.
Dependent stages tokenize first when no tokenize pass has run yet.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from ..cleaners.cleaner import Cleaner
from ..cleaners.contractions import load_table
from ..errors import CrumblerError, ProjectStateError, ValidationError
from ..ingestors.validator import InputValidator
from ..processors.engine import NLPEngine
from ..processors.exporter import (
    Entities,
    ExportFormat,
    LemmaPairs,
    StageResult,
    TaggedTokens,
    Tokens,
    export,
    read_tokens,
)
from .artifacts import FILE_SUFFIXES, derive, normalize_suffix, parse_artifact
from .project import ProcessingStats, Project
from .stages import EXPORT_FORMATS, ProgressTracker, Stage, StageRequest, plan, total_units
from .workspace import ProjectWorkspace

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, str], None]


class StageOrchestrator:
    """
    Sequence stages over a project workspace.

    Usage:
        features = StageOrchestrator(engine=SpacyEngine())
        project = features.newproject("article.html")
        project = features.cleantext(project)
        project = features.tokenize(project, "EN")
        project = features.tagger(project, "EN")
    """

    def __init__(
        self,
        engine: Optional[NLPEngine] = None,
        cleaner: Optional[Cleaner] = None,
        validator: Optional[InputValidator] = None,
        workspace: Optional[ProjectWorkspace] = None
    ):
        """
        Initialize orchestrator.

        Args:
            engine: NLP engine, constructed once and reused (defaults to SpacyEngine)
            cleaner: Text cleaner
            validator: Input validator
            workspace: Workspace used by newproject()
        """
        if engine is None:
            from ..processors.engine import SpacyEngine
            engine = SpacyEngine()

        from ..config import config

        self.engine = engine
        self.cleaner = cleaner or Cleaner()
        self.validator = validator or InputValidator()
        self.workspace = workspace or ProjectWorkspace()
        self.languages = config.language

    # ============== Project ==============

    def newproject(self, input_ref: str, name: Optional[str] = None) -> Project:
        """
        Validate an input and create its project workspace.

        Validation failures raise before anything is written.

        Args:
            input_ref: File path, directory path or URL
            name: Project name (derived from the input when omitted)

        Returns:
            Seeded Project
        """
        report = self.validator.validate(input_ref)
        try:
            return self.workspace.create(report, name)
        except CrumblerError:
            raise
        except Exception as e:
            raise CrumblerError(f"Could not create project for {input_ref}: {e}") from e

    # ============== Stages ==============

    def cleantext(self, project: Project) -> Project:
        """Clean every head (suffix _cl)."""
        suffix = FILE_SUFFIXES[Stage.CLEAN]

        def step(head: Path) -> Tuple[Path, List[Path]]:
            target = derive(head, suffix)
            self._write(target, self.cleaner.clean(self._read(head)))
            return target, [target]

        return self._apply(project, Stage.CLEAN, step)

    def normalize(
        self,
        project: Project,
        contractions: bool = False,
        language: str = "EN",
        lowercase: bool = False
    ) -> Project:
        """Normalize every head (suffix _n, _nl, _nc or _nlc)."""
        language = self._check_language(language)
        if contractions:
            load_table(language)
        suffix = normalize_suffix(lowercase, contractions)

        def step(head: Path) -> Tuple[Path, List[Path]]:
            text = self.cleaner.normalize(
                self._read(head),
                contractions=contractions,
                language=language,
                lowercase=lowercase
            )
            target = derive(head, suffix)
            self._write(target, text)
            return target, [target]

        return self._apply(project, Stage.NORMALIZE, step)

    def tokenize(self, project: Project, language: str = "EN", only_pending: bool = False) -> Project:
        """
        Tokenize every head (suffix _tok), one token per line.

        Args:
            project: Project to process
            language: Language code
            only_pending: Skip heads that already hold tokens
        """
        language = self._check_language(language)
        suffix = FILE_SUFFIXES[Stage.TOKENIZE]

        def step(head: Path) -> Tuple[Optional[Path], List[Path]]:
            if only_pending and parse_artifact(head).is_tokenized:
                return None, []
            tokens = self.engine.tokenize(self._read(head), language)
            logger.info("%s: %d tokens", head.name, len(tokens))
            target = derive(head, suffix)
            self._write(target, export(Tokens(tuple(tokens)), ExportFormat.TEXT))
            return target, [target]

        return self._apply(project, Stage.TOKENIZE, step, tokenized=True)

    def stopwordsclean(self, project: Project, language: str = "EN") -> Project:
        """Drop stopwords from every tokenized head (suffix _nost)."""
        project = self._ensure_tokenized(project, language)
        language = self._check_language(language)
        stop_words = {w.lower() for w in self.engine.stop_words(language)}
        suffix = FILE_SUFFIXES[Stage.STOPWORDS]

        def step(head: Path) -> Tuple[Path, List[Path]]:
            tokens = [t for t in self._read_tokens(head) if t.lower() not in stop_words]
            target = derive(head, suffix)
            self._write(target, export(Tokens(tuple(tokens)), ExportFormat.TEXT))
            return target, [target]

        return self._apply(project, Stage.STOPWORDS, step)

    def lemmatizer(self, project: Project, language: str = "EN") -> Project:
        """Lemmatize every tokenized head (suffix _lem, text only)."""
        return self._annotate(
            project, Stage.LEMMATIZE, language,
            lambda text, lang: LemmaPairs(tuple(self.engine.lemmatize(text, lang)))
        )

    def tagger(self, project: Project, language: str = "EN") -> Project:
        """POS-tag every tokenized head (suffix _pos, txt/csv/xml)."""
        return self._annotate(
            project, Stage.TAG, language,
            lambda text, lang: TaggedTokens(tuple(self.engine.tag(text, lang)))
        )

    def ner(self, project: Project, language: str = "EN") -> Project:
        """Recognize named entities in every tokenized head (suffix _ner, txt/csv/xml)."""
        return self._annotate(
            project, Stage.NER, language,
            lambda text, lang: Entities(tuple(self.engine.entities(text, lang)))
        )

    # ============== Full run ==============

    def run(
        self,
        project: Project,
        request: StageRequest,
        on_progress: Optional[ProgressCallback] = None
    ) -> Project:
        """
        Run the requested stages in canonical order.

        Args:
            project: Project to process
            request: Requested stages and normalization options
            on_progress: Called with (percent, label) after every step

        Returns:
            Updated Project
        """
        self._check_language(request.language)
        steps = plan(request)
        tracker = ProgressTracker(total_units(steps), on_progress)
        language = request.language

        for planned in steps:
            stage = planned.stage
            logger.info("Running %s%s", stage.value, " (implicit)" if planned.implicit else "")

            if planned.implicit:
                project = self._ensure_tokenized(project, language)
            elif stage == Stage.CLEAN:
                project = self.cleantext(project)
            elif stage == Stage.NORMALIZE:
                project = self.normalize(
                    project,
                    contractions=request.contractions,
                    language=language,
                    lowercase=request.lowercase
                )
            elif stage == Stage.TOKENIZE:
                project = self.tokenize(project, language)
            elif stage == Stage.STOPWORDS:
                project = self.stopwordsclean(project, language)
            elif stage == Stage.LEMMATIZE:
                project = self.lemmatizer(project, language)
            elif stage == Stage.TAG:
                project = self.tagger(project, language)
            elif stage == Stage.NER:
                project = self.ner(project, language)

            tracker.advance(planned.cost, stage.value)

        logger.info("Pipeline finished for %s: %s", project.name, project.stats.summary())
        return project

    # ============== Internals ==============

    def _annotate(
        self,
        project: Project,
        stage: Stage,
        language: str,
        analyze: Callable[[str, str], StageResult]
    ) -> Project:
        """Run a terminal stage: export the analysis of each head's tokens."""
        project = self._ensure_tokenized(project, language)
        language = self._check_language(language)
        suffix = FILE_SUFFIXES[stage]

        def step(head: Path) -> Tuple[None, List[Path]]:
            # Tokens are re-joined so the model sees running text
            result = analyze(" ".join(self._read_tokens(head)), language)
            written = []
            for fmt in EXPORT_FORMATS[stage]:
                target = derive(head, suffix, fmt.extension)
                self._write(target, export(result, fmt))
                written.append(target)
            return None, written

        return self._apply(project, stage, step)

    def _ensure_tokenized(self, project: Project, language: str) -> Project:
        if project.tokenized:
            return project
        logger.debug("Tokenizing %s before dependent stage", project.name)
        return self.tokenize(project, language, only_pending=True)

    def _apply(
        self,
        project: Project,
        stage: Stage,
        step: Callable[[Path], Tuple[Optional[Path], List[Path]]],
        tokenized: Optional[bool] = None
    ) -> Project:
        """
        Run ``step`` on every head with per-file fault isolation.

        ``step`` returns the new head (None keeps the current one) and the
        paths it wrote.
        """
        self._require_directory(project)

        heads: Dict[str, Path] = {}
        written: List[Path] = []
        processed = failed = 0

        for seed_id, head in project.inputs():
            try:
                new_head, paths = step(head)
            except ValidationError:
                raise
            except Exception as e:
                logger.error("%s failed for %s: %s", stage.value, head.name, e)
                failed += 1
                continue

            if paths:
                processed += 1
                written.extend(paths)
                logger.debug("%s wrote %s", stage.value, ", ".join(p.name for p in paths))
            if new_head is not None:
                heads[seed_id] = new_head

        stats = ProcessingStats(processed=processed, failed=failed)
        project = project.advance(stage, tuple(written), heads, stats, tokenized)
        logger.info(
            "%s finished: %d processed, %d failed (project total: %s)",
            stage.value, processed, failed, project.stats.summary()
        )
        return project

    def _check_language(self, language: str) -> str:
        if not self.languages.is_supported(language):
            raise ValidationError(f"Unsupported language: {language}")
        return language.upper()

    @staticmethod
    def _require_directory(project: Project) -> None:
        if not Path(project.directory).is_dir():
            raise ProjectStateError(f"Project directory not found: {project.directory}")

    @staticmethod
    def _read(path: Path) -> str:
        return path.read_text(encoding="utf-8")

    @staticmethod
    def _read_tokens(path: Path) -> Tuple[str, ...]:
        return read_tokens(path.read_text(encoding="utf-8"))

    @staticmethod
    def _write(path: Path, payload: str) -> None:
        path.write_text(payload, encoding="utf-8")
