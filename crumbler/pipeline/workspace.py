"""
Project Workspace - Create and reopen project directories.

Create:
1. Pick a unique directory name (name, name1, name2, ...)
2. Create the directory before writing anything into it
3. Copy the source file(s) in and write one seed artifact per source

Reopen:
    Heads are rebuilt from the artifact names already on disk, so a
    workspace carries its own state between invocations.
"""

import logging
import shutil
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple
from urllib.parse import unquote, urlparse

from ..errors import ProjectStateError
from ..ingestors.fetcher import UrlFetcher
from ..ingestors.router import ContentIngestor
from ..ingestors.validator import InputKind, ValidationReport
from .artifacts import SEED_EXTENSION, parse_artifact, source_name
from .project import ProcessingStats, Project

logger = logging.getLogger(__name__)


def unique_directory(parent: Path, name: str) -> Path:
    """First of name, name1, name2, ... that does not exist below parent."""
    candidate = parent / name
    counter = 1
    while candidate.exists():
        candidate = parent / f"{name}{counter}"
        counter += 1
    return candidate


def default_project_name(report: ValidationReport) -> str:
    """File stem, ``<dir>_process`` for directories, URL basename or host for URLs."""
    if report.kind == InputKind.FILE:
        return Path(report.source).stem
    if report.kind == InputKind.DIRECTORY:
        return f"{Path(report.source).resolve().name}_process"
    return Path(url_seed_name(report.source)).stem


def url_seed_name(url: str) -> str:
    """Seed file name for a URL: basename without extension, else the host, plus .txt."""
    parsed = urlparse(url)
    stem = Path(unquote(parsed.path.rstrip("/"))).stem
    if not stem:
        stem = parsed.hostname or "index"
    return source_name(f"{stem}.{SEED_EXTENSION}")


class ProjectWorkspace:
    """
    Project directory lifecycle.

    Usage:
        workspace = ProjectWorkspace("output")
        project = workspace.create(InputValidator().validate("doc.html"), "doc")
    """

    def __init__(
        self,
        output_directory: Optional[str] = None,
        ingestor: Optional[ContentIngestor] = None,
        fetcher: Optional[UrlFetcher] = None
    ):
        """
        Initialize workspace.

        Args:
            output_directory: Parent directory of all projects (defaults to config)
            ingestor: ContentIngestor used to extract seed text
            fetcher: UrlFetcher used for URL inputs
        """
        from ..config import config

        self.output_directory = Path(output_directory or config.output.output_directory)
        self.ingestor = ingestor or ContentIngestor()
        self.fetcher = fetcher or UrlFetcher()

    def create(self, report: ValidationReport, name: Optional[str] = None) -> Project:
        """
        Create a project directory and seed it from a validated input.

        Args:
            report: Result of InputValidator.validate()
            name: Project name (derived from the input when omitted)

        Returns:
            Project with one head per seed artifact
        """
        name = name or default_project_name(report)
        directory = unique_directory(self.output_directory, name)
        directory.mkdir(parents=True)
        logger.info("Created project directory %s", directory)

        if report.kind == InputKind.FILE:
            heads, stats = self._seed_file(Path(report.source).expanduser(), directory)
        elif report.kind == InputKind.DIRECTORY:
            heads, stats = self._seed_directory(report, directory)
        else:
            heads, stats = self._seed_url(report.source, directory)

        logger.info("Project %s seeded: %s", directory.name, stats.summary())
        return Project(
            name=directory.name,
            directory=directory,
            seed_file_count=len(heads),
            stats=stats,
            heads=heads
        )

    def open(self, directory) -> Project:
        """
        Rebuild a Project from an existing workspace directory.

        Each seed's head is its longest non-terminal suffix chain; the
        modification time only breaks ties.
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise ProjectStateError(f"Project directory not found: {directory}")

        best: Dict[str, Tuple[int, float, Path]] = {}
        for path in sorted(directory.rglob(f"*.{SEED_EXTENSION}")):
            if not path.is_file():
                continue
            name = parse_artifact(path)
            if name.is_terminal:
                continue
            seed_id = (path.parent.relative_to(directory) / name.seed_name).as_posix()
            rank = (len(name.chain), path.stat().st_mtime, path)
            if seed_id not in best or rank[:2] > best[seed_id][:2]:
                best[seed_id] = rank

        heads = {seed_id: rank[2] for seed_id, rank in best.items()}
        if not heads:
            raise ProjectStateError(f"No artifacts found in project directory: {directory}")

        logger.info("Opened project %s with %d seed(s)", directory.name, len(heads))
        return Project(
            name=directory.name,
            directory=directory,
            seed_file_count=len(heads),
            heads=heads
        )

    def _seed_file(self, source: Path, directory: Path) -> Tuple[Dict[str, Path], ProcessingStats]:
        # Errors propagate for single files
        copy = directory / source_name(source.name)
        shutil.copy2(source, copy)
        seed = self._seed_path(copy, {copy})
        self._write_seed(copy, seed)
        return {self._seed_id(seed, directory): seed}, ProcessingStats(processed=1)

    def _seed_directory(
        self,
        report: ValidationReport,
        directory: Path
    ) -> Tuple[Dict[str, Path], ProcessingStats]:
        root = Path(report.source).expanduser()
        copies = self._copy_tree(report.files, root, directory)

        heads = {}
        processed = failed = 0
        taken: Set[Path] = set(copies)
        for copy in copies:
            seed = self._seed_path(copy, taken)
            taken.add(seed)
            try:
                self._write_seed(copy, seed)
            except Exception as e:
                logger.error("Failed to ingest %s: %s", copy.name, e)
                failed += 1
                continue
            heads[self._seed_id(seed, directory)] = seed
            processed += 1

        return heads, ProcessingStats(
            processed=processed,
            failed=failed,
            warnings=report.warnings
        )

    def _seed_url(self, url: str, directory: Path) -> Tuple[Dict[str, Path], ProcessingStats]:
        seed = directory / url_seed_name(url)
        try:
            page = self.fetcher.fetch(url)
            routed = self.ingestor.route_bytes(page.content, url, page.encoding)
            seed.write_text(routed.text, encoding="utf-8")
        except Exception as e:
            logger.error("Failed to ingest %s: %s", url, e)
            return {}, ProcessingStats(failed=1)

        logger.info("Wrote %s", seed.name)
        return {self._seed_id(seed, directory): seed}, ProcessingStats(processed=1)

    def _copy_tree(self, files: Iterable[Path], root: Path, directory: Path) -> List[Path]:
        """Copy files below directory, keeping their paths relative to root."""
        copies = []
        for source in files:
            relative = Path(source).relative_to(root)
            target = directory / relative.parent / source_name(relative.name)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)
            copies.append(target)
        return copies

    def _seed_path(self, copy: Path, taken: Set[Path]) -> Path:
        """
        Seed artifact for a copied source.

        A .txt source is its own seed; other sources get ``<stem>.txt``, or
        ``<stem>_<ext>.txt`` when that name already belongs to another file.
        """
        if copy.suffix == f".{SEED_EXTENSION}":
            return copy
        seed = copy.with_suffix(f".{SEED_EXTENSION}")
        if seed in taken:
            seed = copy.with_name(f"{copy.stem}_{copy.suffix.lstrip('.').lower()}.{SEED_EXTENSION}")
        return seed

    def _write_seed(self, copy: Path, seed: Path) -> None:
        routed = self.ingestor.route(copy)
        if not routed.text.strip():
            logger.warning("No text extracted from %s", copy.name)
        seed.write_text(routed.text, encoding="utf-8")
        logger.info("Wrote %s", seed.name)

    @staticmethod
    def _seed_id(seed: Path, directory: Path) -> str:
        return seed.relative_to(directory).as_posix()
