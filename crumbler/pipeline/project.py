"""
Project context passed through every stage.

Stages never mutate a Project; they return an updated copy.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Tuple

from .stages import Stage


@dataclass(frozen=True)
class ProcessingStats:
    """Processed / failed / warning counters. Counts only ever grow."""
    processed: int = 0
    failed: int = 0
    warnings: int = 0

    def add(self, processed: int = 0, failed: int = 0, warnings: int = 0) -> "ProcessingStats":
        if min(processed, failed, warnings) < 0:
            raise ValueError("Processing counts cannot decrease")
        return ProcessingStats(
            processed=self.processed + processed,
            failed=self.failed + failed,
            warnings=self.warnings + warnings
        )

    def __add__(self, other: "ProcessingStats") -> "ProcessingStats":
        return self.add(other.processed, other.failed, other.warnings)

    def summary(self) -> str:
        return f"{self.processed} processed, {self.failed} failed, {self.warnings} warnings"


@dataclass(frozen=True)
class Project:
    """
    One workspace and its pipeline state.

    Attributes:
        name: Project name (directory name)
        directory: Workspace directory
        seed_file_count: Number of seed artifacts created at ingestion
        stats: Accumulated processing counters
        heads: Seed id -> latest text-bearing artifact for that seed
        outputs: Stage -> paths written by the most recent run of the stage
        tokenized: Whether a tokenize pass has run in this session
    """
    name: str
    directory: Path
    seed_file_count: int = 0
    stats: ProcessingStats = field(default_factory=ProcessingStats)
    heads: Dict[str, Path] = field(default_factory=dict)
    outputs: Dict[Stage, Tuple[Path, ...]] = field(default_factory=dict)
    tokenized: bool = False

    def inputs(self) -> List[Tuple[str, Path]]:
        """Current heads in seed order, at most seed_file_count of them."""
        return sorted(self.heads.items())[:self.seed_file_count]

    def advance(
        self,
        stage: Stage,
        written: Tuple[Path, ...],
        heads: Dict[str, Path],
        stats: ProcessingStats,
        tokenized: bool = None
    ) -> "Project":
        """Record the result of one stage call."""
        outputs = dict(self.outputs)
        outputs[stage] = tuple(written)
        return replace(
            self,
            heads={**self.heads, **heads},
            outputs=outputs,
            stats=self.stats + stats,
            tokenized=self.tokenized if tokenized is None else tokenized
        )
