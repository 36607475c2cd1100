"""
Stage selection, planning and progress accounting.

A StageRequest is what an interactive surface (the CLI) produces; plan()
turns it into ordered steps with their cost in progress units, including
the implicit tokenize step inserted before every dependent stage when
tokenization was not requested.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, FrozenSet, Iterable, List, Optional, Tuple

from ..processors.exporter import ExportFormat


class Stage(Enum):
    """Pipeline stages, declared in canonical execution order."""
    CLEAN = "clean"
    NORMALIZE = "normalize"
    TOKENIZE = "tokenize"
    STOPWORDS = "stopwords"
    LEMMATIZE = "lemmatize"
    TAG = "tag"
    NER = "ner"


# Stages that need tokenized input
DEPENDENT_STAGES = frozenset({Stage.STOPWORDS, Stage.LEMMATIZE, Stage.TAG, Stage.NER})

# Stages whose outputs never become the input of a later stage
TERMINAL_STAGES = frozenset({Stage.LEMMATIZE, Stage.TAG, Stage.NER})

EXPORT_FORMATS = {
    Stage.LEMMATIZE: (ExportFormat.TEXT,),
    Stage.TAG: (ExportFormat.TEXT, ExportFormat.CSV, ExportFormat.XML),
    Stage.NER: (ExportFormat.TEXT, ExportFormat.CSV, ExportFormat.XML),
}


@dataclass(frozen=True)
class StageRequest:
    """
    Explicit set of requested stages plus normalization options.

    Requesting lowercase or contractions implies normalization.
    """
    stages: FrozenSet[Stage] = frozenset()
    lowercase: bool = False
    contractions: bool = False
    language: str = "EN"

    def __post_init__(self):
        stages = frozenset(self.stages)
        if self.lowercase or self.contractions:
            stages = stages | {Stage.NORMALIZE}
        object.__setattr__(self, "stages", stages)
        object.__setattr__(self, "language", (self.language or "").upper())

    @classmethod
    def everything(cls, language: str = "EN", lowercase: bool = False,
                   contractions: bool = False) -> "StageRequest":
        """Request every stage."""
        return cls(frozenset(Stage), lowercase, contractions, language)

    def __contains__(self, stage: Stage) -> bool:
        return stage in self.stages

    @property
    def ordered(self) -> List[Stage]:
        return [stage for stage in Stage if stage in self.stages]


@dataclass(frozen=True)
class PlannedStep:
    """One executable step of a plan."""
    stage: Stage
    cost: int = 1
    implicit: bool = False


def stage_cost(stage: Stage, request: StageRequest) -> int:
    """Normalization costs one unit per applied option, everything else one."""
    if stage == Stage.NORMALIZE:
        return 1 + int(request.lowercase) + int(request.contractions)
    return 1


def plan(request: StageRequest) -> List[PlannedStep]:
    """
    Order the requested stages and insert implicit tokenize steps.

    When tokenize is not requested, every dependent stage is preceded by
    an implicit tokenize step worth one unit, so it costs two in total.
    """
    steps = []
    for stage in request.ordered:
        if stage in DEPENDENT_STAGES and Stage.TOKENIZE not in request:
            steps.append(PlannedStep(Stage.TOKENIZE, cost=1, implicit=True))
        steps.append(PlannedStep(stage, cost=stage_cost(stage, request)))
    return steps


def total_units(steps: Iterable[PlannedStep]) -> int:
    return sum(step.cost for step in steps)


def percent(done: int, total: int) -> int:
    """Completed share in whole percent, rounded half up, clamped to 100."""
    if total <= 0:
        return 100
    return min(100, math.floor(done * 100 / total + 0.5))


@dataclass
class ProgressTracker:
    """
    Count completed units and report a percentage.

    The callback receives (percent, label) after every advance; it is the
    only channel through which progress leaves the pipeline.
    """
    total: int
    callback: Optional[Callable[[int, str], None]] = None
    done: int = 0
    history: List[Tuple[int, str]] = field(default_factory=list)

    @property
    def percent(self) -> int:
        return percent(self.done, self.total)

    def advance(self, units: int = 1, label: str = "") -> int:
        self.done += units
        value = self.percent
        self.history.append((value, label))
        if self.callback:
            self.callback(value, label)
        return value
