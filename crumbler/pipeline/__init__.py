"""
Project pipeline.

- ProjectWorkspace: project directories and seed artifacts
- StageOrchestrator: stage sequencing over a project's artifacts
- StageRequest / plan / ProgressTracker: stage selection and progress units
- Artifact naming helpers
"""

from .stages import (
    Stage,
    StageRequest,
    PlannedStep,
    ProgressTracker,
    DEPENDENT_STAGES,
    TERMINAL_STAGES,
    EXPORT_FORMATS,
    plan,
    total_units,
)
from .artifacts import FILE_SUFFIXES, ArtifactName, artifact_name, normalize_suffix, parse_artifact
from .project import Project, ProcessingStats
from .workspace import ProjectWorkspace
from .features import StageOrchestrator

__all__ = [
    # Stages
    "Stage",
    "StageRequest",
    "PlannedStep",
    "ProgressTracker",
    "DEPENDENT_STAGES",
    "TERMINAL_STAGES",
    "EXPORT_FORMATS",
    "plan",
    "total_units",
    # Artifacts
    "FILE_SUFFIXES",
    "ArtifactName",
    "artifact_name",
    "normalize_suffix",
    "parse_artifact",
    # Project
    "Project",
    "ProcessingStats",
    "ProjectWorkspace",
    "StageOrchestrator",
]
