"""
Processing modules for the Crumbler pipeline.

- NLPEngine / SpacyEngine: tokens, lemmas, POS tags and entities
- Exporter: stage results to text, CSV and XML
"""

from .engine import NLPEngine, SpacyEngine
from .exporter import (
    ExportFormat,
    Tokens,
    LemmaPairs,
    TaggedTokens,
    Entities,
    StageResult,
    export,
    export_all,
    read_tokens,
)

__all__ = [
    # Engine
    "NLPEngine",
    "SpacyEngine",
    # Results
    "Tokens",
    "LemmaPairs",
    "TaggedTokens",
    "Entities",
    "StageResult",
    # Export
    "ExportFormat",
    "export",
    "export_all",
    "read_tokens",
]
