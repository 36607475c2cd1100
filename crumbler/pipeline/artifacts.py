"""
Artifact naming.

An artifact is named ``<stem>_<suffix>.<ext>`` where ``<stem>`` is the name
of the artifact it was produced from, so the chain of suffixes records every
stage applied since the seed:

    test.txt -> test_cl.txt -> test_cl_nl.txt -> test_cl_nl_tok.txt
             -> test_cl_nl_tok_pos.csv
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .stages import Stage, TERMINAL_STAGES

FILE_SUFFIXES = {
    Stage.CLEAN: "cl",
    Stage.NORMALIZE: "n",
    Stage.TOKENIZE: "tok",
    Stage.STOPWORDS: "nost",
    Stage.LEMMATIZE: "lem",
    Stage.TAG: "pos",
    Stage.NER: "ner",
}

SEED_EXTENSION = "txt"

_NORMALIZE_SUFFIX = re.compile(r"^nl?c?$")
_BY_SUFFIX = {suffix: stage for stage, suffix in FILE_SUFFIXES.items()}


def normalize_suffix(lowercase: bool = False, contractions: bool = False) -> str:
    """``n``, plus ``l`` when lowercased, plus ``c`` when contractions were expanded."""
    return "n" + ("l" if lowercase else "") + ("c" if contractions else "")


def stage_for_suffix(suffix: str) -> Optional[Stage]:
    """Stage a suffix belongs to, or None for ordinary name parts."""
    if _NORMALIZE_SUFFIX.match(suffix):
        return Stage.NORMALIZE
    return _BY_SUFFIX.get(suffix)


def artifact_name(stem: str, suffix: str, extension: str = SEED_EXTENSION) -> str:
    return f"{stem}_{suffix}.{extension}"


def derive(source: Path, suffix: str, extension: str = SEED_EXTENSION) -> Path:
    """Path of the artifact a stage writes when consuming ``source``."""
    return source.with_name(artifact_name(source.stem, suffix, extension))


@dataclass(frozen=True)
class ArtifactName:
    """Parsed artifact file name."""
    base: str
    chain: Tuple[str, ...]
    extension: str

    @property
    def stages(self) -> Tuple[Stage, ...]:
        return tuple(stage_for_suffix(s) for s in self.chain)

    @property
    def last_stage(self) -> Optional[Stage]:
        return stage_for_suffix(self.chain[-1]) if self.chain else None

    @property
    def is_seed(self) -> bool:
        return not self.chain

    @property
    def is_terminal(self) -> bool:
        return self.last_stage in TERMINAL_STAGES

    @property
    def is_tokenized(self) -> bool:
        return self.last_stage in (Stage.TOKENIZE, Stage.STOPWORDS)

    @property
    def seed_name(self) -> str:
        return f"{self.base}.{SEED_EXTENSION}"


def parse_artifact(path) -> ArtifactName:
    """
    Split a file name into base name and suffix chain.

    Trailing ``_part`` segments are consumed while they are known suffixes;
    the first unknown segment ends the chain.
    """
    path = Path(path)
    parts = path.stem.split("_")
    chain = []
    while len(parts) > 1 and stage_for_suffix(parts[-1]) is not None:
        chain.insert(0, parts.pop())
    return ArtifactName(
        base="_".join(parts),
        chain=tuple(chain),
        extension=path.suffix.lstrip(".")
    )


def source_name(filename: str) -> str:
    """
    Workspace name for an ingested source file.

    A source whose stem already ends in stage suffixes (``report_cl.txt``)
    would collide with the artifacts of another seed, so ``_src`` is
    appended to its stem.
    """
    path = Path(filename)
    if parse_artifact(path).chain:
        return f"{path.stem}_src{path.suffix}"
    return path.name
