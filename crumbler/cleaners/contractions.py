"""
Contraction Tables - Language-keyed contraction expansion.

Tables live as JSON resources in ``crumbler/data`` and are applied in file
order. Every entry is applied, so later entries see text already rewritten
by earlier ones; reordering a table changes its output.

- EN entries: literal, case-sensitive substring substitution
- DE entries: substitution only where the surface form is bounded by
  non-word characters or the string edges
"""

import json
import re
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from typing import Dict, List, Pattern, Tuple

from ..errors import ValidationError

TABLE_FILES = {
    "EN": "contractions_en.json",
    "DE": "contractions_de.json",
}

# Languages whose entries only match on word boundaries
BOUNDED_LANGUAGES = {"DE"}


@dataclass(frozen=True)
class ContractionTable:
    """Ordered surface-form -> expansion mapping for one language."""
    language: str
    entries: Tuple[Tuple[str, str], ...]
    bounded: bool = False

    def __len__(self) -> int:
        return len(self.entries)

    def as_dict(self) -> Dict[str, str]:
        return dict(self.entries)

    def expand(self, text: str) -> str:
        """Apply every entry, in order, to ``text``."""
        if self.bounded:
            for pattern, expansion in self._patterns():
                text = pattern.sub(lambda _m, e=expansion: e, text)
        else:
            for surface, expansion in self.entries:
                text = text.replace(surface, expansion)
        return text

    def _patterns(self) -> List[Tuple[Pattern, str]]:
        return _compile_bounded(self.entries)


@lru_cache(maxsize=None)
def _compile_bounded(entries: Tuple[Tuple[str, str], ...]) -> List[Tuple[Pattern, str]]:
    return [
        (re.compile(r"(?<!\w)" + re.escape(surface) + r"(?!\w)"), expansion)
        for surface, expansion in entries
    ]


def read_table(raw: str) -> Tuple[Tuple[str, str], ...]:
    """Parse a JSON table, keeping entry order."""
    pairs = json.loads(raw, object_pairs_hook=list)
    return tuple((str(k), str(v)) for k, v in pairs)


@lru_cache(maxsize=None)
def load_table(language: str) -> ContractionTable:
    """
    Load the contraction table for a language code.

    Args:
        language: Language code (EN, DE), case-insensitive

    Returns:
        ContractionTable with entries in resource order
    """
    code = (language or "").upper()
    filename = TABLE_FILES.get(code)
    if filename is None:
        raise ValidationError(f"No contraction table for language: {language}")

    raw = resources.files("crumbler.data").joinpath(filename).read_text(encoding="utf-8")
    return ContractionTable(
        language=code,
        entries=read_table(raw),
        bounded=code in BOUNDED_LANGUAGES
    )


def expand_contractions(text: str, language: str = "EN") -> str:
    """Quick function to expand contractions with the language's table."""
    return load_table(language).expand(text)
