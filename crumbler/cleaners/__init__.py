"""
Text cleaning modules for the Crumbler pipeline.

- Cleaner: clean / normalize / process (pure text functions)
- ContractionTable: ordered, language-keyed contraction expansion
"""

from .cleaner import Cleaner, NORMALIZE_PUNCTUATION
from .contractions import ContractionTable, load_table, expand_contractions

__all__ = [
    "Cleaner",
    "NORMALIZE_PUNCTUATION",
    "ContractionTable",
    "load_table",
    "expand_contractions",
]
