"""
Ingestors Module - Input validation and text extraction.

Supports:
- Input classification and validation (file / directory / URL)
- Markup and plain-text paragraph extraction
- PDF extraction
- URL fetching
"""

from .validator import InputValidator, InputKind, ValidationReport
from .router import ContentIngestor, InputType, RoutedInput
from .pdf_ingestor import PDFIngestor
from .fetcher import UrlFetcher, FetchedPage

__all__ = [
    "InputValidator",
    "InputKind",
    "ValidationReport",
    "ContentIngestor",
    "InputType",
    "RoutedInput",
    "PDFIngestor",
    "UrlFetcher",
    "FetchedPage",
]
