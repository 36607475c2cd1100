"""
PDF Ingestor - Extract page text from PDF documents.

Uses pypdf for text extraction.
"""

import io
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Union

import pypdf
from pypdf.errors import PyPdfError

from ..errors import InputNotFoundError, ProcessingError


@dataclass
class PDFPage:
    """Represents a single PDF page."""
    page_number: int
    text: str


@dataclass
class PDFResult:
    """Result of PDF extraction."""
    pages: List[PDFPage]
    metadata: Dict[str, Any]

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def paragraphs(self) -> List[str]:
        """Non-empty page texts, one paragraph per page."""
        return [page.text for page in self.pages if page.text]


class PDFIngestor:
    """
    PDF text extraction.

    Usage:
        ingestor = PDFIngestor()
        result = ingestor.extract("document.pdf")
        print(result.paragraphs)
    """

    def extract(self, source: Union[str, Path, bytes]) -> PDFResult:
        """
        Extract text from a PDF file or PDF bytes.

        Args:
            source: Path to PDF file, or the raw PDF bytes

        Returns:
            PDFResult with per-page text and metadata
        """
        if isinstance(source, bytes):
            return self._read(io.BytesIO(source))

        path = Path(source)
        if not path.exists():
            raise InputNotFoundError(f"PDF file not found: {source}")

        with open(path, "rb") as f:
            return self._read(f)

    def _read(self, stream) -> PDFResult:
        try:
            reader = pypdf.PdfReader(stream)
            pages = [
                PDFPage(page_number=i + 1, text=self._clean_text(page.extract_text() or ""))
                for i, page in enumerate(reader.pages)
            ]
            metadata = self._extract_metadata(reader)
        except PyPdfError as e:
            raise ProcessingError(f"Failed to read PDF: {e}") from e

        return PDFResult(pages=pages, metadata=metadata)

    def _extract_metadata(self, reader) -> Dict[str, Any]:
        """Extract PDF metadata."""
        meta = reader.metadata or {}
        return {
            "title": meta.get("/Title", ""),
            "author": meta.get("/Author", ""),
            "page_count": len(reader.pages),
        }

    def _clean_text(self, text: str) -> str:
        """Clean extracted text."""
        text = re.sub(r'\s+', ' ', text)  # Collapse whitespace
        text = re.sub(r'(\w)-\s+(\w)', r'\1\2', text)  # Fix hyphenation
        return text.strip()
