"""
Content Ingestor - File type detection and visible-text extraction.

Routes an input to the matching extractor:
- markup / plain text (.txt .html .xml .md .markdown) -> BeautifulSoup paragraphs
- PDF -> pypdf page text
- audio (.mp3 .wav) -> accepted, but extraction is left to external tooling
"""

import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from bs4 import BeautifulSoup, UnicodeDammit

from ..errors import InputNotFoundError, ProcessingError, UnsupportedContentError


class InputType(Enum):
    """Content types the ingestor distinguishes."""
    MARKUP = "markup"
    PDF = "pdf"
    AUDIO = "audio"
    UNKNOWN = "unknown"


@dataclass
class RoutedInput:
    """Result of routing an input."""
    input_type: InputType
    paragraphs: List[str]
    source: str
    metadata: dict = field(default_factory=dict)

    @property
    def text(self) -> str:
        """Paragraphs joined one per line."""
        return "\n".join(self.paragraphs)


class ContentIngestor:
    """
    Extract plain-text paragraphs from files, bytes or fetched pages.

    Usage:
        ingestor = ContentIngestor()
        result = ingestor.route("page.html")
        print(result.text)
    """

    # Elements whose text never counts as visible content
    INVISIBLE_TAGS = ["script", "style", "noscript", "head", "title"]

    def __init__(self, config=None):
        """
        Initialize ingestor.

        Args:
            config: InputConfig (defaults to global config)
        """
        from ..config import config as default_config
        self.config = config or default_config.input

    def detect_type(self, file_path: Union[str, Path]) -> InputType:
        """
        Detect the type of input file.

        Args:
            file_path: Path to file

        Returns:
            InputType enum value
        """
        ext = Path(file_path).suffix.lower()

        if ext in self.config.pdf_extensions:
            return InputType.PDF
        elif ext in self.config.audio_extensions:
            return InputType.AUDIO
        elif ext in self.config.markup_extensions:
            return InputType.MARKUP
        else:
            mime, _ = mimetypes.guess_type(str(file_path))
            if mime:
                if mime == "application/pdf":
                    return InputType.PDF
                elif mime.startswith("audio/"):
                    return InputType.AUDIO
                elif mime.startswith("text/"):
                    return InputType.MARKUP

            return InputType.UNKNOWN

    def decode(self, content: bytes, declared_encoding: Optional[str] = None) -> str:
        """
        Decode source bytes, falling back through the configured encodings.

        Args:
            content: Raw bytes
            declared_encoding: Encoding announced by the source, tried after UTF-8

        Returns:
            Decoded text
        """
        # UTF-8 stays first: transports often declare ISO-8859-1 by default
        candidates = list(self.config.fallback_encodings)
        if declared_encoding and declared_encoding.lower() not in (c.lower() for c in candidates):
            candidates.insert(1, declared_encoding)

        dammit = UnicodeDammit(content, candidates)
        if dammit.unicode_markup is None:
            raise ProcessingError("Unable to determine text encoding")
        return dammit.unicode_markup

    def extract_text(
        self,
        markup: Union[bytes, str],
        include_text_elements: bool = False
    ) -> List[str]:
        """
        Extract paragraph texts from an HTML/markup payload.

        Payloads without paragraph elements (plain text, Markdown, bare XML)
        yield their whole visible text as a single paragraph.

        Args:
            markup: Markup bytes or already-decoded text
            include_text_elements: Also collect <text> elements (web pages)

        Returns:
            List of paragraph strings
        """
        if isinstance(markup, bytes):
            markup = self.decode(markup)

        soup = BeautifulSoup(markup, "html.parser")
        for tag in soup(self.INVISIBLE_TAGS):
            tag.extract()

        names = ["p", "text"] if include_text_elements else ["p"]
        paragraphs = [el.get_text() for el in soup.find_all(names)]
        paragraphs = [p for p in paragraphs if p.strip()]

        if not paragraphs:
            text = soup.get_text()
            paragraphs = [text] if text.strip() else []

        return paragraphs

    def route(self, file_path: Union[str, Path]) -> RoutedInput:
        """
        Route a file to the appropriate extractor.

        Args:
            file_path: Path to file

        Returns:
            RoutedInput with extracted paragraphs
        """
        path = Path(file_path)
        if not path.exists():
            raise InputNotFoundError(f"File not found: {file_path}")

        input_type = self.detect_type(path)

        if input_type == InputType.PDF:
            return self._process_pdf(path)
        elif input_type == InputType.AUDIO:
            raise UnsupportedContentError(
                f"Audio content extraction is not available: {path.name}"
            )
        else:
            # Unknown types are tried as text
            return self._process_markup(path.read_bytes(), str(path))

    def route_bytes(
        self,
        content: bytes,
        source: str,
        encoding: Optional[str] = None,
        from_url: bool = True
    ) -> RoutedInput:
        """
        Route a fetched payload (web page) to the markup extractor.

        Args:
            content: Payload bytes
            source: URL or filename the payload came from
            encoding: Encoding declared by the transport
            from_url: Collect <text> elements as well as paragraphs

        Returns:
            RoutedInput with extracted paragraphs
        """
        if content[:4] == b"%PDF":
            from .pdf_ingestor import PDFIngestor

            result = PDFIngestor().extract(content)
            return RoutedInput(
                input_type=InputType.PDF,
                paragraphs=result.paragraphs,
                source=source,
                metadata=result.metadata
            )

        text = self.decode(content, encoding)
        return RoutedInput(
            input_type=InputType.MARKUP,
            paragraphs=self.extract_text(text, include_text_elements=from_url),
            source=source,
            metadata={"url": source} if from_url else {}
        )

    def _process_markup(self, content: bytes, source: str) -> RoutedInput:
        """Process markup or plain text file."""
        return RoutedInput(
            input_type=InputType.MARKUP,
            paragraphs=self.extract_text(content),
            source=source,
            metadata={"file_path": source}
        )

    def _process_pdf(self, path: Path) -> RoutedInput:
        """Process PDF file."""
        from .pdf_ingestor import PDFIngestor

        result = PDFIngestor().extract(path)
        return RoutedInput(
            input_type=InputType.PDF,
            paragraphs=result.paragraphs,
            source=str(path),
            metadata={"file_path": str(path), **result.metadata}
        )
