"""
Input Validator - Classify and validate an input reference.

An input is one of:
- an existing regular file (allow-listed extension, non-empty, within size limit)
- an existing directory (at least one allow-listed file; bad members are warnings)
- an HTTP/HTTPS URL

Validation has no side effects beyond raising.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

from ..errors import InputNotFoundError, ValidationError

logger = logging.getLogger(__name__)


class InputKind(Enum):
    """Supported input kinds."""
    FILE = "file"
    DIRECTORY = "directory"
    URL = "url"


@dataclass
class ValidationReport:
    """Result of validating an input reference."""
    kind: InputKind
    source: str
    files: List[Path] = field(default_factory=list)
    rejected: List[Path] = field(default_factory=list)

    @property
    def warnings(self) -> int:
        """Directory members that failed file-level checks."""
        return len(self.rejected)


class InputValidator:
    """
    Validate file, directory and URL inputs against size and extension rules.

    Usage:
        validator = InputValidator()
        report = validator.validate("corpus/")
        print(report.kind, len(report.files), report.warnings)
    """

    URL_SCHEMES = {"http", "https"}

    def __init__(self, config=None):
        """
        Initialize with optional input configuration.

        Args:
            config: InputConfig (defaults to global config)
        """
        from ..config import config as default_config
        self.config = config or default_config.input
        self._extensions = {ext.lower() for ext in self.config.supported_extensions}

    def validate(self, input_ref: Optional[str]) -> ValidationReport:
        """
        Classify and validate an input reference.

        Args:
            input_ref: File path, directory path or URL

        Returns:
            ValidationReport describing the input
        """
        if input_ref is None or not str(input_ref).strip():
            raise ValidationError("Input cannot be empty")

        input_ref = str(input_ref).strip()
        path = Path(input_ref).expanduser()

        if path.is_file():
            self.check_file(path)
            return ValidationReport(kind=InputKind.FILE, source=input_ref, files=[path])

        if path.is_dir():
            return self._validate_directory(path, input_ref)

        return self._validate_url(input_ref)

    def is_supported(self, path: Path) -> bool:
        """Check the extension against the allow-list (case-insensitive)."""
        return path.suffix.lower() in self._extensions

    def check_file(self, path: Path) -> None:
        """
        Raise if a single file fails the file-level checks.

        Args:
            path: File to check
        """
        if not path.exists():
            raise InputNotFoundError(f"File not found: {path}")

        if not self.is_supported(path):
            raise ValidationError(f"Unsupported file type: {path.suffix or '(none)'}")

        size = path.stat().st_size
        if size > self.config.max_file_size:
            raise ValidationError(
                f"File too large: {size} bytes (max: {self.config.max_file_size})"
            )

        if size == 0:
            raise ValidationError(f"File is empty: {path}")

    def is_valid_file(self, path: Path) -> bool:
        """Non-raising variant of check_file()."""
        try:
            self.check_file(path)
        except (ValidationError, InputNotFoundError):
            return False
        return True

    def scan_directory(self, directory: Path) -> List[Path]:
        """
        Find allow-listed files below a directory, recursively.

        Args:
            directory: Directory to scan

        Returns:
            Sorted list of matching file paths
        """
        return sorted(
            p for p in directory.rglob("*")
            if p.is_file() and self.is_supported(p)
        )

    def _validate_directory(self, directory: Path, source: str) -> ValidationReport:
        candidates = self.scan_directory(directory)
        if not candidates:
            raise ValidationError(f"No supported files found in directory: {directory}")

        valid = [p for p in candidates if self.is_valid_file(p)]
        rejected = [p for p in candidates if p not in valid]

        if rejected:
            logger.warning(
                "Invalid files found: %s", ", ".join(str(p) for p in rejected)
            )
        if not valid:
            raise ValidationError(f"No valid files found in directory: {directory}")

        return ValidationReport(
            kind=InputKind.DIRECTORY,
            source=source,
            files=valid,
            rejected=rejected
        )

    def _validate_url(self, input_ref: str) -> ValidationReport:
        parsed = urlparse(input_ref)

        if parsed.scheme.lower() in self.URL_SCHEMES:
            if not parsed.hostname or any(c.isspace() for c in parsed.netloc):
                raise ValidationError(f"Invalid URL format: {input_ref}")
            return ValidationReport(kind=InputKind.URL, source=input_ref)

        if not parsed.scheme and self._looks_like_path(input_ref):
            raise InputNotFoundError(f"File not found: {input_ref}")

        raise ValidationError(f"Invalid input: {input_ref}")

    def _looks_like_path(self, input_ref: str) -> bool:
        """Heuristic: separators or a known extension mean a filesystem path."""
        if os.sep in input_ref or "/" in input_ref:
            return True
        return self.is_supported(Path(input_ref))
