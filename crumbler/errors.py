"""
Error types raised by the Crumbler pipeline.

- CrumblerError: unexpected or unclassified failure
- ValidationError: bad input shape, size, extension or language
- InputNotFoundError: referenced path does not exist
- ProcessingError: failure during ingestion or transformation
- ProjectStateError: stage invoked without a usable project directory
"""


class CrumblerError(Exception):
    """Base class for every error raised by the pipeline."""


class ValidationError(CrumblerError):
    """Input rejected before any side effect took place."""


class InputNotFoundError(CrumblerError, FileNotFoundError):
    """A referenced file or directory does not exist."""


class ProcessingError(CrumblerError):
    """Ingestion or transformation of a single item failed."""


class UnsupportedContentError(ProcessingError):
    """Accepted file type whose content cannot be extracted here (audio)."""


class ProjectStateError(CrumblerError):
    """Project directory is missing or was never created."""
