class ExtractionError(Exception):
    """Base exception for all text extraction errors."""


class ExtractionTimeoutError(ExtractionError):
    """Raised when a bounded operation does not finish in time."""


class BatchUnusableError(ExtractionError):
    """Raised when no file in a batch produced usable text."""
