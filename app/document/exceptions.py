class DocumentExtractionError(Exception):
    """Raised when a word-processor document cannot be read."""
