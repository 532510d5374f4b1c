class OcrExtractionError(Exception):
    """Raised when the OCR engine fails or recognizes no text."""
