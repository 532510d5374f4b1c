class PdfExtractionError(Exception):
    """Raised when a PDF cannot be parsed for text."""


class PdfRenderError(Exception):
    """Raised when PDF pages cannot be rasterised."""
