from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PdfText:
    """Text pulled from a PDF's embedded text layer."""

    text: str
    page_count: int | None = None


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> PdfText:
        """Extract plain text from PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            PdfText with the stripped page texts joined by newlines and the
            page count.

        Raises:
            PdfExtractionError: if the document cannot be parsed.
        """
