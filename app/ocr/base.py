from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class OcrOptions:
    """Recognition knobs passed through to the OCR engine."""

    language: str = "eng"
    page_segmentation_mode: int = 6
    engine_mode: int = 1


class BaseOcrEngine(ABC):
    """Contract for OCR engine adapters."""

    @abstractmethod
    def recognize(self, image_bytes: bytes, options: OcrOptions) -> str:
        """Recognize text in an encoded image.

        Raises:
            OcrExtractionError: if the engine cannot process the image.
        """
