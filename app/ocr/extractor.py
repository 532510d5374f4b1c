from app.extraction.bounded import Deadline, run_with_timeout
from app.extraction.exceptions import ExtractionTimeoutError
from app.logging.logger import Log
from app.ocr.base import BaseOcrEngine, OcrOptions
from app.ocr.exceptions import OcrExtractionError
from app.ocr.preprocessor import ImagePreprocessor
from app.pdf.renderer import PdfPageRenderer


def _remaining(deadline: Deadline | None) -> float | None:
    return None if deadline is None else deadline.remaining()


class ImageOcrExtractor:
    """Runs OCR on an image with preprocessing and a hard timeout."""

    def __init__(
        self,
        engine: BaseOcrEngine,
        preprocessor: ImagePreprocessor,
        options: OcrOptions | None = None,
        timeout_seconds: float | None = 20.0,
    ) -> None:
        self._engine = engine
        self._preprocessor = preprocessor
        self._options = options or OcrOptions()
        self._timeout_seconds = timeout_seconds

    @property
    def timeout_seconds(self) -> float | None:
        return self._timeout_seconds

    def extract(self, image_bytes: bytes, timeout_seconds: float | None = None) -> str:
        """Recognize text, retrying once on the raw bytes if the result is empty.

        ``timeout_seconds`` overrides the configured bound for this call. The
        bound covers preprocessing and both recognition attempts together.

        Raises:
            ExtractionTimeoutError: if recognition exceeds the bound. Not retried.
            OcrExtractionError: if the engine fails or both attempts are empty.
        """
        timeout = self._timeout_seconds if timeout_seconds is None else timeout_seconds
        deadline = Deadline(timeout) if timeout is not None else None
        prepared = self._preprocessor.process(image_bytes)
        text = self._recognize(prepared, _remaining(deadline))
        if text.strip():
            return text.strip()

        if prepared is image_bytes:
            raise OcrExtractionError("OCR recognized no text")

        Log.warning("OCR returned no text after preprocessing, retrying on original image")
        text = self._recognize(image_bytes, _remaining(deadline))
        if not text.strip():
            raise OcrExtractionError("OCR recognized no text")
        return text.strip()

    def _recognize(self, image_bytes: bytes, timeout: float | None) -> str:
        return run_with_timeout(
            lambda: self._engine.recognize(image_bytes, self._options),
            timeout,
        )


class ScannedPdfOcr:
    """OCR fallback for PDFs without a usable text layer.

    Pages are rendered to images first; raw PDF bytes never reach the OCR engine.
    """

    def __init__(self, renderer: PdfPageRenderer, image_ocr: ImageOcrExtractor) -> None:
        self._renderer = renderer
        self._image_ocr = image_ocr

    def extract(self, pdf_bytes: bytes, timeout_seconds: float | None = None) -> str:
        """Render pages and OCR each one, joining pages that produced text.

        ``timeout_seconds`` bounds the whole fallback, rendering and all pages
        together. Pages read before the bound ran out are kept.

        Raises:
            PdfRenderError: if the PDF cannot be rendered.
            ExtractionTimeoutError: if time runs out before any page yields text.
            OcrExtractionError: if no page yields text.
        """
        deadline = Deadline(timeout_seconds) if timeout_seconds is not None else None
        pages = run_with_timeout(lambda: self._renderer.render(pdf_bytes), _remaining(deadline))
        if not pages:
            raise OcrExtractionError("PDF has no pages to OCR")

        texts: list[str] = []
        for number, page in enumerate(pages, start=1):
            page_timeout = (
                deadline.cap(self._image_ocr.timeout_seconds) if deadline is not None else None
            )
            try:
                texts.append(self._image_ocr.extract(page, timeout_seconds=page_timeout))
            except OcrExtractionError as exc:
                Log.warning(f"OCR found no text on PDF page {number}: {exc}")
            except ExtractionTimeoutError:
                if not texts:
                    raise
                Log.warning(
                    f"OCR time ran out on PDF page {number}, keeping {len(texts)} earlier page(s)"
                )
                break
        if not texts:
            raise OcrExtractionError("OCR recognized no text in any PDF page")
        Log.info(f"OCR recovered text from {len(texts)} of {len(pages)} PDF pages")
        return "\n\n".join(texts)
