from collections.abc import Sequence

from app.config.settings import Settings
from app.document.docx_adapter import DocxTextExtractor
from app.extraction.aggregator import BatchAggregator, ensure_usable
from app.extraction.models import BatchResult, FileInput
from app.extraction.orchestrator import ExtractionOrchestrator
from app.extraction.validator import ContentValidator
from app.logging.logger import Log
from app.ocr.base import OcrOptions
from app.ocr.extractor import ImageOcrExtractor, ScannedPdfOcr
from app.ocr.preprocessor import ImagePreprocessor
from app.ocr.tesseract_adapter import TesseractOcrEngine
from app.pdf.factory import PdfExtractorFactory
from app.pdf.renderer import PdfPageRenderer


class TextExtractionService:
    """Extracts one combined text from a batch of uploads.

    Pipeline per file: classify -> extract -> quality gate -> OCR fallback -> validate.
    """

    def __init__(self, aggregator: BatchAggregator) -> None:
        self._aggregator = aggregator

    def extract(self, files: Sequence[FileInput], purpose: str = "") -> BatchResult:
        """Run the batch and return it if usable.

        Raises:
            BatchUnusableError: if no file produced usable text.
        """
        label = f" for {purpose}" if purpose else ""
        Log.info(f"Starting text extraction{label}: {len(files)} file(s)")
        batch = ensure_usable(self._aggregator.aggregate(files))
        Log.info(f"Extracted {len(batch.combined_text)} characters{label}")
        return batch


def build_image_ocr(settings: Settings) -> ImageOcrExtractor:
    return ImageOcrExtractor(
        engine=TesseractOcrEngine(tesseract_cmd=settings.tesseract_cmd),
        preprocessor=ImagePreprocessor(max_dimension=settings.image_max_dimension),
        options=OcrOptions(
            language=settings.ocr_language,
            page_segmentation_mode=settings.ocr_page_segmentation_mode,
            engine_mode=settings.ocr_engine_mode,
        ),
        timeout_seconds=settings.ocr_timeout_seconds,
    )


def build_text_extraction_service(settings: Settings) -> TextExtractionService:
    """Build a TextExtractionService with all required adapters."""
    image_ocr = build_image_ocr(settings)
    orchestrator = ExtractionOrchestrator(
        pdf_extractor=PdfExtractorFactory.create(settings),
        document_extractor=DocxTextExtractor(),
        image_ocr=image_ocr,
        pdf_ocr=ScannedPdfOcr(
            renderer=PdfPageRenderer(
                dpi=settings.ocr_render_dpi, max_pages=settings.ocr_max_pdf_pages
            ),
            image_ocr=image_ocr,
        ),
        validator=ContentValidator(
            min_length=settings.content_min_length,
            min_alnum_ratio=settings.content_min_alnum_ratio,
        ),
        pdf_min_text_length=settings.pdf_min_text_length,
        extraction_timeout_seconds=settings.extraction_timeout_seconds,
        ocr_timeout_seconds=settings.ocr_timeout_seconds,
    )
    aggregator = BatchAggregator(
        orchestrator, request_timeout_seconds=settings.request_timeout_seconds
    )
    return TextExtractionService(aggregator)
