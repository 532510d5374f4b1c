"""Per-file extraction as an explicit state machine.

    CLASSIFY -> EXTRACT -> QUALITY_GATE (PDF) -> OCR_FALLBACK (PDF) -> VALIDATE -> DONE

A PDF moves to OCR_FALLBACK when its text layer is short, unreadable or its
extraction timed out. Word documents and images have no fallback.
"""

from collections.abc import Callable
from dataclasses import dataclass

from app.document.docx_adapter import DocxTextExtractor
from app.document.exceptions import DocumentExtractionError
from app.extraction.bounded import TIMEOUT_MESSAGE, Deadline, run_with_timeout
from app.extraction.classifier import classify
from app.extraction.exceptions import ExtractionTimeoutError
from app.extraction.models import (
    ExtractionResult,
    ExtractionState,
    ExtractionStatus,
    FileFormat,
    FileInput,
)
from app.extraction.validator import ContentValidator
from app.logging.logger import Log
from app.ocr.exceptions import OcrExtractionError
from app.ocr.extractor import ImageOcrExtractor, ScannedPdfOcr
from app.pdf.base import BasePdfExtractor
from app.pdf.exceptions import PdfExtractionError, PdfRenderError

REUPLOAD_HINT = "try uploading the document as a clear image (JPG or PNG) instead"

_EXTRACTOR_ERRORS = (PdfExtractionError, DocumentExtractionError, OcrExtractionError)


@dataclass
class _FileRun:
    """Mutable bookkeeping for one pass through the machine."""

    file: FileInput
    index: int
    deadline: Deadline | None
    file_format: FileFormat = FileFormat.UNSUPPORTED
    text: str = ""
    result: ExtractionResult | None = None

    def finish(
        self, status: ExtractionStatus, text: str = "", diagnostic: str | None = None
    ) -> ExtractionState:
        self.result = ExtractionResult(
            source_index=self.index, status=status, text=text, diagnostic=diagnostic
        )
        return ExtractionState.DONE

    def fail(self, diagnostic: str) -> ExtractionState:
        return self.finish(ExtractionStatus.FAILED, diagnostic=diagnostic)


class ExtractionOrchestrator:
    """Turns one uploaded file into an ExtractionResult, never raising."""

    def __init__(
        self,
        *,
        pdf_extractor: BasePdfExtractor,
        document_extractor: DocxTextExtractor,
        image_ocr: ImageOcrExtractor,
        pdf_ocr: ScannedPdfOcr,
        validator: ContentValidator,
        pdf_min_text_length: int = 50,
        extraction_timeout_seconds: float | None = 15.0,
        ocr_timeout_seconds: float | None = 20.0,
    ) -> None:
        self._pdf_extractor = pdf_extractor
        self._document_extractor = document_extractor
        self._image_ocr = image_ocr
        self._pdf_ocr = pdf_ocr
        self._validator = validator
        self._pdf_min_text_length = pdf_min_text_length
        self._extraction_timeout_seconds = extraction_timeout_seconds
        self._ocr_timeout_seconds = ocr_timeout_seconds
        self._transitions: dict[ExtractionState, Callable[[_FileRun], ExtractionState]] = {
            ExtractionState.CLASSIFY: self._classify,
            ExtractionState.EXTRACT: self._extract,
            ExtractionState.QUALITY_GATE: self._quality_gate,
            ExtractionState.OCR_FALLBACK: self._ocr_fallback,
            ExtractionState.VALIDATE: self._validate,
        }

    def extract(
        self,
        file: FileInput,
        index: int = 0,
        deadline: Deadline | None = None,
    ) -> ExtractionResult:
        run = _FileRun(file=file, index=index, deadline=deadline)
        state = ExtractionState.CLASSIFY
        while run.result is None:
            Log.debug(f"File {index + 1}: entering {state.value}")
            try:
                state = self._transitions[state](run)
            except Exception as exc:
                Log.exception(f"File {index + 1}: unexpected error in {state.value}")
                state = run.fail(f"unexpected error: {exc}")

        result = run.result
        if result.succeeded:
            Log.info(
                f"File {index + 1}: extracted {len(result.text)} chars "
                f"({run.file_format.value})"
            )
        else:
            Log.warning(f"File {index + 1}: failed: {result.diagnostic}")
        return result

    def _classify(self, run: _FileRun) -> ExtractionState:
        run.file_format = classify(run.file.declared_type, run.file.file_name)
        if run.file_format is FileFormat.UNSUPPORTED:
            return run.fail(f"unsupported file type '{run.file.declared_type}'")
        return ExtractionState.EXTRACT

    def _extract(self, run: _FileRun) -> ExtractionState:
        is_pdf = run.file_format is FileFormat.PDF
        try:
            run.text = self._extract_direct(run)
        except ExtractionTimeoutError as exc:
            if is_pdf:
                Log.warning(f"File {run.index + 1}: PDF text extraction timed out, trying OCR")
                return ExtractionState.OCR_FALLBACK
            return run.fail(str(exc))
        except _EXTRACTOR_ERRORS as exc:
            if is_pdf:
                Log.warning(f"File {run.index + 1}: {exc}, trying OCR")
                return ExtractionState.OCR_FALLBACK
            return run.fail(str(exc))
        return ExtractionState.QUALITY_GATE if is_pdf else ExtractionState.VALIDATE

    def _extract_direct(self, run: _FileRun) -> str:
        data = run.file.data
        if run.file_format is FileFormat.IMAGE:
            # OCR carries its own bound
            return self._image_ocr.extract(
                data, timeout_seconds=self._bound(run, self._ocr_timeout_seconds)
            )
        timeout = self._bound(run, self._extraction_timeout_seconds)
        if run.file_format is FileFormat.PDF:
            return run_with_timeout(lambda: self._pdf_extractor.extract(data).text, timeout)
        return run_with_timeout(lambda: self._document_extractor.extract(data), timeout)

    def _quality_gate(self, run: _FileRun) -> ExtractionState:
        length = len(run.text.strip())
        if length >= self._pdf_min_text_length:
            return ExtractionState.VALIDATE
        Log.info(
            f"File {run.index + 1}: PDF text layer has {length} chars "
            f"(< {self._pdf_min_text_length}), treating as scanned"
        )
        return ExtractionState.OCR_FALLBACK

    def _ocr_fallback(self, run: _FileRun) -> ExtractionState:
        try:
            run.text = self._pdf_ocr.extract(
                run.file.data, timeout_seconds=self._bound(run, self._ocr_timeout_seconds)
            )
        except ExtractionTimeoutError:
            return run.fail(f"{TIMEOUT_MESSAGE} while reading scanned PDF; {REUPLOAD_HINT}")
        except (PdfRenderError, OcrExtractionError) as exc:
            return run.fail(f"no readable text in PDF ({exc}); {REUPLOAD_HINT}")
        return ExtractionState.VALIDATE

    def _validate(self, run: _FileRun) -> ExtractionState:
        verdict = self._validator.validate(run.text)
        if not verdict.accepted:
            return run.fail(f"poor quality text: {verdict.reason}")
        return run.finish(ExtractionStatus.SUCCESS, text=run.text.strip())

    @staticmethod
    def _bound(run: _FileRun, timeout_seconds: float | None) -> float | None:
        if run.deadline is None:
            return timeout_seconds
        return run.deadline.cap(timeout_seconds)
