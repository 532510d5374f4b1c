import pymupdf

from app.pdf.exceptions import PdfRenderError


class PdfPageRenderer:
    """Rasterises PDF pages to PNG so scanned documents can go through OCR."""

    def __init__(self, dpi: int = 200, max_pages: int = 5) -> None:
        self._dpi = dpi
        self._max_pages = max_pages

    def render(self, pdf_bytes: bytes) -> list[bytes]:
        """Render the first ``max_pages`` pages to PNG bytes.

        Raises:
            PdfRenderError: if the PDF cannot be opened or rendered.
        """
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                page_count = min(doc.page_count, self._max_pages)
                return [
                    doc[index].get_pixmap(dpi=self._dpi).tobytes("png")
                    for index in range(page_count)
                ]
        except Exception as exc:
            raise PdfRenderError(f"pdf page rendering failed: {exc}") from exc
