import io

import pytest
from PIL import Image

from app.pdf.exceptions import PdfRenderError
from app.pdf.renderer import PdfPageRenderer


class TestPdfPageRenderer:
    def test_renders_each_page_to_png(self, multi_page_pdf_bytes: bytes) -> None:
        pages = PdfPageRenderer(dpi=72).render(multi_page_pdf_bytes)

        assert len(pages) == 2
        for page in pages:
            with Image.open(io.BytesIO(page)) as image:
                assert image.format == "PNG"

    def test_dpi_controls_resolution(self, sample_pdf_bytes: bytes) -> None:
        low = PdfPageRenderer(dpi=72).render(sample_pdf_bytes)[0]
        high = PdfPageRenderer(dpi=144).render(sample_pdf_bytes)[0]

        with Image.open(io.BytesIO(low)) as a, Image.open(io.BytesIO(high)) as b:
            assert b.size[0] == pytest.approx(a.size[0] * 2, abs=2)

    def test_page_count_is_capped(self, multi_page_pdf_bytes: bytes) -> None:
        assert len(PdfPageRenderer(dpi=72, max_pages=1).render(multi_page_pdf_bytes)) == 1

    def test_invalid_bytes_raise(self) -> None:
        with pytest.raises(PdfRenderError, match="rendering failed"):
            PdfPageRenderer().render(b"not a pdf")
