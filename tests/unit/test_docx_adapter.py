import pytest

from app.document.docx_adapter import DocxTextExtractor
from app.document.exceptions import DocumentExtractionError


class TestDocxTextExtractor:
    def test_extracts_paragraphs_and_tables(self, docx_bytes: bytes) -> None:
        text = DocxTextExtractor().extract(docx_bytes)

        assert text == "Job description: Backend Engineer\nLocation\tRemote"

    def test_blank_paragraphs_are_dropped(self, docx_bytes: bytes) -> None:
        assert "\n\n" not in DocxTextExtractor().extract(docx_bytes)

    @pytest.mark.parametrize("payload", [b"", b"not a zip archive", b"%PDF-1.4"])
    def test_unreadable_bytes_raise(self, payload: bytes) -> None:
        with pytest.raises(DocumentExtractionError, match="document extraction failed"):
            DocxTextExtractor().extract(payload)
