import io

import docx

from app.document.exceptions import DocumentExtractionError


class DocxTextExtractor:
    """Extracts raw text from word-processor documents with python-docx."""

    def extract(self, document_bytes: bytes) -> str:
        """Return paragraph text followed by table cell text.

        Raises:
            DocumentExtractionError: if the bytes are not a readable document.
        """
        try:
            document = docx.Document(io.BytesIO(document_bytes))
        except Exception as exc:
            raise DocumentExtractionError(f"document extraction failed: {exc}") from exc

        lines = [p.text for p in document.paragraphs if p.text.strip()]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    lines.append("\t".join(cells))
        return "\n".join(lines).strip()
