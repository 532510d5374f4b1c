import io

import docx
import pytest
from PIL import Image, ImageDraw
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

RESUME_LINES = [
    "Jane Doe - Senior Software Engineer",
    "Eight years building data pipelines in Python",
    "Led migration of billing services to PostgreSQL",
    "Mentored four engineers and ran code reviews",
    "Education: BSc Computer Science, Addis Ababa",
]


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def resume_pdf_bytes() -> bytes:
    """A text PDF comfortably above the OCR fallback threshold."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    y = 720
    for line in RESUME_LINES:
        c.drawString(72, y, line)
        y -= 18
    c.save()
    return buf.getvalue()


@pytest.fixture()
def docx_bytes() -> bytes:
    """Generate a word-processor document with a paragraph and a table."""
    document = docx.Document()
    document.add_paragraph("Job description: Backend Engineer")
    document.add_paragraph("")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Location"
    table.rows[0].cells[1].text = "Remote"
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


def _png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def text_image_bytes() -> bytes:
    """An RGB image with some dark text drawn on a light background."""
    image = Image.new("RGB", (400, 120), color=(235, 235, 235))
    draw = ImageDraw.Draw(image)
    draw.text((10, 40), "Payment FT123456789", fill=(20, 20, 20))
    return _png(image)


@pytest.fixture()
def large_image_bytes() -> bytes:
    """An image larger than the default preprocessing bound."""
    return _png(Image.new("RGB", (3000, 1500), color=(200, 180, 160)))
