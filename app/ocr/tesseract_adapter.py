import io

import pytesseract
from PIL import Image

from app.ocr.base import BaseOcrEngine, OcrOptions
from app.ocr.exceptions import OcrExtractionError


class TesseractOcrEngine(BaseOcrEngine):
    """OCR through the Tesseract binary via pytesseract."""

    def __init__(self, tesseract_cmd: str = "") -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, image_bytes: bytes, options: OcrOptions) -> str:
        config = f"--oem {options.engine_mode} --psm {options.page_segmentation_mode}"
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                image.load()
                return pytesseract.image_to_string(
                    image, lang=options.language, config=config
                )
        except Exception as exc:
            raise OcrExtractionError(f"tesseract recognition failed: {exc}") from exc
