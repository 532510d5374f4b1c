import io

from PIL import Image, ImageFilter, ImageOps

from app.logging.logger import Log


class ImagePreprocessor:
    """Normalizes photos and scans before OCR.

    Pipeline: EXIF transpose -> downscale -> grayscale -> autocontrast -> sharpen.
    Any failure returns the input bytes unchanged.
    """

    def __init__(self, max_dimension: int = 2000) -> None:
        self._max_dimension = max_dimension

    def process(self, image_bytes: bytes) -> bytes:
        try:
            with Image.open(io.BytesIO(image_bytes)) as opened:
                image = ImageOps.exif_transpose(opened)
                image = self._downscale(image)
                image = ImageOps.grayscale(image)
                image = ImageOps.autocontrast(image)
                image = image.filter(ImageFilter.SHARPEN)
                out = io.BytesIO()
                image.save(out, format="PNG")
                return out.getvalue()
        except Exception as exc:
            Log.warning(f"Image preprocessing failed, using original bytes: {exc}")
            return image_bytes

    def _downscale(self, image: Image.Image) -> Image.Image:
        if max(image.size) <= self._max_dimension:
            return image
        resized = image.copy()
        resized.thumbnail((self._max_dimension, self._max_dimension), Image.Resampling.LANCZOS)
        return resized
