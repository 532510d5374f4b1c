import mimetypes

from app.extraction.models import FileFormat

_RULES: tuple[tuple[tuple[str, ...], FileFormat], ...] = (
    (("pdf",), FileFormat.PDF),
    (("word", "document"), FileFormat.WORD_DOCUMENT),
    (("image",), FileFormat.IMAGE),
)


def _match(media_type: str) -> FileFormat:
    lowered = media_type.lower()
    for needles, file_format in _RULES:
        if any(needle in lowered for needle in needles):
            return file_format
    return FileFormat.UNSUPPORTED


def classify(declared_type: str | None, file_name: str | None = None) -> FileFormat:
    """Map a declared media type (or a file name as a hint) to a file format.

    The declared type wins. The file name is consulted only when the declared
    type matches nothing, e.g. ``application/octet-stream`` uploads.
    """
    file_format = _match(declared_type or "")
    if file_format is not FileFormat.UNSUPPORTED or not file_name:
        return file_format
    guessed, _ = mimetypes.guess_type(file_name)
    return _match(guessed or "")
