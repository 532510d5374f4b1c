import re
from dataclasses import dataclass, field
from enum import Enum

_MARKER_RE = re.compile(r"\[[^\[\]]*\]")


class FileFormat(str, Enum):
    PDF = "pdf"
    WORD_DOCUMENT = "word_document"
    IMAGE = "image"
    UNSUPPORTED = "unsupported"


class ExtractionStatus(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class ExtractionState(str, Enum):
    """Named states of the per-file extraction machine."""

    CLASSIFY = "classify"
    EXTRACT = "extract"
    QUALITY_GATE = "quality_gate"
    OCR_FALLBACK = "ocr_fallback"
    VALIDATE = "validate"
    DONE = "done"


@dataclass(frozen=True)
class FileInput:
    """One uploaded file, decoded from the request body."""

    data: bytes
    declared_type: str
    file_name: str | None = None


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of extracting a single file."""

    source_index: int
    status: ExtractionStatus
    text: str = ""
    diagnostic: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is ExtractionStatus.SUCCESS


@dataclass
class BatchResult:
    """Ordered per-file results plus the combined text handed downstream."""

    results: list[ExtractionResult] = field(default_factory=list)
    combined_text: str = ""
    total_count: int = 0

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.succeeded)

    @property
    def is_usable(self) -> bool:
        """At least one success and some text left once markers are removed."""
        if self.success_count < 1:
            return False
        return bool(strip_markers(self.combined_text).strip())


def strip_markers(text: str) -> str:
    """Remove bracket-delimited diagnostic markers from combined text."""
    return _MARKER_RE.sub("", text)
