from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationVerdict:
    accepted: bool
    reason: str = ""


class ContentValidator:
    """Rejects near-empty text and OCR noise made mostly of symbols."""

    def __init__(self, min_length: int = 10, min_alnum_ratio: float = 0.3) -> None:
        self._min_length = min_length
        self._min_alnum_ratio = min_alnum_ratio

    def validate(self, text: str) -> ValidationVerdict:
        stripped = text.strip()
        if len(stripped) < self._min_length:
            return ValidationVerdict(
                accepted=False,
                reason=f"only {len(stripped)} characters of text (need {self._min_length})",
            )
        ratio = alnum_ratio(stripped)
        if ratio < self._min_alnum_ratio:
            return ValidationVerdict(
                accepted=False,
                reason=f"alphanumeric density {ratio:.2f} below {self._min_alnum_ratio:.2f}",
            )
        return ValidationVerdict(accepted=True)


def alnum_ratio(text: str) -> float:
    if not text:
        return 0.0
    return sum(1 for ch in text if ch.isalnum()) / len(text)
