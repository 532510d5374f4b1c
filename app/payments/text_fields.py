"""Regex extraction of payment fields from free text.

Used when the AI endpoint answers with something other than a JSON object, or
on locally OCR'd screenshot text. Pure functions, no I/O.
"""

import re

from app.payments.models import PaymentClaim
from app.payments.validator import parse_amount

_NOT_FOUND = {"", "not found", "n/a", "none", "null", "unknown"}

_RECEIVER_RE = re.compile(
    r"(?:receiver[ _]?name|receiver|beneficiary|paid\s+to|transferred\s+to|\bto\b)"
    r"\W{0,6}"
    r"([A-Za-z][A-Za-z.' ]{1,60}?)"
    r"(?=\s*(?:[\n,;\"}]|\bon\b|\bwith\b|\bfor\b|\bamount\b|$))",
    re.IGNORECASE,
)

_NUMBER = r"(\d[\d,]*(?:\.\d+)?)"
_AMOUNT_RES = (
    re.compile(r"amount\W{0,6}(?:ETB|Birr|Br)?\.?\s*" + _NUMBER, re.IGNORECASE),
    re.compile(r"\b(?:ETB|Birr|Br)\.?\s*" + _NUMBER, re.IGNORECASE),
    re.compile(_NUMBER + r"\s*(?:ETB|Birr|Br)\b", re.IGNORECASE),
)


def _transaction_re(prefix: str) -> re.Pattern[str]:
    return re.compile(rf"\b({re.escape(prefix)}[A-Z0-9]{{6,}})\b")


def clean_field(value: object) -> str | None:
    """Strip a raw field and map placeholder answers like 'Not found' to None."""
    if value is None:
        return None
    text = str(value).strip()
    if text.lower() in _NOT_FOUND:
        return None
    return text


def find_receiver_name(text: str) -> str | None:
    match = _RECEIVER_RE.search(text)
    return clean_field(match.group(1)) if match else None


def find_amount_text(text: str) -> str | None:
    for pattern in _AMOUNT_RES:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def find_transaction_id(text: str, prefix: str = "FT") -> str | None:
    match = _transaction_re(prefix).search(text)
    return match.group(1) if match else None


def extract_claim_from_text(text: str, prefix: str = "FT", source: str = "regex") -> PaymentClaim:
    """Derive receiver name, amount and transaction id independently from text."""
    return PaymentClaim(
        receiver_name=find_receiver_name(text),
        amount=parse_amount(find_amount_text(text)),
        transaction_id=find_transaction_id(text, prefix),
        source=source,
    )
