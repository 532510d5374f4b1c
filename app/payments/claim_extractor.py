"""Reads payment fields off a screenshot with an AI vision endpoint."""

import base64
import json

from app.extraction.exceptions import ExtractionTimeoutError
from app.logging.logger import Log
from app.ocr.exceptions import OcrExtractionError
from app.ocr.extractor import ImageOcrExtractor
from app.payments.client_base import BaseVisionClient
from app.payments.exceptions import ClaimExtractionError
from app.payments.models import PaymentClaim
from app.payments.text_fields import clean_field, extract_claim_from_text
from app.payments.validator import parse_amount

CLAIM_PROMPT = """\
Analyze this payment screenshot from CBE (Commercial Bank of Ethiopia) and extract \
the following information. If any information is not present, respond with 'Not found'.
1. Name of the payment receiver.
2. Amount of money transferred.
3. The payment ID, which starts with "{prefix}".

You must respond with a JSON object only, using exactly these keys: \
receiver_name, amount, payment_id.
"""


def _is_empty(claim: PaymentClaim) -> bool:
    return claim.receiver_name is None and claim.amount is None and claim.transaction_id is None


class ClaimExtractor:
    """Produces a PaymentClaim candidate from a payment screenshot.

    Order of attempts:
    1. AI vision endpoint, reply parsed as a JSON object.
    2. Regex extraction over the AI reply when it is not valid JSON.
    3. Local OCR plus regex extraction when the endpoint fails or finds nothing.
    """

    def __init__(
        self,
        *,
        client: BaseVisionClient,
        model: str,
        max_tokens: int = 1024,
        transaction_prefix: str = "FT",
        ocr: ImageOcrExtractor | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._max_tokens = max_tokens
        self._prefix = transaction_prefix
        self._ocr = ocr
        self._prompt = CLAIM_PROMPT.format(prefix=transaction_prefix)

    def extract(self, image_bytes: bytes, media_type: str = "image/jpeg") -> PaymentClaim:
        """Return the best available claim.

        Raises:
            ClaimExtractionError: if no attempt yields any field.
        """
        try:
            raw = self._call_ai(image_bytes, media_type)
        except ClaimExtractionError as exc:
            Log.warning(f"AI payment extraction failed: {exc}")
            return self._extract_with_ocr(image_bytes, cause=exc)

        Log.debug(f"AI raw response:\n{raw}")
        try:
            claim = self._claim_from_json(self._parse_json(raw))
        except ClaimExtractionError as exc:
            Log.warning(f"AI response is not a JSON object ({exc}), using text patterns")
            claim = extract_claim_from_text(raw, self._prefix)

        if _is_empty(claim):
            return self._extract_with_ocr(
                image_bytes, cause=ClaimExtractionError("AI found no payment details")
            )
        return claim

    def _call_ai(self, image_bytes: bytes, media_type: str) -> str:
        encoded = base64.b64encode(image_bytes).decode("ascii")
        return self._client.create_chat_completion(
            model=self._model,
            prompt=self._prompt,
            image_data_url=f"data:{media_type};base64,{encoded}",
            max_tokens=self._max_tokens,
        )

    def _extract_with_ocr(self, image_bytes: bytes, cause: ClaimExtractionError) -> PaymentClaim:
        if self._ocr is None:
            raise cause
        try:
            text = self._ocr.extract(image_bytes)
        except (OcrExtractionError, ExtractionTimeoutError) as exc:
            Log.warning(f"OCR of payment screenshot failed: {exc}")
            raise cause from exc

        claim = extract_claim_from_text(text, self._prefix, source="ocr")
        if _is_empty(claim):
            raise cause
        Log.info("Payment details recovered from local OCR")
        return claim

    def _claim_from_json(self, data: dict[str, object]) -> PaymentClaim:
        transaction_id = data.get("payment_id", data.get("transaction_id"))
        return PaymentClaim(
            receiver_name=clean_field(data.get("receiver_name")),
            amount=parse_amount(data.get("amount")),
            transaction_id=clean_field(transaction_id),
            source="ai",
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ClaimExtractionError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise ClaimExtractionError("JSON response must be an object")
        return parsed
