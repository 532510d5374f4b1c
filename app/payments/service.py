from typing import ClassVar

from app.config.settings import Settings
from app.extraction.service import build_image_ocr
from app.logging.logger import Log
from app.payments.claim_extractor import ClaimExtractor
from app.payments.client_base import BaseVisionClient
from app.payments.example_client_adapter import ExampleVisionClientAdapter
from app.payments.ledger import PaymentLedger
from app.payments.models import PaymentOutcome
from app.payments.openai_client_adapter import OpenAIVisionClientAdapter
from app.payments.validator import PaymentFieldValidator


class PaymentVerifier:
    """Screenshot in, credited balance out.

    Pipeline: extract claim -> validate fields -> record once in the ledger.
    """

    def __init__(
        self,
        claim_extractor: ClaimExtractor,
        validator: PaymentFieldValidator,
        ledger: PaymentLedger,
    ) -> None:
        self._claim_extractor = claim_extractor
        self._validator = validator
        self._ledger = ledger

    def verify(self, user_id: str, image_bytes: bytes, media_type: str) -> PaymentOutcome:
        """Raises ClaimExtractionError, PaymentValidationError or DuplicatePaymentError."""
        Log.info(f"Verifying payment screenshot for user {user_id}")
        claim = self._claim_extractor.extract(image_bytes, media_type)
        Log.info(
            f"Extracted payment claim via {claim.source}: receiver={claim.receiver_name!r} "
            f"amount={claim.amount} id={claim.transaction_id!r}"
        )
        valid = self._validator.validate(claim)
        new_balance = self._ledger.record_payment(valid.transaction_id, user_id, valid.amount)
        return PaymentOutcome(
            transaction_id=valid.transaction_id,
            user_id=user_id,
            amount=valid.amount,
            new_balance=new_balance,
        )


class ClaimExtractorFactory:
    """Creates the claim extractor for the configured AI provider."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "deepseek": "https://api.deepseek.com/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> ClaimExtractor:
        provider = settings.payment_ai_provider.lower()
        client, model = cls._create_client(provider, settings)
        return ClaimExtractor(
            client=client,
            model=model,
            max_tokens=settings.payment_ai_max_tokens,
            transaction_prefix=settings.payment_id_prefix,
            ocr=build_image_ocr(settings),
        )

    @classmethod
    def _create_client(cls, provider: str, settings: Settings) -> tuple[BaseVisionClient, str]:
        if provider == "example":
            return ExampleVisionClientAdapter(), "example"
        if provider == "openai":
            client = OpenAIVisionClientAdapter(
                api_key=settings.payment_openai_api_key,
                timeout_seconds=settings.payment_openai_timeout_seconds,
            )
            return client, settings.payment_openai_model_name
        if provider == "deepseek":
            client = OpenAIVisionClientAdapter(
                api_key=settings.payment_deepseek_api_key,
                timeout_seconds=settings.payment_deepseek_timeout_seconds,
                base_url=cls.OPENAI_COMPATIBLE_BASE_URLS["deepseek"],
            )
            return client, settings.payment_deepseek_model_name
        if provider == "openai_compatible":
            url = settings.payment_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "payment_openai_compatible_base_url is required for "
                    "payment_ai_provider=openai_compatible"
                )
            client = OpenAIVisionClientAdapter(
                api_key=settings.payment_openai_compatible_api_key,
                timeout_seconds=settings.payment_openai_compatible_timeout_seconds,
                base_url=url,
            )
            return client, settings.payment_openai_compatible_model_name
        raise ValueError(
            f"Unknown payment AI provider '{provider}'. "
            "Choose from: ['deepseek', 'example', 'openai', 'openai_compatible']"
        )


def build_payment_verifier(settings: Settings) -> PaymentVerifier:
    """Build a PaymentVerifier. The connection pool must be initialized."""
    return PaymentVerifier(
        claim_extractor=ClaimExtractorFactory.create(settings),
        validator=PaymentFieldValidator(
            receiver_names=settings.payment_receiver_names,
            min_amount=settings.payment_min_amount,
            transaction_prefix=settings.payment_id_prefix,
        ),
        ledger=PaymentLedger(),
    )
