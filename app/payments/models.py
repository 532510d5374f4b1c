from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PaymentClaim:
    """Payment fields read off a screenshot. Not trusted until validated."""

    receiver_name: str | None = None
    amount: Decimal | None = None
    transaction_id: str | None = None
    source: str = "ai"  # ai, regex or ocr


@dataclass(frozen=True)
class VerifiedPayment:
    """A claim that passed every payment rule, with normalized fields."""

    receiver_name: str
    amount: Decimal
    transaction_id: str
    source: str


@dataclass(frozen=True)
class PaymentOutcome:
    """Result of a recorded payment."""

    transaction_id: str
    user_id: str
    amount: Decimal
    new_balance: Decimal
