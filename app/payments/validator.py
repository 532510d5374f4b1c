"""Business rules for payment fields extracted from a screenshot."""

import re
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation

from app.payments.exceptions import PaymentValidationError
from app.payments.models import PaymentClaim, VerifiedPayment

_WHITESPACE_RE = re.compile(r"\s+")


def parse_amount(value: object) -> Decimal | None:
    """Coerce a raw amount into a Decimal.

    Strings such as ``"1,500.00 ETB"`` or ``"Br 1500"`` keep only digits and
    the first decimal point. Returns None when nothing numeric remains.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        try:
            parsed = Decimal(str(value))
        except InvalidOperation:
            return None
        return parsed if parsed.is_finite() else None
    if not isinstance(value, str):
        return None

    kept: list[str] = []
    seen_point = False
    for ch in value:
        if ch.isdigit() and ch.isascii():
            kept.append(ch)
        # a point before any digit belongs to a prefix like "Br."
        elif ch == "." and kept and not seen_point:
            seen_point = True
            kept.append(ch)
    cleaned = "".join(kept).rstrip(".")
    if not cleaned or cleaned == ".":
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def normalize_name(name: str) -> str:
    return _WHITESPACE_RE.sub(" ", name).strip().lower()


class PaymentFieldValidator:
    """All-or-nothing check of receiver, amount and transaction id."""

    def __init__(
        self,
        receiver_names: Iterable[str],
        min_amount: Decimal,
        transaction_prefix: str = "FT",
    ) -> None:
        self._receiver_names = frozenset(normalize_name(n) for n in receiver_names)
        self._min_amount = min_amount
        self._prefix = transaction_prefix

    @property
    def expected_format(self) -> str:
        receiver = sorted(self._receiver_names)[0].title() if self._receiver_names else "the payee"
        return (
            f"Please ensure the screenshot shows a valid CBE payment to {receiver} "
            f"with at least {self._min_amount} ETB and an {self._prefix} number."
        )

    def validate(self, claim: PaymentClaim) -> VerifiedPayment:
        """Return the normalized payment when every rule passes.

        Raises:
            PaymentValidationError: naming every failed rule and the expected format.
        """
        problems: list[str] = []

        receiver = normalize_name(claim.receiver_name or "")
        if receiver not in self._receiver_names:
            problems.append(f"receiver {claim.receiver_name!r} is not accepted")

        amount = parse_amount(claim.amount)
        if amount is None:
            problems.append(f"amount {claim.amount!r} is not a number")
        elif amount < self._min_amount:
            problems.append(f"amount {amount} is below the minimum {self._min_amount}")

        transaction_id = (claim.transaction_id or "").strip()
        if not transaction_id:
            problems.append("transaction id is missing")
        elif not transaction_id.startswith(self._prefix):
            problems.append(f"transaction id {transaction_id!r} does not start with {self._prefix}")

        if problems or amount is None:
            raise PaymentValidationError(
                f"Invalid details from screenshot ({'; '.join(problems)}). {self.expected_format}"
            )
        return VerifiedPayment(
            receiver_name=receiver,
            amount=amount,
            transaction_id=transaction_id,
            source=claim.source,
        )
