class PaymentError(Exception):
    """Base exception for payment verification errors."""


class PaymentValidationError(PaymentError):
    """Raised when extracted payment fields break a business rule."""


class DuplicatePaymentError(PaymentError):
    """Raised when a transaction id has already been recorded."""


class ClaimExtractionError(PaymentError):
    """Raised when no payment fields could be derived from a screenshot."""


class ClaimExtractionNetworkError(ClaimExtractionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
