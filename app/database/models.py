from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class PaymentRecord:
    """Represents a row from the payments table. Never updated once written."""

    transaction_id: str
    user_id: str
    amount: Decimal
    created_at: datetime | None = None


@dataclass
class UserBalance:
    """Represents a row from the users table."""

    user_id: str
    balance: Decimal
    updated_at: datetime | None = None
