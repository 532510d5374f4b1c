import threading
from decimal import Decimal

from app.database.connection import get_connection
from app.database.repositories.payments_repository import PaymentsRepository
from app.database.repositories.users_repository import UsersRepository
from app.logging.logger import Log
from app.payments.exceptions import DuplicatePaymentError


class PaymentLedger:
    """Records each transaction id at most once and credits the user's balance.

    The duplicate check, the insert and the balance increment share one pooled
    connection and one transaction. The UNIQUE constraint on
    payments.transaction_id settles races between processes: the loser's
    insert returns no row and the transaction is rolled back. Within this
    process, requests for the same transaction id are serialized by a striped lock.
    """

    _LOCK_STRIPES = 64
    _locks = tuple(threading.Lock() for _ in range(_LOCK_STRIPES))

    def __init__(
        self,
        payments_repo: PaymentsRepository | None = None,
        users_repo: UsersRepository | None = None,
    ) -> None:
        self._payments_repo = payments_repo or PaymentsRepository()
        self._users_repo = users_repo or UsersRepository()

    def record_payment(self, transaction_id: str, user_id: str, amount: Decimal) -> Decimal:
        """Insert the payment and return the user's new balance.

        Raises:
            DuplicatePaymentError: if the transaction id was recorded before.
            ValueError: if the amount is negative.
        """
        if amount < 0:
            raise ValueError("Payment amount must not be negative")

        with self._lock_for(transaction_id), get_connection() as conn:
            existing = self._payments_repo.find_by_transaction_id(conn, transaction_id)
            if existing is not None:
                conn.rollback()
                raise DuplicatePaymentError(
                    f"Payment {transaction_id} has already been used"
                )

            created_at = self._payments_repo.insert_if_absent(
                conn, transaction_id, user_id, amount
            )
            if created_at is None:
                conn.rollback()
                raise DuplicatePaymentError(
                    f"Payment {transaction_id} has already been used"
                )

            new_balance = self._users_repo.increment_balance(conn, user_id, amount)
            conn.commit()

        Log.info(
            f"Recorded payment {transaction_id} for user {user_id}: "
            f"+{amount}, balance {new_balance}"
        )
        return new_balance

    @classmethod
    def _lock_for(cls, transaction_id: str) -> threading.Lock:
        return cls._locks[hash(transaction_id) % cls._LOCK_STRIPES]

    def get_balance(self, user_id: str) -> Decimal | None:
        user = self._users_repo.find_by_id(user_id)
        return None if user is None else user.balance
