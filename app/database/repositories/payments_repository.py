from datetime import datetime
from decimal import Decimal
from typing import Any

import psycopg
from psycopg.rows import dict_row

from app.database.models import PaymentRecord


class PaymentsRepository:
    """Database operations for the payments table.

    Methods take an open connection so the ledger can run them in one transaction.
    """

    def find_by_transaction_id(
        self, conn: psycopg.Connection[Any], transaction_id: str
    ) -> PaymentRecord | None:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT transaction_id, user_id, amount, created_at
                FROM payments
                WHERE transaction_id = %s
                """,
                (transaction_id,),
            )
            row = cur.fetchone()

        if row is None:
            return None

        return PaymentRecord(
            transaction_id=row["transaction_id"],
            user_id=row["user_id"],
            amount=row["amount"],
            created_at=row["created_at"],
        )

    def insert_if_absent(
        self,
        conn: psycopg.Connection[Any],
        transaction_id: str,
        user_id: str,
        amount: Decimal,
    ) -> datetime | None:
        """Insert a payment row unless the transaction id already exists.

        Returns the row's creation time, or None when the unique constraint
        rejected the insert.
        """
        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO payments (transaction_id, user_id, amount)
                VALUES (%s, %s, %s)
                ON CONFLICT (transaction_id) DO NOTHING
                RETURNING created_at
                """,
                (transaction_id, user_id, amount),
            )
            row = cur.fetchone()
        return None if row is None else row[0]
