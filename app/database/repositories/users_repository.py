from decimal import Decimal
from typing import Any

import psycopg
from psycopg.rows import dict_row

from app.database.connection import get_connection
from app.database.models import UserBalance


class UsersRepository:
    """Balance operations on the users table."""

    def increment_balance(
        self, conn: psycopg.Connection[Any], user_id: str, amount: Decimal
    ) -> Decimal:
        """Atomically add ``amount`` to a balance, creating the row on first use."""
        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO users (user_id, balance)
                VALUES (%s, %s)
                ON CONFLICT (user_id)
                DO UPDATE SET balance = users.balance + EXCLUDED.balance,
                              updated_at = NOW()
                RETURNING balance
                """,
                (user_id, amount),
            )
            row = cur.fetchone()
        if row is None:
            raise RuntimeError(f"Balance upsert for user {user_id} returned no row")
        return Decimal(row[0])

    def find_by_id(self, user_id: str) -> UserBalance | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    "SELECT user_id, balance, updated_at FROM users WHERE user_id = %s",
                    (user_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return UserBalance(
            user_id=row["user_id"],
            balance=row["balance"],
            updated_at=row["updated_at"],
        )
