from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from app.database.models import PaymentRecord, UserBalance
from app.database.repositories.payments_repository import PaymentsRepository
from app.database.repositories.users_repository import UsersRepository

CREATED = datetime(2024, 5, 12, 9, 30, tzinfo=timezone.utc)


def _mock_connection() -> tuple[MagicMock, MagicMock]:
    """Return (mock_conn, mock_cursor) with the cursor usable as a context manager."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestPaymentsRepository:
    def test_find_returns_record(self) -> None:
        conn, cursor = _mock_connection()
        cursor.fetchone.return_value = {
            "transaction_id": "FT24123ABC45",
            "user_id": "user-1",
            "amount": Decimal("40.00"),
            "created_at": CREATED,
        }

        result = PaymentsRepository().find_by_transaction_id(conn, "FT24123ABC45")

        assert result == PaymentRecord("FT24123ABC45", "user-1", Decimal("40.00"), CREATED)
        assert cursor.execute.call_args.args[1] == ("FT24123ABC45",)

    def test_find_returns_none_when_missing(self) -> None:
        conn, cursor = _mock_connection()
        cursor.fetchone.return_value = None

        assert PaymentsRepository().find_by_transaction_id(conn, "FT00000000") is None

    def test_insert_returns_created_at(self) -> None:
        conn, cursor = _mock_connection()
        cursor.fetchone.return_value = (CREATED,)

        result = PaymentsRepository().insert_if_absent(conn, "FT24123ABC45", "user-1", Decimal("40"))

        assert result == CREATED
        sql = cursor.execute.call_args.args[0]
        assert "ON CONFLICT (transaction_id) DO NOTHING" in sql

    def test_insert_conflict_returns_none(self) -> None:
        conn, cursor = _mock_connection()
        cursor.fetchone.return_value = None

        assert PaymentsRepository().insert_if_absent(conn, "FT24123ABC45", "u", Decimal("40")) is None


class TestUsersRepository:
    def test_increment_returns_new_balance(self) -> None:
        conn, cursor = _mock_connection()
        cursor.fetchone.return_value = (Decimal("70.00"),)

        result = UsersRepository().increment_balance(conn, "user-1", Decimal("30"))

        assert result == Decimal("70.00")
        sql, params = cursor.execute.call_args.args
        assert "users.balance + EXCLUDED.balance" in sql
        assert params == ("user-1", Decimal("30"))

    def test_increment_without_row_raises(self) -> None:
        conn, cursor = _mock_connection()
        cursor.fetchone.return_value = None

        with pytest.raises(RuntimeError, match="returned no row"):
            UsersRepository().increment_balance(conn, "user-1", Decimal("30"))

    @patch("app.database.repositories.users_repository.get_connection")
    def test_find_by_id(self, mock_get_conn: MagicMock) -> None:
        conn, cursor = _mock_connection()
        mock_get_conn.return_value.__enter__ = MagicMock(return_value=conn)
        mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
        cursor.fetchone.return_value = {
            "user_id": "user-1",
            "balance": Decimal("12.50"),
            "updated_at": CREATED,
        }

        assert UsersRepository().find_by_id("user-1") == UserBalance("user-1", Decimal("12.50"), CREATED)
