from decimal import Decimal

import pytest

from app.payments.exceptions import PaymentValidationError
from app.payments.models import PaymentClaim, VerifiedPayment
from app.payments.validator import PaymentFieldValidator, normalize_name, parse_amount


def _make_validator() -> PaymentFieldValidator:
    return PaymentFieldValidator(
        receiver_names=["Yilak Abay", "Yilak Abay Abebe"],
        min_amount=Decimal("30"),
        transaction_prefix="FT",
    )


def _claim(**overrides: object) -> PaymentClaim:
    fields: dict[str, object] = {
        "receiver_name": "Yilak Abay",
        "amount": Decimal("30"),
        "transaction_id": "FT24123ABC45",
    }
    fields.update(overrides)
    return PaymentClaim(**fields)  # type: ignore[arg-type]


class TestParseAmount:
    @pytest.mark.parametrize(
        "raw", ["1,500.00 ETB", "1500", 1500.0, 1500, "Br 1,500", "Br. 1,500.00", Decimal("1500")]
    )
    def test_equivalent_forms(self, raw: object) -> None:
        assert parse_amount(raw) == Decimal("1500")

    @pytest.mark.parametrize("raw", ["abc", "", "Not found", None, True, ".", float("nan")])
    def test_non_numeric(self, raw: object) -> None:
        assert parse_amount(raw) is None

    def test_keeps_only_first_decimal_point(self) -> None:
        assert parse_amount("12.50.3") == Decimal("12.503")

    def test_trailing_point_is_dropped(self) -> None:
        assert parse_amount("45. ETB") == Decimal("45")

    def test_point_in_currency_prefix_is_ignored(self) -> None:
        assert parse_amount("ETB. 50") == Decimal("50")
        assert parse_amount("Br. 12.75") == Decimal("12.75")


class TestNormalizeName:
    def test_collapses_whitespace_and_case(self) -> None:
        assert normalize_name("  YILAK\t  Abay ") == "yilak abay"


class TestPaymentFieldValidator:
    def test_minimum_amount_is_inclusive(self) -> None:
        result = _make_validator().validate(_claim(amount=Decimal("30")))

        assert result.amount == Decimal("30")
        assert result.receiver_name == "yilak abay"
        assert result.transaction_id == "FT24123ABC45"

    def test_below_minimum_is_rejected(self) -> None:
        with pytest.raises(PaymentValidationError, match="below the minimum"):
            _make_validator().validate(_claim(amount=Decimal("29")))

    @pytest.mark.parametrize("name", ["yilak abay", "YILAK  ABAY", "Yilak Abay Abebe"])
    def test_receiver_comparison_ignores_case_and_spacing(self, name: str) -> None:
        assert _make_validator().validate(_claim(receiver_name=name)).amount == Decimal("30")

    @pytest.mark.parametrize("name", ["Yilak", "Abebe Kebede", None])
    def test_unknown_receiver_is_rejected(self, name: str | None) -> None:
        with pytest.raises(PaymentValidationError, match="receiver"):
            _make_validator().validate(_claim(receiver_name=name))

    @pytest.mark.parametrize("transaction_id", ["TT24123ABC45", "ft24123abc45", "", None])
    def test_transaction_prefix_is_required(self, transaction_id: str | None) -> None:
        with pytest.raises(PaymentValidationError, match="transaction id"):
            _make_validator().validate(_claim(transaction_id=transaction_id))

    def test_all_failures_are_reported_together(self) -> None:
        claim = PaymentClaim(receiver_name="Someone", amount=None, transaction_id="X1")

        with pytest.raises(PaymentValidationError) as exc_info:
            _make_validator().validate(claim)

        message = str(exc_info.value)
        assert "receiver" in message
        assert "amount" in message
        assert "transaction id" in message
        assert message.endswith(_make_validator().expected_format)

    def test_expected_format_mentions_rules(self) -> None:
        text = _make_validator().expected_format

        assert "Yilak Abay" in text
        assert "30 ETB" in text
        assert "FT" in text

    def test_source_is_preserved(self) -> None:
        assert _make_validator().validate(_claim(source="ocr")).source == "ocr"

    def test_result_is_a_verified_payment(self) -> None:
        claim = _claim(amount="Br. 1,500.00", transaction_id=" FT24123ABC45 ")

        result = _make_validator().validate(claim)

        assert isinstance(result, VerifiedPayment)
        assert result.amount == Decimal("1500")
        assert result.transaction_id == "FT24123ABC45"
