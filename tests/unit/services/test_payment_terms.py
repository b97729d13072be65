"""Tests for payment mode normalization."""

import pytest

from orderdesk.core.services import normalize_payment_mode


class TestNormalizePaymentMode:
    @pytest.mark.parametrize(
        "raw,code",
        [
            ("Cash on Delivery", "COD"),
            ("cod", "COD"),
            ("neft", "NET_BANKING"),
            ("Credit Cycle", "CREDIT_CYCLE"),
            ("EOM", "END_OF_MONTH"),
            ("Advance Payment", "ADVANCE"),
        ],
    )
    def test_aliases(self, raw, code):
        assert normalize_payment_mode(raw).code == code

    def test_empty(self):
        terms = normalize_payment_mode(None)
        assert terms.code == ""
        assert terms.display() == "N/A"

    def test_unknown_keeps_text(self):
        terms = normalize_payment_mode("barter")
        assert terms.code == "BARTER"
        assert terms.label == "BARTER"

    def test_mapping_input(self):
        terms = normalize_payment_mode({"code": "CREDIT_CYCLE", "creditDays": 30})
        assert terms.is_credit
        assert terms.credit_days == 30
        assert terms.display() == "Credit Cycle (30 days)"

    def test_flags(self):
        assert normalize_payment_mode("COD").is_cod
        assert normalize_payment_mode("advance").is_advance
        assert normalize_payment_mode("End of Month").is_credit
        assert not normalize_payment_mode("UPI").is_credit
