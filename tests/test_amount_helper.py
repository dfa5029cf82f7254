"""Tests for amount truncation (floor to one decimal place)."""

from __future__ import annotations

from decimal import Decimal

import pytest

from src.domain.amount_helper import to_decimal, truncate, truncate_amounts, truncate_or_zero


class TestTruncate:
    def test_floors_positive_values(self):
        assert truncate(1.27) == Decimal("1.2")
        assert truncate(1.29) == Decimal("1.2")

    def test_floors_negative_values_away_from_zero(self):
        assert truncate(-1.27) == Decimal("-1.3")
        assert truncate(-1.2) == Decimal("-1.2")

    def test_whole_and_zero_values(self):
        assert truncate(1.0) == Decimal("1.0")
        assert truncate(0) == Decimal("0")
        assert truncate(150) == Decimal("150")

    def test_none_and_empty_string_give_none(self):
        assert truncate(None) is None
        assert truncate("") is None

    def test_blank_string_is_treated_as_empty(self):
        assert truncate(" ") is None
        assert truncate("\t ") is None
        assert truncate_or_zero("  ") == Decimal("0")

    def test_very_large_values_are_floored_not_rejected(self):
        assert truncate(1e30) == Decimal("1E+30")
        assert truncate(Decimal("123456789012345678901234567890.19")) == Decimal(
            "123456789012345678901234567890.1"
        )
        assert truncate(Decimal("-1E+40")) == Decimal("-1E+40")

    def test_numeric_strings(self):
        assert truncate("12.39") == Decimal("12.3")
        assert truncate(" -0.05 ") == Decimal("-0.1")

    def test_decimal_input_keeps_exactness(self):
        assert truncate(Decimal("50")) == Decimal("50.0")
        assert truncate(Decimal("150") / Decimal("3")) == Decimal("50.0")
        assert truncate(Decimal("100") / Decimal("3")) == Decimal("33.3")

    def test_float_sum_does_not_drift_below_boundary(self):
        # 0.1 + 0.2 == 0.30000000000000004; stays 0.3, not 0.2 or 0.4
        assert truncate(0.1 + 0.2) == Decimal("0.3")
        assert truncate(0.7) == Decimal("0.7")

    def test_non_numeric_string_raises(self):
        with pytest.raises(ArithmeticError):
            truncate("abc")


class TestHelpers:
    def test_truncate_or_zero(self):
        assert truncate_or_zero(None) == Decimal("0")
        assert truncate_or_zero(2.55) == Decimal("2.5")

    def test_to_decimal_goes_through_str_for_floats(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(3) == Decimal(3)

    def test_truncate_amounts_only_touches_listed_present_fields(self):
        data = {"revenue": 10.55, "net_income": None, "remark": "x", "count": 3.99}
        result = truncate_amounts(data, ["revenue", "net_income", "missing"])

        assert result == {"revenue": Decimal("10.5"), "net_income": None, "remark": "x", "count": 3.99}
        assert data["revenue"] == 10.55
