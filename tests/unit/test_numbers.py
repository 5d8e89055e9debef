"""
Unit tests for lenient value parsing (finporter.transforms.numbers).

Covers the money formats brokerages emit (currency symbols, thousands
separators, signs on either side, accounting negatives), placeholders
that must come back as None, percentages and booleans.
"""

from __future__ import annotations

import pytest

from finporter.transforms.numbers import (
    parse_bool,
    parse_number,
    parse_percent,
    parse_string,
)


class TestParseNumber:
    """Tests for parse_number()."""

    # -----------------------------------------------------------------
    # Monetary formats
    # -----------------------------------------------------------------

    def test_thousands_separated_currency(self):
        assert parse_number("$100,975.73") == pytest.approx(100975.73)

    def test_sign_before_symbol(self):
        assert parse_number("-$100975.73") == pytest.approx(-100975.73)

    def test_sign_after_symbol(self):
        """Fidelity writes "$-5.00" for pending debits."""
        assert parse_number("$-5.00") == pytest.approx(-5.0)

    def test_explicit_plus(self):
        assert parse_number("+$0.10") == pytest.approx(0.10)

    def test_accounting_negative(self):
        assert parse_number("(1,234.56)") == pytest.approx(-1234.56)

    def test_unbalanced_parenthesis_is_rejected(self):
        assert parse_number("(1,234.56") is None

    def test_padding_is_stripped(self):
        """Fidelity pads values with a leading space."""
        assert parse_number(" 180.95") == pytest.approx(180.95)

    def test_plain_integer(self):
        assert parse_number("961") == 961.0

    def test_exponent(self):
        assert parse_number("1e-05") == pytest.approx(0.00001)

    def test_shortest_repr_round_trips_exactly(self):
        """Values written by the exporter come back bit-for-bit."""
        value = 100975.73 / 961
        assert parse_number(repr(value)) == value

    # -----------------------------------------------------------------
    # Missing values
    # -----------------------------------------------------------------

    @pytest.mark.parametrize("raw", ["", "   ", "--", "n/a", "N/A", "abc", "$", "1.2.3"])
    def test_placeholders_are_none(self, raw):
        assert parse_number(raw) is None

    def test_none_is_none(self):
        """A missing column (None) is not an error."""
        assert parse_number(None) is None


class TestParsePercent:
    """Tests for parse_percent()."""

    def test_percent_becomes_fraction(self):
        assert parse_percent("28.75%") == pytest.approx(0.2875)

    def test_decimal_division_is_exact(self):
        """"1.91%" must equal the literal 0.0191, not 0.019099999..."""
        assert parse_percent("1.91%") == 0.0191

    def test_signed_percent(self):
        assert parse_percent("-11.97%") == pytest.approx(-0.1197)

    def test_without_percent_sign(self):
        assert parse_percent("50") == pytest.approx(0.5)

    def test_zero(self):
        assert parse_percent("0.00%") == 0.0

    @pytest.mark.parametrize("raw", [None, "", "n/a", "%"])
    def test_missing_is_none(self, raw):
        assert parse_percent(raw) is None


class TestParseString:
    """Tests for parse_string()."""

    def test_strips_padding(self):
        assert parse_string(" VV ") == "VV"

    def test_blank_is_absent(self):
        assert parse_string("   ") is None
        assert parse_string("") is None
        assert parse_string(None) is None


class TestParseBool:
    """Tests for parse_bool()."""

    @pytest.mark.parametrize("raw", ["true", "TRUE", "yes", "Y", "t", "1"])
    def test_true_spellings(self, raw):
        assert parse_bool(raw) is True

    @pytest.mark.parametrize("raw", ["false", "No", "n", "F", "0"])
    def test_false_spellings(self, raw):
        assert parse_bool(raw) is False

    @pytest.mark.parametrize("raw", [None, "", "maybe", "2"])
    def test_unrecognized_is_none(self, raw):
        assert parse_bool(raw) is None
