"""
Unit tests for RationalTime.

Covers parsing, canonical emission, exact arithmetic and
pydantic integration.
"""

import logging
from fractions import Fraction

import pytest
from pydantic import BaseModel, ValidationError

from fcpxml_toolkit.models.rational_time import RationalTime, TimeParseError, parse_time


class TestParsing:
    """Test the FCPXML time string grammar."""

    def test_parse_fraction_with_suffix(self):
        """Test the common "<value>/<timescale>s" form."""
        time = RationalTime.parse("3600/60000s")

        assert time.value == 3600
        assert time.timescale == 60000
        assert time.seconds == pytest.approx(0.06)
        assert time.to_fcpxml() == "3600/60000s"

    def test_parse_whole_seconds(self):
        """Test "<int>s" parses with timescale 1."""
        time = RationalTime.parse("5s")

        assert time == RationalTime(5, 1)
        assert time.to_fcpxml() == "5/1s"

    def test_parse_bare_forms(self):
        """Test forms without the trailing s."""
        assert RationalTime.parse("1001/30000") == RationalTime(1001, 30000)
        assert RationalTime.parse("12") == RationalTime(12, 1)

    def test_parse_negative_and_whitespace(self):
        """Test a leading minus sign and surrounding whitespace."""
        time = RationalTime.parse("  -100/2400s ")

        assert time.is_negative
        assert time.value == -100

    @pytest.mark.parametrize("text", ["", "abc", "1/0s", "1/-5s", "1.5s", "1/2/3s", "s"])
    def test_malformed_defaults_to_zero(self, text, caplog):
        """Test lenient parsing returns the zero sentinel and logs a warning."""
        with caplog.at_level(logging.WARNING):
            time = RationalTime.parse(text)

        assert time.is_zero
        assert time == RationalTime.zero()
        assert "Malformed time string" in caplog.text

    def test_strict_parsing_raises(self):
        """Test strict mode surfaces malformed strings."""
        with pytest.raises(TimeParseError):
            RationalTime.parse("1/0s", strict=True)

        # TimeParseError is a ValueError
        with pytest.raises(ValueError):
            parse_time("nonsense", strict=True)

    def test_is_valid_string(self):
        """Test grammar check without parsing side effects."""
        assert RationalTime.is_valid_string("0s")
        assert RationalTime.is_valid_string("100/2400s")
        assert not RationalTime.is_valid_string("100/0s")
        assert not RationalTime.is_valid_string("ten seconds")


class TestRoundTrip:
    """Test parse(format(t)) == t."""

    @pytest.mark.parametrize("value,timescale", [
        (0, 1), (3600, 60000), (1001, 30000), (-2400, 2400), (7, 3), (48048, 24000),
    ])
    def test_round_trip(self, value, timescale):
        """Test valid values survive a format/parse round trip."""
        time = RationalTime(value, timescale)

        assert RationalTime.parse(time.to_fcpxml()) == time

    def test_byte_for_byte_round_trip(self):
        """Test unreduced fractions re-emit exactly as written."""
        for text in ["3600/60000s", "2400/2400s", "48048/24000s", "0s"]:
            assert RationalTime.parse(text).to_fcpxml() == text

    def test_zero_emits_0s(self):
        """Test zero always emits "0s" regardless of timescale."""
        assert RationalTime(0, 30000).to_fcpxml() == "0s"
        assert str(RationalTime.zero()) == "0s"


class TestConstruction:
    """Test construction invariants."""

    @pytest.mark.parametrize("timescale", [0, -1, -30000])
    def test_non_positive_timescale_raises(self, timescale):
        """Test a non-positive timescale is a programming error."""
        with pytest.raises(ValueError):
            RationalTime(1, timescale)

    def test_from_seconds_floors(self):
        """Test float seconds floor onto the timescale."""
        assert RationalTime.from_seconds(1.5, 600) == RationalTime(900, 600)
        assert RationalTime.from_seconds(0.0999, 10) == RationalTime(0, 10)
        assert RationalTime.from_seconds(-0.05, 10) == RationalTime(-1, 10)

    def test_from_seconds_rejects_non_finite(self):
        """Test NaN and infinity are rejected."""
        with pytest.raises(ValueError):
            RationalTime.from_seconds(float("nan"))
        with pytest.raises(ValueError):
            RationalTime.from_seconds(float("inf"))


class TestArithmetic:
    """Test exact arithmetic."""

    def test_add_uses_common_denominator(self):
        """Test adding values on different timescales."""
        total = RationalTime(1001, 30000) + RationalTime(1, 24)

        assert total.fraction == Fraction(1001, 30000) + Fraction(1, 24)
        assert total == RationalTime(2251, 30000)
        assert total.timescale == 30000

    def test_add_picks_least_common_multiple(self):
        """Test the result timescale when neither operand's timescale divides the other."""
        total = RationalTime(1001, 30000) + RationalTime(1, 25)

        assert total.timescale == 150000
        assert total.fraction == Fraction(1001, 30000) + Fraction(1, 25)

    def test_subtract(self):
        """Test subtraction."""
        assert RationalTime(10, 1) - RationalTime(2400, 2400) == RationalTime(9, 1)

    def test_repeated_addition_has_no_drift(self):
        """Test many frame additions land exactly on a whole second count."""
        frame = RationalTime(1001, 30000)
        total = RationalTime.zero()
        for _ in range(30000):
            total = total + frame

        assert total == RationalTime(1001, 1)

    def test_multiply_and_negate(self):
        """Test integer scaling and unary minus."""
        frame = RationalTime(100, 2400)

        assert frame * 24 == RationalTime(1, 1)
        assert 24 * frame == RationalTime(1, 1)
        assert (-frame).value == -100

    def test_scaled_by_fraction(self):
        """Test scaling by an exact fraction."""
        assert RationalTime(10, 1).scaled(Fraction(1, 2)) == RationalTime(5, 1)

    def test_end_of(self):
        """Test interval end helper."""
        assert RationalTime(5, 1).end_of(RationalTime(10, 1)) == RationalTime(15, 1)

    def test_rescaled(self):
        """Test rescaling keeps the instant and floors when inexact."""
        assert RationalTime(1, 2).rescaled(600) == RationalTime(300, 600)
        assert RationalTime(1, 3).rescaled(2).value == 0


class TestComparison:
    """Test comparison by exact value."""

    def test_equal_across_timescales(self):
        """Test 1/2 == 2/4 and equal hashes."""
        assert RationalTime(1, 2) == RationalTime(2, 4)
        assert hash(RationalTime(1, 2)) == hash(RationalTime(2, 4))
        assert len({RationalTime(1, 2), RationalTime(2, 4), RationalTime(300, 600)}) == 1

    def test_ordering(self):
        """Test ordering across timescales."""
        assert RationalTime(1001, 30000) < RationalTime(1, 24)
        assert RationalTime(1, 24) > RationalTime(1001, 30000)
        assert RationalTime(5, 1) >= RationalTime(10, 2)
        assert max([RationalTime(1, 1), RationalTime(3, 2), RationalTime(5, 4)]) == RationalTime(3, 2)


class ClipTimes(BaseModel):
    offset: RationalTime
    duration: RationalTime


class TestPydanticIntegration:
    """Test RationalTime as a model field."""

    def test_accepts_strings_and_instances(self):
        """Test validation from both forms."""
        model = ClipTimes(offset="3600/60000s", duration=RationalTime(5, 1))

        assert model.offset == RationalTime(3600, 60000)
        assert model.duration == RationalTime(5, 1)

    def test_serializes_to_fcpxml_strings(self):
        """Test model_dump emits time strings."""
        model = ClipTimes(offset="3600/60000s", duration="0s")

        assert model.model_dump() == {"offset": "3600/60000s", "duration": "0s"}

    def test_rejects_malformed_strings(self):
        """Test malformed strings fail model validation."""
        with pytest.raises(ValidationError):
            ClipTimes(offset="soon", duration="1s")
