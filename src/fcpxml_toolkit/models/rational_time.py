"""
Exact rational time.

FCPXML expresses every time value as a fraction of seconds
(``"3600/60000s"``). RationalTime keeps the numerator and timescale
exactly as written so values survive a parse/emit round trip byte for
byte, and does all arithmetic with integer math so repeated edits never
drift.
"""

import logging
import re
from fractions import Fraction
from math import floor, isfinite, lcm
from typing import Any, Tuple, Union

from pydantic_core import core_schema


logger = logging.getLogger(__name__)

# "<int>/<int>s", "<int>s", "<int>/<int>", "<int>"
_TIME_PATTERN = re.compile(r"^\s*([+-]?\d+)(?:/([+-]?\d+))?(s?)\s*$")


class TimeParseError(ValueError):
    """Raised by strict parsing when a time string is malformed."""
    pass


class RationalTime:
    """Immutable ``value / timescale`` seconds."""

    __slots__ = ("_value", "_timescale")

    def __init__(self, value: int, timescale: int = 1):
        if timescale <= 0:
            raise ValueError(f"timescale must be positive, got {timescale}")
        self._value = int(value)
        self._timescale = int(timescale)

    # Construction

    @classmethod
    def zero(cls) -> "RationalTime":
        """The zero time, also used as the sentinel for malformed strings."""
        return cls(0, 1)

    @classmethod
    def from_seconds(cls, seconds: float, timescale: int = 600) -> "RationalTime":
        """Floor ``seconds`` onto ``timescale`` ticks."""
        if not isfinite(seconds):
            raise ValueError(f"Cannot represent non-finite seconds: {seconds}")
        return cls(floor(Fraction(seconds) * timescale), timescale)

    @classmethod
    def from_fraction(cls, fraction: Fraction) -> "RationalTime":
        return cls(fraction.numerator, fraction.denominator)

    @classmethod
    def parse(cls, text: str, strict: bool = False) -> "RationalTime":
        """Parse an FCPXML time string.

        Accepts ``"<int>/<int>s"``, ``"<int>s"`` and the bare forms without
        the trailing ``s``.

        Args:
            text: Time string from a document attribute
            strict: Raise instead of returning the zero sentinel

        Returns:
            Parsed time, or ``RationalTime.zero()`` for malformed input when
            not strict

        Raises:
            TimeParseError: If ``strict`` and the string is malformed
        """
        parsed = cls._try_parse(text)
        if parsed is not None:
            return parsed
        if strict:
            raise TimeParseError(f"Malformed time string: {text!r}")
        logger.warning(f"Malformed time string {text!r}, defaulting to 0s")
        return cls.zero()

    @classmethod
    def is_valid_string(cls, text: str) -> bool:
        """True when ``text`` follows the FCPXML time grammar."""
        return cls._try_parse(text) is not None

    @classmethod
    def _try_parse(cls, text: Any):
        if not isinstance(text, str):
            return None
        match = _TIME_PATTERN.match(text)
        if not match:
            return None
        numerator = int(match.group(1))
        if match.group(2) is None:
            return cls(numerator, 1)
        denominator = int(match.group(2))
        if denominator <= 0:
            return None
        return cls(numerator, denominator)

    # Accessors

    @property
    def value(self) -> int:
        return self._value

    @property
    def timescale(self) -> int:
        return self._timescale

    @property
    def fraction(self) -> Fraction:
        return Fraction(self._value, self._timescale)

    @property
    def seconds(self) -> float:
        """Floating point seconds, for display only."""
        return self._value / self._timescale

    @property
    def is_zero(self) -> bool:
        return self._value == 0

    @property
    def is_negative(self) -> bool:
        return self._value < 0

    @property
    def is_positive(self) -> bool:
        return self._value > 0

    def to_fcpxml(self) -> str:
        """Canonical FCPXML string: ``"0s"`` or ``"<value>/<timescale>s"``."""
        if self._value == 0:
            return "0s"
        return f"{self._value}/{self._timescale}s"

    def rescaled(self, timescale: int) -> "RationalTime":
        """Same instant on a different timescale, floored when inexact."""
        if timescale <= 0:
            raise ValueError(f"timescale must be positive, got {timescale}")
        return RationalTime((self._value * timescale) // self._timescale, timescale)

    def reduced(self) -> "RationalTime":
        return RationalTime.from_fraction(self.fraction)

    def abs(self) -> "RationalTime":
        return RationalTime(abs(self._value), self._timescale)

    def end_of(self, duration: "RationalTime") -> "RationalTime":
        """End of the interval starting here and lasting ``duration``."""
        return self + duration

    def scaled(self, factor: Union[int, Fraction]) -> "RationalTime":
        """Multiply by an integer or exact fraction."""
        factor = Fraction(factor)
        return RationalTime(self._value * factor.numerator, self._timescale * factor.denominator)

    # Arithmetic

    def _aligned(self, other: "RationalTime") -> Tuple[int, int, int]:
        timescale = lcm(self._timescale, other._timescale)
        return (
            self._value * (timescale // self._timescale),
            other._value * (timescale // other._timescale),
            timescale,
        )

    def __add__(self, other: "RationalTime") -> "RationalTime":
        if not isinstance(other, RationalTime):
            return NotImplemented
        left, right, timescale = self._aligned(other)
        return RationalTime(left + right, timescale)

    def __sub__(self, other: "RationalTime") -> "RationalTime":
        if not isinstance(other, RationalTime):
            return NotImplemented
        left, right, timescale = self._aligned(other)
        return RationalTime(left - right, timescale)

    def __neg__(self) -> "RationalTime":
        return RationalTime(-self._value, self._timescale)

    def __mul__(self, other: int) -> "RationalTime":
        if isinstance(other, bool) or not isinstance(other, int):
            return NotImplemented
        return RationalTime(self._value * other, self._timescale)

    __rmul__ = __mul__

    # Comparison by exact value: 1/2 == 2/4

    def _cross(self, other: "RationalTime") -> Tuple[int, int]:
        return self._value * other._timescale, other._value * self._timescale

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RationalTime):
            return NotImplemented
        left, right = self._cross(other)
        return left == right

    def __lt__(self, other: "RationalTime") -> bool:
        if not isinstance(other, RationalTime):
            return NotImplemented
        left, right = self._cross(other)
        return left < right

    def __le__(self, other: "RationalTime") -> bool:
        if not isinstance(other, RationalTime):
            return NotImplemented
        left, right = self._cross(other)
        return left <= right

    def __gt__(self, other: "RationalTime") -> bool:
        if not isinstance(other, RationalTime):
            return NotImplemented
        left, right = self._cross(other)
        return left > right

    def __ge__(self, other: "RationalTime") -> bool:
        if not isinstance(other, RationalTime):
            return NotImplemented
        left, right = self._cross(other)
        return left >= right

    def __hash__(self) -> int:
        return hash(self.fraction)

    def __repr__(self) -> str:
        return f"RationalTime({self._value}, {self._timescale})"

    def __str__(self) -> str:
        return self.to_fcpxml()

    def __copy__(self) -> "RationalTime":
        return self

    def __deepcopy__(self, memo) -> "RationalTime":
        return self

    # Pydantic integration: accept RationalTime or a time string, emit the string

    @classmethod
    def _coerce(cls, value: Any) -> "RationalTime":
        if isinstance(value, RationalTime):
            return value
        if isinstance(value, str):
            parsed = cls._try_parse(value)
            if parsed is None:
                raise ValueError(f"Invalid FCPXML time string: {value!r}")
            return parsed
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value, 1)
        raise ValueError(f"Cannot interpret {value!r} as a rational time")

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda time: time.to_fcpxml()
            ),
        )


def parse_time(text: str, strict: bool = False) -> RationalTime:
    """Module-level shorthand for ``RationalTime.parse``."""
    return RationalTime.parse(text, strict=strict)
