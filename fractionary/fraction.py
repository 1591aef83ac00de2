"""Exact fractions with a separately stored sign and NumPy interoperability."""
from __future__ import annotations

import fractions
import logging
import math
import numbers
import operator
import re
from typing import Any, Union

import numpy as np

from .repeating_decimal import RepeatingDecimal

logger = logging.getLogger(__name__)

NAN = float("nan")

Magnitude = Union[int, float]
NumberLike = Union["Fraction", fractions.Fraction, numbers.Real, str]

_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)
_FRACTION_TEXT_PATTERN = re.compile(r"^(?P<top>[^/]+)/(?P<bottom>[^/]+)$")


def _isnan(value: Magnitude) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _isfinite(value: Magnitude) -> bool:
    return not isinstance(value, float) or math.isfinite(value)


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _overflowing(op, a: Magnitude, b: Magnitude) -> Magnitude:
    """Apply ``op``, treating an int too large for a float as infinite.

    Mixing such an int with a float, or dividing it, saturates to inf or NaN
    the way float arithmetic does instead of raising ``OverflowError``.
    """
    try:
        return op(a, b)
    except OverflowError:
        return op(_to_float(a), _to_float(b))


def _add(a: Magnitude, b: Magnitude) -> Magnitude:
    return _overflowing(operator.add, a, b)


def _mul(a: Magnitude, b: Magnitude) -> Magnitude:
    return _overflowing(operator.mul, a, b)


def _mod(a: Magnitude, b: Magnitude) -> Magnitude:
    return _overflowing(operator.mod, a, b)


def _div(a: Magnitude, b: Magnitude) -> Magnitude:
    return _overflowing(operator.truediv, a, b)


def _power(base: Magnitude, exponent: int) -> Magnitude:
    # base is a non-negative magnitude and exponent is positive.
    try:
        return base ** exponent
    except OverflowError:
        return math.inf


def _coerce_magnitude(value: Any, *, name: str) -> Magnitude:
    """Return *value* as ``int`` when it is integral, otherwise as ``float``."""
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Rational) and value.denominator == 1:
        return int(value.numerator)
    if isinstance(value, numbers.Real):
        real = _to_float(value)
        if real.is_integer():
            return int(real)
        return real
    raise TypeError(f"{name} must be a real number, got {type(value)!r}")


def _parse_number(text: str) -> Magnitude:
    """Parse one side of ``top/bottom``; NaN when *text* is not a number."""
    stripped = text.strip()
    if not _NUMBER_PATTERN.match(stripped):
        return NAN
    return _coerce_magnitude(fractions.Fraction(stripped), name="number")


def _quotient(a: Magnitude, b: Magnitude) -> Magnitude:
    # Only called when b divides a exactly.
    if isinstance(a, int) and isinstance(b, int):
        return a // b
    return _div(a, b)


class Fraction:
    """A ratio of two non-negative magnitudes with the sign stored apart.

    A zero denominator or a NaN magnitude produces the invalid fraction, whose
    numerator and denominator are both NaN. It is never raised as an error;
    it propagates through arithmetic and is detected with :meth:`is_nan`.
    """

    __slots__ = ("_numerator", "_denominator", "_sign")
    __array_priority__ = 1000.0  # Prefer Fraction semantics in NumPy expressions.

    def __init__(self, numerator: Any = 0, denominator: Any = 1) -> None:
        num = _coerce_magnitude(numerator, name="numerator")
        den = _coerce_magnitude(denominator, name="denominator")
        if den == 0 or _isnan(num) or _isnan(den):
            num, den, sign = NAN, NAN, 1
        else:
            sign = 1 if num == 0 or (num > 0) == (den > 0) else -1
            num, den = abs(num), abs(den)

        self._numerator = num
        self._denominator = den
        self._sign = sign

    # ------------------------------------------------------------------
    # Constructors
    @classmethod
    def from_number(cls, numerator: Any, denominator: Any = 1) -> "Fraction":
        return cls(numerator, denominator)

    @classmethod
    def from_fraction(cls, value: numbers.Rational) -> "Fraction":
        """Create a :class:`Fraction` from :class:`fractions.Fraction`."""
        return cls(value.numerator, value.denominator)

    @classmethod
    def nan(cls) -> "Fraction":
        return cls(NAN, NAN)

    @classmethod
    def from_string(cls, text: str) -> "Fraction":
        """Parse ``"3/5"``, ``"1e2/-4"``, ``"1.2(3)"`` or ``"-0.125"``.

        Fraction notation is tried first, then decimal notation with an
        optional parenthesised repeating block. Unparseable text gives the
        invalid fraction.
        """
        match = _FRACTION_TEXT_PATTERN.match(text)
        if match is not None:
            return cls(_parse_number(match.group("top")), _parse_number(match.group("bottom")))
        decimal = RepeatingDecimal.from_string(text)
        if decimal is not None:
            return cls.from_repeating_decimal(decimal)
        logger.debug("Cannot parse %r as a fraction", text)
        return cls.nan()

    @classmethod
    def from_repeating_decimal(cls, decimal: RepeatingDecimal) -> "Fraction":
        """Convert a parsed decimal as integer + non-repeating + repeating parts."""
        non_repeating = decimal.non_repeating or ""
        repeating = decimal.repeating or ""
        shift = 10 ** len(non_repeating)

        integer_part = cls(int(decimal.integer), 1)
        non_repeating_part = cls(int(non_repeating), shift) if non_repeating else cls(0, 1)
        # 0.ab(cd) contributes cd / (10**4 - 10**2).
        repeating_part = (
            cls(int(repeating), 10 ** (len(non_repeating) + len(repeating)) - shift)
            if repeating
            else cls(0, 1)
        )
        return (
            integer_part.added(non_repeating_part)
            .added(repeating_part)
            .multiplied(cls(decimal.sign, 1))
        )

    # ------------------------------------------------------------------
    # Properties and helpers
    @property
    def numerator(self) -> Magnitude:
        return self._numerator

    @property
    def denominator(self) -> Magnitude:
        return self._denominator

    @property
    def sign(self) -> int:
        return self._sign

    def to_number(self) -> float:
        return _div(self._sign * self._numerator, self._denominator)

    def as_fraction(self) -> fractions.Fraction:
        """Return a :class:`fractions.Fraction` with the same value.

        Raises ``ValueError`` for the invalid fraction.
        """
        return fractions.Fraction(self._sign * self._numerator) / fractions.Fraction(
            self._denominator
        )

    def is_integer(self) -> bool:
        return _mod(self._numerator, self._denominator) == 0

    def is_reduced(self) -> bool:
        return self.strict_equals(Fraction.reduce(self))

    @staticmethod
    def is_nan(fraction: "Fraction") -> bool:
        return _isnan(fraction._numerator) or _isnan(fraction._denominator)

    @staticmethod
    def gcd(a: Magnitude, b: Magnitude) -> Magnitude:
        """Greatest common divisor by the Euclidean algorithm.

        Returns NaN when either argument is NaN or infinite.
        """
        if not (_isfinite(a) and _isfinite(b)):
            return NAN
        while b != 0:
            if _isnan(b):
                return NAN
            a, b = b, _mod(a, b)
        return a

    @staticmethod
    def reduce(fraction: "Fraction") -> "Fraction":
        """Return *fraction* in lowest terms as a new :class:`Fraction`.

        When one magnitude divides the other the fraction collapses even for
        non-integer magnitudes (``3.5/7`` gives ``1/2``). Otherwise
        non-integer magnitudes cannot be reduced and an equal copy is returned.
        """
        if Fraction.is_nan(fraction):
            return Fraction.nan()
        num, den, sign = fraction._numerator, fraction._denominator, fraction._sign
        if _mod(num, den) == 0:
            return Fraction(sign * _quotient(num, den), 1)
        if _mod(den, num) == 0:
            return Fraction(sign, _quotient(den, num))
        if not (isinstance(num, int) and isinstance(den, int)):
            return Fraction(sign * num, den)
        divisor = Fraction.gcd(num, den)
        return Fraction(sign * num // divisor, den // divisor)

    def reduced(self) -> "Fraction":
        return Fraction.reduce(self)

    # ------------------------------------------------------------------
    # Comparisons
    def strict_equals(self, other: "Fraction") -> bool:
        """Compare the stored fields without reducing either side."""
        return (
            self._numerator == other._numerator
            and self._denominator == other._denominator
            and self._sign == other._sign
        )

    def equals(self, other: Union["Fraction", numbers.Real]) -> bool:
        """Compare reduced forms, or the real value when *other* is a number."""
        other = _comparison_operand(other)
        if isinstance(other, Fraction):
            return Fraction.reduce(self).strict_equals(Fraction.reduce(other))
        return self.reduced().to_number() == other

    def _cross_compare(self, other: Any, op) -> bool:
        other = _comparison_operand(other)
        if isinstance(other, Fraction):
            left = _mul(self._sign * self._numerator, other._denominator)
            right = _mul(other._sign * other._numerator, self._denominator)
            return op(left, right)
        return op(self.reduced().to_number(), other)

    def greater_than(self, other: Union["Fraction", numbers.Real]) -> bool:
        return self._cross_compare(other, operator.gt)

    def greater_than_or_equals(self, other: Union["Fraction", numbers.Real]) -> bool:
        return self.equals(other) or self.greater_than(other)

    def less_than(self, other: Union["Fraction", numbers.Real]) -> bool:
        return self._cross_compare(other, operator.lt)

    def less_than_or_equals(self, other: Union["Fraction", numbers.Real]) -> bool:
        return self.equals(other) or self.less_than(other)

    def __eq__(self, other: Any) -> bool:
        try:
            return self.equals(other)
        except TypeError:
            return NotImplemented

    def __lt__(self, other: Any) -> bool:
        try:
            return self.less_than(other)
        except TypeError:
            return NotImplemented

    def __le__(self, other: Any) -> bool:
        try:
            return self.less_than_or_equals(other)
        except TypeError:
            return NotImplemented

    def __gt__(self, other: Any) -> bool:
        try:
            return self.greater_than(other)
        except TypeError:
            return NotImplemented

    def __ge__(self, other: Any) -> bool:
        try:
            return self.greater_than_or_equals(other)
        except TypeError:
            return NotImplemented

    def __hash__(self) -> int:
        # Equal ints, floats and fractions.Fraction values share a hash.
        reduced = self.reduced()
        if Fraction.is_nan(reduced):
            return hash(NAN)
        if isinstance(reduced._numerator, int) and isinstance(reduced._denominator, int):
            return hash(reduced.as_fraction())
        return hash(reduced.to_number())

    # ------------------------------------------------------------------
    # Arithmetic
    def added(self, other: "Fraction") -> "Fraction":
        if self._denominator == other._denominator:
            top = _add(self._sign * self._numerator, other._sign * other._numerator)
            return Fraction(top, self._denominator).reduced()
        top = _add(
            _mul(self._sign * self._numerator, other._denominator),
            _mul(other._sign * other._numerator, self._denominator),
        )
        return Fraction(top, _mul(self._denominator, other._denominator)).reduced()

    def subtracted(self, other: "Fraction") -> "Fraction":
        return self.added(other.negated())

    def multiplied(self, other: "Fraction") -> "Fraction":
        top = _mul(self._sign * self._numerator, other._sign * other._numerator)
        return Fraction(top, _mul(self._denominator, other._denominator)).reduced()

    def divided(self, other: "Fraction") -> "Fraction":
        """Multiply by the reciprocal; dividing by zero gives the invalid fraction."""
        return self.multiplied(Fraction(other._sign * other._denominator, other._numerator))

    def negated(self) -> "Fraction":
        return Fraction(-self._sign * self._numerator, self._denominator)

    def absolute(self) -> "Fraction":
        return Fraction(self._numerator, self._denominator)

    # ------------------------------------------------------------------
    # Numeric protocol
    def __float__(self) -> float:
        return self.to_number()

    def __int__(self) -> int:
        if isinstance(self._numerator, int) and isinstance(self._denominator, int):
            return self._sign * (self._numerator // self._denominator)
        return int(self.to_number())

    def __bool__(self) -> bool:
        return self._numerator != 0

    # ------------------------------------------------------------------
    # Representation
    def to_string(self) -> str:
        top = self._sign * self._numerator
        if self._denominator == 1:
            return str(top)
        return f"{top}/{self._denominator}"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Fraction({self._sign * self._numerator!r}, {self._denominator!r})"

    def __format__(self, format_spec: str) -> str:
        if format_spec in ("", "r", "R"):
            return str(self)
        try:
            return format(float(self), format_spec)
        except (ValueError, TypeError):
            return format(str(self), format_spec)

    # ------------------------------------------------------------------
    # Operator helpers
    def _binary_operation(self, other: Any, op):
        if isinstance(other, (np.ndarray, list, tuple)):
            return _elementwise(other, lambda x: op(self, _to_fraction(x)))
        try:
            other_frac = _to_fraction(other)
        except TypeError:
            return NotImplemented
        return op(self, other_frac)

    def _reflected_operation(self, other: Any, op):
        if isinstance(other, (np.ndarray, list, tuple)):
            return _elementwise(other, lambda x: op(_to_fraction(x), self))
        try:
            other_frac = _to_fraction(other)
        except TypeError:
            return NotImplemented
        return op(other_frac, self)

    def _coerce_power(self, value: Any) -> int:
        if isinstance(value, numbers.Integral):
            return int(value)
        if isinstance(value, Fraction):
            if Fraction.is_nan(value) or not value.is_integer():
                raise ValueError("Exponent must be an integer")
            return int(value)
        if isinstance(value, np.generic):
            return self._coerce_power(value.item())
        if isinstance(value, numbers.Real):
            if not float(value).is_integer():
                raise ValueError("Exponent must be an integer")
            return int(value)
        raise TypeError("Unsupported exponent type")

    # ------------------------------------------------------------------
    # Arithmetic operators
    def __add__(self, other: Any) -> Any:
        return self._binary_operation(other, Fraction.added)

    def __radd__(self, other: Any) -> Any:
        return self._reflected_operation(other, Fraction.added)

    def __sub__(self, other: Any) -> Any:
        return self._binary_operation(other, Fraction.subtracted)

    def __rsub__(self, other: Any) -> Any:
        return self._reflected_operation(other, Fraction.subtracted)

    def __mul__(self, other: Any) -> Any:
        return self._binary_operation(other, Fraction.multiplied)

    def __rmul__(self, other: Any) -> Any:
        return self._reflected_operation(other, Fraction.multiplied)

    def __truediv__(self, other: Any) -> Any:
        return self._binary_operation(other, Fraction.divided)

    def __rtruediv__(self, other: Any) -> Any:
        return self._reflected_operation(other, Fraction.divided)

    def __pow__(self, exponent: Any) -> Any:
        if isinstance(exponent, np.ndarray):
            return _elementwise(exponent, self.__pow__)
        power = self._coerce_power(exponent)
        if Fraction.is_nan(self):
            return Fraction.nan()
        sign = self._sign if power % 2 else 1
        if power == 0:
            return Fraction(1, 1)
        if power > 0:
            return Fraction(
                sign * _power(self._numerator, power), _power(self._denominator, power)
            ).reduced()
        if self._numerator == 0:
            return Fraction.nan()
        positive = -power
        return Fraction(
            sign * _power(self._denominator, positive), _power(self._numerator, positive)
        ).reduced()

    def __neg__(self) -> "Fraction":
        return self.negated()

    def __pos__(self) -> "Fraction":
        return self

    def __abs__(self) -> "Fraction":
        return self.absolute()

    # ------------------------------------------------------------------
    # NumPy interoperability
    def __array_ufunc__(self, ufunc, method, *inputs, **kwargs):
        operation = _UFUNC_OPERATIONS.get(ufunc)
        if method != "__call__" or kwargs or operation is None:
            return NotImplemented

        def apply(*args):
            return operation(*(_to_fraction(arg) for arg in args))

        if not any(isinstance(value, np.ndarray) for value in inputs):
            return apply(*inputs)
        arrays = [np.asarray(value, dtype=object) for value in inputs]
        return np.frompyfunc(apply, len(arrays), 1)(*arrays)


# Ufuncs answered with Fraction arithmetic; anything else is left to NumPy.
_UFUNC_OPERATIONS = {
    np.add: Fraction.added,
    np.subtract: Fraction.subtracted,
    np.multiply: Fraction.multiplied,
    np.divide: Fraction.divided,
    np.negative: Fraction.negated,
    np.positive: Fraction.__pos__,
    np.absolute: Fraction.absolute,
    np.power: Fraction.__pow__,
}


def _elementwise(values: Any, func) -> Any:
    return np.frompyfunc(func, 1, 1)(np.asarray(values, dtype=object))


def _to_fraction(value: Any) -> Fraction:
    """Interpret a numeric scalar as a :class:`Fraction`."""
    if isinstance(value, Fraction):
        return value
    if isinstance(value, np.generic):
        return _to_fraction(value.item())
    if isinstance(value, numbers.Rational):
        return Fraction(value.numerator, value.denominator)
    if isinstance(value, numbers.Real):
        real = float(value)
        if not math.isfinite(real):
            return Fraction(real, 1)
        # repr() gives the shortest decimal that round-trips, so 0.1 -> 1/10
        # rather than the binary expansion.
        return Fraction.from_fraction(fractions.Fraction(repr(real)))
    raise TypeError(f"Cannot interpret {type(value)!r} as Fraction")


def _comparison_operand(value: Any) -> Union[Fraction, numbers.Real]:
    # Plain numbers compare by value; fractional types compare structurally.
    if isinstance(value, Fraction):
        return value
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, numbers.Rational) and not isinstance(value, numbers.Integral):
        return Fraction.from_fraction(value)
    if isinstance(value, numbers.Real):
        return value
    raise TypeError(f"Cannot compare Fraction with {type(value)!r}")


def fractionize(value: NumberLike) -> Fraction:
    """Coerce a number, a fraction or a string into :class:`Fraction`."""
    if isinstance(value, str):
        return Fraction.from_string(value)
    return _to_fraction(value)


def as_fraction_array(values: Any) -> "np.ndarray":
    """Return an object array holding ``values`` converted with :func:`fractionize`.

    ``values`` may be nested sequences or an existing array of numbers,
    strings or fractions; the shape is kept.
    """
    return np.asarray(_elementwise(values, fractionize), dtype=object)


__all__ = [
    "Fraction",
    "NAN",
    "fractionize",
    "as_fraction_array",
]
