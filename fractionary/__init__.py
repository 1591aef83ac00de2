"""Exact fractions parsed from fraction or repeating-decimal notation."""

from .fraction import (
    NAN,
    Fraction,
    as_fraction_array,
    fractionize,
)
from .repeating_decimal import RepeatingDecimal

__all__ = [
    "Fraction",
    "RepeatingDecimal",
    "NAN",
    "fractionize",
    "as_fraction_array",
]
