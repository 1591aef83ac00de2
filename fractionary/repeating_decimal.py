"""Parsing of decimal notation with an optional repeating block."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

# 12.34(567): integer digits, optional non-repeating digits after the dot,
# optional parenthesised repeating digits.
_DECIMAL_PATTERN = re.compile(
    r"^(?P<integer>[+-]?\d+)"
    r"(?:\.(?P<non_repeating>\d+)?(?:\((?P<repeating>\d+)\))?)?$",
    re.ASCII,
)


@dataclass(frozen=True)
class RepeatingDecimal:
    """A decimal split into its digit groups.

    The groups are kept as strings: ``"03"`` and ``"3"`` have different place
    values and must not be collapsed to the same integer.
    """

    sign: int
    integer: str
    non_repeating: Optional[str] = None
    repeating: Optional[str] = None

    @classmethod
    def from_string(cls, text: str) -> Optional["RepeatingDecimal"]:
        """Parse ``text`` such as ``"-1.23(456)"``.

        Returns ``None`` when ``text`` is not valid decimal notation.
        """
        match = _DECIMAL_PATTERN.match(text.strip())
        if match is None:
            logger.debug("Not a repeating decimal: %r", text)
            return None
        integer = match.group("integer")
        sign = -1 if integer.startswith("-") else 1
        return cls(
            sign=sign,
            integer=integer.lstrip("+-"),
            non_repeating=match.group("non_repeating"),
            repeating=match.group("repeating"),
        )

    def __str__(self) -> str:
        text = ("-" if self.sign < 0 else "") + self.integer
        if self.non_repeating is None and self.repeating is None:
            return text
        text += "." + (self.non_repeating or "")
        if self.repeating is not None:
            text += f"({self.repeating})"
        return text


__all__ = ["RepeatingDecimal"]
