"""
QE - canonical rationals.

A QE is stored fully reduced with den > 0 and the sign folded into num.
Ordering is exact (Python integers never overflow the cross products),
tie-broken by den then num.
"""

from dataclasses import dataclass
from fractions import Fraction
from functools import total_ordering
from math import gcd
from typing import Any, Dict

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


class ConstructionError(ValueError):
    """Raised when a QE cannot be constructed (zero denominator, overflow)."""
    pass


def _check_i64(value: Any, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConstructionError(f"QE {field_name} must be int, got {type(value).__name__}")
    if value < INT64_MIN or value > INT64_MAX:
        raise ConstructionError(f"QE {field_name} {value} outside signed 64-bit range")


@total_ordering
@dataclass(frozen=True, eq=True, init=False)
class QE:
    num: int
    den: int

    def __init__(self, num: int, den: int):
        _check_i64(num, "num")
        _check_i64(den, "den")
        if den == 0:
            raise ConstructionError(f"QE({num}, {den}): zero denominator")
        if den < 0:
            num, den = -num, -den
        g = gcd(num, den)
        num //= g
        den //= g
        # -INT64_MIN folds out of range
        _check_i64(num, "num")
        _check_i64(den, "den")
        object.__setattr__(self, 'num', num)
        object.__setattr__(self, 'den', den)

    def __lt__(self, other: 'QE') -> bool:
        if not isinstance(other, QE):
            return NotImplemented
        lhs = self.num * other.den
        rhs = other.num * self.den
        if lhs != rhs:
            return lhs < rhs
        # unreachable for reduced values; kept for totality
        return (self.den, self.num) < (other.den, other.num)

    def is_integer(self) -> bool:
        return self.den == 1

    def to_fraction(self) -> Fraction:
        return Fraction(self.num, self.den)

    def to_canonical_dict(self) -> Dict[str, int]:
        return {"num": self.num, "den": self.den}

    def __str__(self) -> str:
        return f"{self.num}/{self.den}"

    def __repr__(self) -> str:
        return f"QE({self.num}, {self.den})"


__all__ = [
    'ConstructionError',
    'QE',
    'INT64_MIN',
    'INT64_MAX',
]
