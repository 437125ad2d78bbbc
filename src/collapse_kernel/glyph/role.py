"""
Syntactic role table for the printable-ASCII universe.

Fixed decision table; the gating rule in the profile compiler only asks
whether a symbol is a Delimiter, but every role is kept distinct so that
same-role unions are recognised.
"""

from enum import Enum
from typing import Dict


class CharRole(str, Enum):
    LETTER = "letter"
    DIGIT = "digit"
    DELIMITER = "delimiter"
    PUNCTUATION = "punctuation"
    SPACE = "space"
    OTHER = "other"


DELIMITERS = frozenset("()[]{}")
SPACES = frozenset(" \t")
PUNCTUATION = frozenset("!\"#$%&'*+,-./:;<=>?@\\^_`|~")

_ROLE_TABLE: Dict[str, CharRole] = {}
for _c in "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ":
    _ROLE_TABLE[_c] = CharRole.LETTER
for _c in "0123456789":
    _ROLE_TABLE[_c] = CharRole.DIGIT
for _c in DELIMITERS:
    _ROLE_TABLE[_c] = CharRole.DELIMITER
for _c in SPACES:
    _ROLE_TABLE[_c] = CharRole.SPACE
for _c in PUNCTUATION:
    _ROLE_TABLE[_c] = CharRole.PUNCTUATION
del _c


def classify_role(ch: str) -> CharRole:
    """Role of a single character; anything not in the table is OTHER."""
    return _ROLE_TABLE.get(ch, CharRole.OTHER)


def union_permitted(c1: str, c2: str) -> bool:
    """
    Syntax-strict gate: same role, or neither symbol is a Delimiter.
    """
    r1 = classify_role(c1)
    r2 = classify_role(c2)
    if r1 == r2:
        return True
    return r1 != CharRole.DELIMITER and r2 != CharRole.DELIMITER


__all__ = [
    'CharRole',
    'DELIMITERS',
    'SPACES',
    'PUNCTUATION',
    'classify_role',
    'union_permitted',
]
