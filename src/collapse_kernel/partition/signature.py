"""
Totally ordered partition signatures.

A Signature is a tagged value summarizing an element's predicate
outcomes. Four variants, ranked in this fixed order:

    Bits  <  Text  <  PairInt  <  Tuple

LOCKED CONTRACT: the cross-variant rank and the within-variant order
govern quotient class iteration and therefore every quotient digest.

Within a variant:
- Bits:    element-wise (False < True), then shorter first
- Text:    code point order (equal to UTF-8 byte order)
- PairInt: lexicographic on (a, b)
- Tuple:   element-wise recursive, then shorter first
"""

from dataclasses import dataclass
from functools import total_ordering
from typing import Any, Dict, Iterable, Tuple

from collapse_kernel.foundation.canon import INT64_MIN

INT64_MAX = (1 << 63) - 1

# Variant rank table
RANK_BITS = 0
RANK_TEXT = 1
RANK_PAIR_INT = 2
RANK_TUPLE = 3


@total_ordering
class Signature:
    """Base class for signature variants. Not instantiated directly."""

    rank: int = -1

    def sort_key(self) -> Tuple[int, Any]:
        raise NotImplementedError

    def __lt__(self, other: 'Signature') -> bool:
        if not isinstance(other, Signature):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def to_canonical(self) -> Any:
        raise NotImplementedError


@dataclass(frozen=True, eq=True)
class BitsSignature(Signature):
    """Ordered predicate outcomes."""
    bits: Tuple[bool, ...]
    rank = RANK_BITS

    def __post_init__(self):
        bits = tuple(self.bits)
        for b in bits:
            if not isinstance(b, bool):
                raise TypeError(f"Bits signature entries must be bool, got {type(b).__name__}")
        object.__setattr__(self, 'bits', bits)

    def sort_key(self) -> Tuple[int, Any]:
        return (self.rank, self.bits)

    def to_canonical(self) -> Any:
        return list(self.bits)

    def __str__(self) -> str:
        return ''.join('1' if b else '0' for b in self.bits)


@dataclass(frozen=True, eq=True)
class TextSignature(Signature):
    text: str
    rank = RANK_TEXT

    def __post_init__(self):
        if not isinstance(self.text, str):
            raise TypeError("Text signature requires a str")

    def sort_key(self) -> Tuple[int, Any]:
        return (self.rank, self.text)

    def to_canonical(self) -> Any:
        return self.text


@dataclass(frozen=True, eq=True)
class PairIntSignature(Signature):
    a: int
    b: int
    rank = RANK_PAIR_INT

    def __post_init__(self):
        for v in (self.a, self.b):
            if isinstance(v, bool) or not isinstance(v, int):
                raise TypeError("PairInt signature requires two ints")
            if v < INT64_MIN or v > INT64_MAX:
                raise ValueError(f"PairInt component {v} outside signed 64-bit range")

    def sort_key(self) -> Tuple[int, Any]:
        return (self.rank, (self.a, self.b))

    def to_canonical(self) -> Any:
        return {"a": self.a, "b": self.b}


@dataclass(frozen=True, eq=True)
class TupleSignature(Signature):
    """Composite signature of nested signatures."""
    items: Tuple[Signature, ...]
    rank = RANK_TUPLE

    def __post_init__(self):
        items = tuple(self.items)
        for item in items:
            if not isinstance(item, Signature):
                raise TypeError("Tuple signature members must be Signatures")
        object.__setattr__(self, 'items', items)

    def sort_key(self) -> Tuple[int, Any]:
        return (self.rank, tuple(item.sort_key() for item in self.items))

    def to_canonical(self) -> Any:
        return [item.to_canonical() for item in self.items]


def bits(values: Iterable[bool]) -> BitsSignature:
    return BitsSignature(tuple(values))


def signature_to_canonical(sig: Signature) -> Any:
    """
    Canonical value for a signature, used by quotient digests.

    Bits -> [true,false,...], Text -> "...", PairInt -> {"a":..,"b":..},
    Tuple -> [canonical members...]
    """
    return sig.to_canonical()


def describe_signature(sig: Signature) -> Dict[str, Any]:
    """Human-readable variant/value pair for trace output."""
    return {"variant": type(sig).__name__.replace("Signature", ""), "value": sig.to_canonical()}


__all__ = [
    'Signature',
    'BitsSignature',
    'TextSignature',
    'PairIntSignature',
    'TupleSignature',
    'RANK_BITS',
    'RANK_TEXT',
    'RANK_PAIR_INT',
    'RANK_TUPLE',
    'bits',
    'signature_to_canonical',
    'describe_signature',
]
