"""
Quotient / partition engine.

Partitions a finite domain into equivalence classes keyed by Signature.
Classes iterate in Signature total order; members keep encounter order.

The quotient digest hashes only the partition SHAPE:

    SHA-256(canonical_bytes([{"count": n, "sig": <sig>}, ...]))

Two structurally identical partitions over different domains hash
identically. Which concrete elements populate a class is not covered.
"""

import logging
from types import MappingProxyType
from typing import Callable, Dict, Generic, Iterable, Iterator, List, Mapping, Optional, Tuple, TypeVar

from collapse_kernel.foundation.canon import canonical_bytes
from collapse_kernel.foundation.digest import Digest, sha256_bytes
from .signature import Signature, signature_to_canonical

logger = logging.getLogger(__name__)

E = TypeVar('E')


class Quotient(Generic[E]):
    """
    Immutable, ordered mapping Signature -> tuple of members.

    Build with Quotient.from_signatures().
    """

    __slots__ = ('_classes',)

    def __init__(self, classes: Mapping[Signature, Tuple[E, ...]]):
        ordered = {sig: tuple(classes[sig]) for sig in sorted(classes)}
        self._classes = MappingProxyType(ordered)

    @classmethod
    def from_signatures(
        cls,
        elements: Iterable[E],
        signature_fn: Callable[[E], Signature],
    ) -> 'Quotient[E]':
        """
        Evaluate signature_fn per element and group by signature.

        Args:
            elements: Domain elements, in encounter order
            signature_fn: Pure function element -> Signature

        Returns:
            Quotient with classes in Signature order
        """
        grouped: Dict[Signature, List[E]] = {}
        count = 0
        for element in elements:
            sig = signature_fn(element)
            if not isinstance(sig, Signature):
                raise TypeError(
                    f"signature_fn must return a Signature, got {type(sig).__name__}"
                )
            grouped.setdefault(sig, []).append(element)
            count += 1
        logger.debug("Partitioned %d elements into %d classes", count, len(grouped))
        return cls(grouped)

    @property
    def classes(self) -> Mapping[Signature, Tuple[E, ...]]:
        return self._classes

    def size(self) -> int:
        """Number of classes."""
        return len(self._classes)

    def __len__(self) -> int:
        return len(self._classes)

    def __iter__(self) -> Iterator[Signature]:
        return iter(self._classes)

    def items(self):
        return self._classes.items()

    def members(self, sig: Signature) -> Tuple[E, ...]:
        return self._classes[sig]

    def element_count(self) -> int:
        return sum(len(m) for m in self._classes.values())

    def class_sizes(self) -> List[int]:
        return [len(m) for m in self._classes.values()]

    def largest_class(self) -> Optional[Tuple[Signature, Tuple[E, ...]]]:
        """Last class (in signature order) with the most members."""
        best = None
        for sig, members in self._classes.items():
            if best is None or len(members) >= len(best[1]):
                best = (sig, members)
        return best

    def smallest_class(self) -> Optional[Tuple[Signature, Tuple[E, ...]]]:
        """First class (in signature order) with the fewest members."""
        best = None
        for sig, members in self._classes.items():
            if best is None or len(members) < len(best[1]):
                best = (sig, members)
        return best

    def shape(self) -> List[Dict[str, object]]:
        """Canonical shape: [{"sig": ..., "count": n}, ...] in class order."""
        return [
            {"sig": signature_to_canonical(sig), "count": len(members)}
            for sig, members in self._classes.items()
        ]

    def __repr__(self) -> str:
        return f"Quotient(classes={self.size()}, elements={self.element_count()})"


def quotient_digest(quotient: Quotient) -> Digest:
    """Hash over the ordered {signature, member count} pairs."""
    return sha256_bytes(canonical_bytes(quotient.shape()))


def quotient_digest_hex(quotient: Quotient) -> str:
    return quotient_digest(quotient).hex()


__all__ = [
    'Quotient',
    'quotient_digest',
    'quotient_digest_hex',
]
