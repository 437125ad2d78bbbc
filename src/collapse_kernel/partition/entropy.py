"""
Semantic entropy of a partition.

sem_entropy_bits(k) = log2(k). Zero classes (empty domain) is an error:
log2(0) is negative infinity and must never reach a certificate.
"""

import math

MICROBITS_PER_BIT = 1_000_000


class EmptyPartitionError(ValueError):
    """Raised when entropy is requested for a partition with no classes."""
    pass


def log2_u64(n: int) -> float:
    """log2 of a positive integer."""
    if n <= 0:
        raise EmptyPartitionError(f"log2 undefined for {n}")
    return math.log2(n)


def sem_entropy_bits(class_count: int) -> float:
    """
    Semantic entropy, in bits, of a partition with class_count classes.

    Raises:
        EmptyPartitionError: If class_count is zero (or negative)
    """
    if class_count <= 0:
        raise EmptyPartitionError(
            f"Semantic entropy undefined for {class_count} classes (empty domain?)"
        )
    return math.log2(class_count)


def to_microbits(bits: float) -> int:
    """
    Scale an entropy value to integer micro-bits for canonical payloads.

    Halves round away from zero.
    """
    scaled = bits * MICROBITS_PER_BIT
    if scaled >= 0:
        return int(math.floor(scaled + 0.5))
    return -int(math.floor(-scaled + 0.5))


__all__ = [
    'EmptyPartitionError',
    'MICROBITS_PER_BIT',
    'log2_u64',
    'sem_entropy_bits',
    'to_microbits',
]
