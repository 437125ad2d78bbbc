"""
SHA-256 digest primitives.

Digest is a fixed 32-byte value rendered as 64 lowercase hex characters
with no prefix. Trace output adds a "sha256:" prefix for humans only.
"""

import hashlib
from dataclasses import dataclass
from typing import Any

from .canon import canonical_bytes

DIGEST_SIZE = 32


@dataclass(frozen=True)
class Digest:
    """Immutable 256-bit hash value."""
    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, bytes) or len(self.value) != DIGEST_SIZE:
            raise ValueError(f"Digest must be exactly {DIGEST_SIZE} bytes")

    def hex(self) -> str:
        return self.value.hex()

    def __str__(self) -> str:
        return self.hex()


def sha256_bytes(data: bytes) -> Digest:
    """Hash raw bytes."""
    return Digest(hashlib.sha256(data).digest())


def sha256_hex(digest: Digest) -> str:
    """Lowercase hex rendering of a digest."""
    return digest.hex()


def canonical_hash(value: Any) -> Digest:
    """SHA-256 over the canonical bytes of a value."""
    return sha256_bytes(canonical_bytes(value))


def canonical_hash_hex(value: Any) -> str:
    """
    Compute the hex SHA-256 of a value's canonical bytes.

    This is the standard hash for every payload in the system.

    Returns:
        64-character lowercase hex string
    """
    return canonical_hash(value).hex()


__all__ = [
    'DIGEST_SIZE',
    'Digest',
    'sha256_bytes',
    'sha256_hex',
    'canonical_hash',
    'canonical_hash_hex',
]
