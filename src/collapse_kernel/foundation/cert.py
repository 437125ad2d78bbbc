"""
Collapse Kernel: Certificates and Certificate Chains

A KernelCertificate is a named, versioned snapshot of a canonical payload
together with SHA-256(canonical_bytes(payload)). The hash is computed once
at construction and never recomputed.

A CertificateChain is an ordered hash-of-hashes over named certificate
hashes:

    chain_hash = SHA-256(canonical_bytes([{"hash": h1, "name": n1}, ...]))

Key invariants:
1. The certificate hash covers the payload only. name and version are
   metadata and are NOT covered by the hash.
2. Chain items are neither deduplicated nor reordered.
3. Changing any item hash, or the item order, changes the chain hash.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple

from .canon import canonical_bytes, freeze_value, thaw_value
from .digest import Digest, sha256_bytes, sha256_hex


class ChainVerificationError(Exception):
    """Raised when a chain's stored hash does not match its items."""
    pass


@dataclass(frozen=True)
class KernelCertificate:
    """
    Named, versioned, hashed canonical payload.

    Build with KernelCertificate.create(); the constructor does not hash.
    """
    name: str
    version: str
    payload: Any
    hash: Digest

    @classmethod
    def create(cls, name: str, version: str, payload: Any) -> 'KernelCertificate':
        """
        Freeze the payload and hash its canonical bytes.

        Raises:
            CanonicalEncodingError: If the payload is not canonical
        """
        frozen = freeze_value(payload)
        digest = sha256_bytes(canonical_bytes(frozen))
        return cls(name=name, version=version, payload=frozen, hash=digest)

    @property
    def hash_hex(self) -> str:
        return sha256_hex(self.hash)

    def canonical_payload_bytes(self) -> bytes:
        return canonical_bytes(self.payload)

    def to_canonical_dict(self) -> Dict[str, Any]:
        """Certificate as a canonical mapping, suitable for embedding."""
        return {
            "kernel_name": self.name,
            "kernel_version": self.version,
            "payload": thaw_value(self.payload),
            "kernel_hash": self.hash_hex,
        }


@dataclass(frozen=True)
class CertItem:
    """One link of a chain: certificate name and its hex hash."""
    name: str
    hash_hex: str

    @classmethod
    def from_certificate(cls, cert: KernelCertificate) -> 'CertItem':
        return cls(name=cert.name, hash_hex=cert.hash_hex)

    def to_canonical_dict(self) -> Dict[str, str]:
        return {"name": self.name, "hash": self.hash_hex}


def cert_chain_hash(items: Iterable[CertItem]) -> str:
    """
    Compute the chain hash over items in the given order.

    Args:
        items: Ordered chain items

    Returns:
        64-character hex chain hash
    """
    arr = [item.to_canonical_dict() for item in items]
    return sha256_hex(sha256_bytes(canonical_bytes(arr)))


@dataclass(frozen=True)
class CertificateChain:
    """Ordered sequence of certificate items and their chain hash."""
    items: Tuple[CertItem, ...]
    chain_hash_hex: str

    @classmethod
    def build(cls, items: Iterable[CertItem]) -> 'CertificateChain':
        items = tuple(items)
        return cls(items=items, chain_hash_hex=cert_chain_hash(items))

    @classmethod
    def from_certificates(cls, certs: Iterable[KernelCertificate]) -> 'CertificateChain':
        return cls.build(CertItem.from_certificate(c) for c in certs)

    def is_valid(self) -> bool:
        return cert_chain_hash(self.items) == self.chain_hash_hex

    def verify(self) -> None:
        """
        Recompute the chain hash from the items.

        Raises:
            ChainVerificationError: If the stored hash does not match
        """
        recomputed = cert_chain_hash(self.items)
        if recomputed != self.chain_hash_hex:
            raise ChainVerificationError(
                f"Chain hash mismatch: stored {self.chain_hash_hex[:16]}..., "
                f"recomputed {recomputed[:16]}..."
            )

    def names(self) -> Tuple[str, ...]:
        return tuple(item.name for item in self.items)


__all__ = [
    'ChainVerificationError',
    'KernelCertificate',
    'CertItem',
    'CertificateChain',
    'cert_chain_hash',
]
