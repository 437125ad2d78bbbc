"""
SemBits - named test families, their signatures and certificates.

A Test pairs a normalized identifier (passed through the strict
normalizer, so identifiers are canonical strings) with a pure predicate.
A TestFamily's signature of an element is the ordered bit vector of
predicate results, index-aligned with the family.

Provenance limitation: tests_hash covers the identifiers and a free-form
implementation tag, never the predicate code. Changing a predicate
without bumping the tag silently changes what a tests_hash means.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Tuple, TypeVar

from collapse_kernel.foundation.cert import KernelCertificate
from collapse_kernel.foundation.digest import canonical_hash_hex
from collapse_kernel.glyph.normalize import normalize_str
from collapse_kernel.glyph.profile import EquivalenceProfile
from collapse_kernel.partition.entropy import to_microbits
from collapse_kernel.partition.quotient import Quotient
from collapse_kernel.partition.signature import BitsSignature

logger = logging.getLogger(__name__)

E = TypeVar('E')

SEMBIT_KERNEL_NAME = "sembit"
SEMBIT_KERNEL_VERSION = "1.0.0"


@dataclass(frozen=True)
class Test(Generic[E]):
    """Named predicate. id_norm must already be normalized."""
    id_norm: str
    predicate: Callable[[E], bool]

    # keep pytest from collecting this class
    __test__ = False

    @classmethod
    def named(
        cls,
        profile: EquivalenceProfile,
        raw_id: str,
        predicate: Callable[[E], bool],
    ) -> 'Test[E]':
        """Build a test whose identifier is strictly normalized through profile."""
        return cls(id_norm=normalize_str(profile, raw_id, strict=True), predicate=predicate)

    def __call__(self, element: E) -> bool:
        return bool(self.predicate(element))


@dataclass(frozen=True)
class TestFamily(Generic[E]):
    """Ordered list of tests."""
    tests: Tuple[Test[E], ...]

    __test__ = False

    def __post_init__(self):
        object.__setattr__(self, 'tests', tuple(self.tests))

    def __len__(self) -> int:
        return len(self.tests)

    def ids(self) -> Tuple[str, ...]:
        return tuple(t.id_norm for t in self.tests)

    def signature(self, element: E) -> Tuple[bool, ...]:
        return tuple(t(element) for t in self.tests)


def tests_hash_hex(family: TestFamily, impl_tag: str) -> str:
    """SHA-256 over [id_1, ..., id_n, impl_tag]."""
    return canonical_hash_hex(list(family.ids()) + [impl_tag])


def sembit_quotient(domain: Iterable[E], family: TestFamily[E]) -> Quotient[E]:
    """Standard instantiation: signature = Bits(family.signature(x))."""
    return Quotient.from_signatures(domain, lambda x: BitsSignature(family.signature(x)))


def sembit_kernel_cert(
    asc7_graph_hash_hex: str,
    confusables_graph_hash_hex: str,
    tests_hash: str,
    domain_digest: str,
    class_count: int,
    h_sem_bits: float,
    quotient_digest: str,
) -> KernelCertificate:
    """
    Certificate binding a quotient experiment to its upstream hashes.

    The entropy is stored as integer micro-bits; floats never enter a
    canonical payload.
    """
    payload = {
        "asc7_graph_hash": asc7_graph_hash_hex,
        "confusables_graph_hash": confusables_graph_hash_hex,
        "tests_hash": tests_hash,
        "domain_digest": domain_digest,
        "classes": class_count,
        "h_sem_microbits": to_microbits(h_sem_bits),
        "quotient_digest": quotient_digest,
    }
    cert = KernelCertificate.create(SEMBIT_KERNEL_NAME, SEMBIT_KERNEL_VERSION, payload)
    logger.debug("sembit cert: classes=%d hash=%s", class_count, cert.hash_hex[:16])
    return cert


__all__ = [
    'SEMBIT_KERNEL_NAME',
    'SEMBIT_KERNEL_VERSION',
    'Test',
    'TestFamily',
    'tests_hash_hex',
    'sembit_quotient',
    'sembit_kernel_cert',
]
