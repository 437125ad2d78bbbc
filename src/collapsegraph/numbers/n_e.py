"""
NE - naturals (unsigned 64-bit) and the bounded domain {0, ..., nmax}.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence

from collapse_kernel.foundation.digest import canonical_hash_hex
from .q_e import ConstructionError

UINT64_MAX = (1 << 64) - 1


@dataclass(frozen=True, order=True)
class NE:
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ConstructionError(f"NE value must be int, got {type(self.value).__name__}")
        if self.value < 0 or self.value > UINT64_MAX:
            raise ConstructionError(f"NE value {self.value} outside unsigned 64-bit range")

    def __str__(self) -> str:
        return str(self.value)


def domain_ne(nmax: int) -> List[NE]:
    """Domain {0, 1, ..., nmax}."""
    return [NE(n) for n in range(0, nmax + 1)]


def domain_digest_hex_ne(domain: Sequence[NE]) -> str:
    """SHA-256 of the canonical array of values, in domain order."""
    return canonical_hash_hex([x.value for x in domain])


def domain_view_ne(domain: Sequence[NE]) -> Dict[str, str]:
    view = {"kind": "N_E", "size": str(len(domain))}
    if domain:
        view["first"] = str(domain[0].value)
        view["last"] = str(domain[-1].value)
    return dict(sorted(view.items()))


__all__ = ['NE', 'domain_ne', 'domain_digest_hex_ne', 'domain_view_ne']
