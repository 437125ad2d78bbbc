"""
ZE - integers (signed 64-bit) and the bounded domain {-zmax, ..., zmax}.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence

from collapse_kernel.foundation.digest import canonical_hash_hex
from .q_e import INT64_MAX, INT64_MIN, ConstructionError


@dataclass(frozen=True, order=True)
class ZE:
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ConstructionError(f"ZE value must be int, got {type(self.value).__name__}")
        if self.value < INT64_MIN or self.value > INT64_MAX:
            raise ConstructionError(f"ZE value {self.value} outside signed 64-bit range")

    def __str__(self) -> str:
        return str(self.value)


def domain_ze(zmax: int) -> List[ZE]:
    """Domain {-zmax, ..., 0, ..., zmax}; empty when zmax < 0."""
    return [ZE(z) for z in range(-zmax, zmax + 1)]


def domain_digest_hex_ze(domain: Sequence[ZE]) -> str:
    return canonical_hash_hex([x.value for x in domain])


def domain_view_ze(domain: Sequence[ZE]) -> Dict[str, str]:
    view = {"kind": "Z_E", "size": str(len(domain))}
    if domain:
        view["first"] = str(domain[0].value)
        view["last"] = str(domain[-1].value)
    return dict(sorted(view.items()))


__all__ = ['ZE', 'domain_ze', 'domain_digest_hex_ze', 'domain_view_ze']
