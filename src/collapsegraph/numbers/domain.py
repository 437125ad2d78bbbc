"""
Bounded QE domains and their digests.

domain_qe_bounded(nmax, dmax) enumerates every num in [-nmax, nmax] over
every den in [1, dmax], reduces, sorts by value and drops duplicate
(num, den) pairs. The domain digest fingerprints exactly which finite
domain fed a quotient computation:

    SHA-256(canonical_bytes([{"den": d, "num": n}, ...]))
"""

import logging
from typing import Dict, List, Sequence

from collapse_kernel.foundation.digest import canonical_hash_hex
from .q_e import QE

logger = logging.getLogger(__name__)


def domain_qe_bounded(nmax: int, dmax: int) -> List[QE]:
    """
    Sorted, duplicate-free reduced rationals num/den with
    |num| <= nmax and 1 <= den <= dmax.
    """
    values = sorted(
        QE(num, den)
        for den in range(1, dmax + 1)
        for num in range(-nmax, nmax + 1)
    )
    out: List[QE] = []
    for q in values:
        if not out or out[-1] != q:
            out.append(q)
    logger.debug("domain_qe_bounded(%d, %d): %d of %d candidates", nmax, dmax, len(out), len(values))
    return out


def domain_digest_hex(domain: Sequence[QE]) -> str:
    """Digest over the domain in its current order (callers keep it sorted)."""
    return canonical_hash_hex([q.to_canonical_dict() for q in domain])


def domain_view_qe(domain: Sequence[QE]) -> Dict[str, str]:
    view = {"kind": "Q_E", "size": str(len(domain))}
    if domain:
        view["first"] = str(domain[0])
        view["last"] = str(domain[-1])
    return dict(sorted(view.items()))


__all__ = ['domain_qe_bounded', 'domain_digest_hex', 'domain_view_qe']
