"""
Structural numbers - finite, deterministic experiment domains.

    QE  reduced rationals      domain_qe_bounded(nmax, dmax)
    NE  naturals               domain_ne(nmax)
    ZE  integers               domain_ze(zmax)
"""

from .q_e import QE, ConstructionError
from .n_e import NE, domain_ne, domain_digest_hex_ne, domain_view_ne
from .z_e import ZE, domain_ze, domain_digest_hex_ze, domain_view_ze
from .domain import domain_qe_bounded, domain_digest_hex, domain_view_qe

__all__ = [
    'QE',
    'ConstructionError',
    'NE',
    'domain_ne',
    'domain_digest_hex_ne',
    'domain_view_ne',
    'ZE',
    'domain_ze',
    'domain_digest_hex_ze',
    'domain_view_ze',
    'domain_qe_bounded',
    'domain_digest_hex',
    'domain_view_qe',
]
