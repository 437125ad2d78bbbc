"""
Kernel certificates for the glyph layer.

    asc7              profile identity (name, strictness, witness size,
                      graph hash)
    asc7_confusables  the homoglyph table
"""

from collapse_kernel.foundation.cert import KernelCertificate
from .confusables import confusables_min_table
from .profile import EquivalenceProfile

ASC7_KERNEL_NAME = "asc7"
ASC7_KERNEL_VERSION = "1.0.0"
CONFUSABLES_KERNEL_NAME = "asc7_confusables"
CONFUSABLES_KERNEL_VERSION = "1.0.0"


def asc7_kernel_cert(profile: EquivalenceProfile) -> KernelCertificate:
    payload = {
        "profile_name": profile.params.name,
        "syntax_strict": profile.params.syntax_strict,
        "witness_len": len(profile.witness_alphabet),
        "graph_hash_hex": profile.graph_hash_hex,
    }
    return KernelCertificate.create(ASC7_KERNEL_NAME, ASC7_KERNEL_VERSION, payload)


def confusables_kernel_cert() -> KernelCertificate:
    table = confusables_min_table()
    payload = {
        "table_size": len(table),
        "pairs": [{"src": src, "dst": dst} for src, dst in table.items()],
    }
    return KernelCertificate.create(CONFUSABLES_KERNEL_NAME, CONFUSABLES_KERNEL_VERSION, payload)


__all__ = [
    'ASC7_KERNEL_NAME',
    'ASC7_KERNEL_VERSION',
    'CONFUSABLES_KERNEL_NAME',
    'CONFUSABLES_KERNEL_VERSION',
    'asc7_kernel_cert',
    'confusables_kernel_cert',
]
