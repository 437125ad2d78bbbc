"""
Collapse Kernel - deterministic certification primitives.

Subpackages:
    foundation  canonical bytes, SHA-256 digests, certificates, chains
    partition   signatures, quotients, semantic entropy
    glyph       ASCII equivalence profiles, normalizer, confusables

The kernel is pure: no I/O, no global state, no clocks.
"""

__version__ = "1.0.0"
