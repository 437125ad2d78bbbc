"""
Minimal Latin -> Greek/Cyrillic homoglyph table.

Kept as a fixed, certified table: its kernel certificate is the second
link of the certification chain.
"""

from typing import Dict

CONFUSABLES_MIN: Dict[str, str] = {
    # Latin capital -> Greek capital
    "A": "Α",
    "B": "Β",
    "E": "Ε",
    "I": "Ι",
    "K": "Κ",
    "M": "Μ",
    "N": "Ν",
    "O": "Ο",
    "P": "Ρ",
    "T": "Τ",
    "X": "Χ",
    "Y": "Υ",
    # Latin small -> Cyrillic small
    "a": "а",
    "e": "е",
    "o": "о",
    "p": "р",
    "c": "с",
    "x": "х",
    "y": "у",
}


def confusables_min_table() -> Dict[str, str]:
    """Fresh copy of the table, keys in code point order."""
    return {k: CONFUSABLES_MIN[k] for k in sorted(CONFUSABLES_MIN)}


__all__ = [
    'CONFUSABLES_MIN',
    'confusables_min_table',
]
