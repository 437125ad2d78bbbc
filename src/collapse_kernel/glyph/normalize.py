"""
Profile-driven string normalizer.

normalize_str() maps every character through the profile's
representative map. Representatives are fixed points of their own class,
so normalization is idempotent for every input that succeeds.
"""

from typing import FrozenSet

from .profile import EquivalenceProfile


class NormalizationError(ValueError):
    """Strict normalization met a character outside the 95-symbol universe."""

    def __init__(self, char: str, position: int = -1, profile_name: str = ""):
        self.char = char
        self.position = position
        self.profile_name = profile_name
        where = f" at position {position}" if position >= 0 else ""
        super().__init__(
            f"Non-ASC7 char {char!r} (U+{ord(char):04X}){where} in strict mode"
        )


def normalize_str(profile: EquivalenceProfile, text: str, strict: bool = True) -> str:
    """
    Normalize text through a compiled profile.

    Args:
        profile: Compiled equivalence profile
        text: Input string
        strict: Fail on characters outside the universe (default) or pass
                them through unchanged

    Returns:
        Normalized string

    Raises:
        NormalizationError: strict mode and an out-of-universe character
    """
    out = []
    for pos, ch in enumerate(text):
        rep = profile.rep(ch)
        if rep is not None:
            out.append(rep)
        elif strict:
            raise NormalizationError(ch, pos, profile.name)
        else:
            out.append(ch)
    return ''.join(out)


def _witness_set(profile: EquivalenceProfile) -> FrozenSet[str]:
    return frozenset(profile.witness_alphabet)


def verify_terminal(profile: EquivalenceProfile, text: str) -> bool:
    """True iff every character of text is in the witness alphabet."""
    witness = _witness_set(profile)
    return all(ch in witness for ch in text)


def is_normalized(profile: EquivalenceProfile, text: str) -> bool:
    """True iff text is a fixed point of strict normalization."""
    try:
        return normalize_str(profile, text, strict=True) == text
    except NormalizationError:
        return False


__all__ = [
    'NormalizationError',
    'normalize_str',
    'verify_terminal',
    'is_normalized',
]
