"""
Equivalence-Class Compiler

Compiles a character-normalization profile over the fixed universe of
95 printable ASCII symbols (0x20..0x7E, code point order).

Algorithm:
1. Dense index per universe symbol.
2. Union-find over the indices.
3. Union every pair inside each glyph class, then every case pair.
   With syntax_strict, a union is allowed only if both symbols share a
   role or neither is a Delimiter. Symbols outside the universe are
   skipped silently.
4. Group indices by root -> classes (members in universe order).
5. Representative per class: first lowercase letter, else first digit,
   else smallest symbol.
6. Witness alphabet = sorted representatives.
7. graph_hash = SHA-256 over
       universe bytes
       for each class sorted by representative: 0x00 + sorted members
       0x01 + witness alphabet

LOCKED CONTRACT: the graph hash byte layout above.
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from collapse_kernel.foundation.digest import Digest
from .role import union_permitted
from .union_find import UnionFind

logger = logging.getLogger(__name__)

UNIVERSE_FIRST = 0x20
UNIVERSE_LAST = 0x7E
UNIVERSE: Tuple[str, ...] = tuple(chr(b) for b in range(UNIVERSE_FIRST, UNIVERSE_LAST + 1))
UNIVERSE_SIZE = len(UNIVERSE)

CLASS_SEPARATOR = b"\x00"
WITNESS_SEPARATOR = b"\x01"

_INDEX: Dict[str, int] = {ch: i for i, ch in enumerate(UNIVERSE)}


def ascii_universe() -> Tuple[str, ...]:
    return UNIVERSE


def universe_index(ch: str) -> Optional[int]:
    """Dense index of a universe symbol, or None if outside the universe."""
    return _INDEX.get(ch)


@dataclass(frozen=True)
class ProfileParams:
    """Compiler input."""
    name: str
    syntax_strict: bool
    glyph_classes: Tuple[Tuple[str, ...], ...] = ()
    case_pairs: Tuple[Tuple[str, str], ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'glyph_classes', tuple(tuple(g) for g in self.glyph_classes))
        object.__setattr__(self, 'case_pairs', tuple((lo, hi) for lo, hi in self.case_pairs))

    def to_canonical_dict(self) -> dict:
        return {
            "name": self.name,
            "syntax_strict": self.syntax_strict,
            "glyph_classes": [list(g) for g in self.glyph_classes],
            "case_pairs": [[lo, hi] for lo, hi in self.case_pairs],
        }


def pick_representative(members: Sequence[str]) -> str:
    """
    Representative of a class, scanning members in first-seen order.

    1. first ASCII lowercase letter
    2. else first ASCII digit
    3. else smallest symbol by code point
    """
    for ch in members:
        if 'a' <= ch <= 'z':
            return ch
    for ch in members:
        if '0' <= ch <= '9':
            return ch
    return min(members)


@dataclass(frozen=True)
class EquivalenceProfile:
    """
    Compiled, immutable normalization profile.

    Attributes:
        params: Compiler input
        universe: The 95 universe symbols in code point order
        rep_map: Universe-index -> representative symbol
        witness_alphabet: Sorted representatives, one per class
        classes: Classes sorted by representative, members by code point
        graph_hash: Digest of the structural partition
    """
    params: ProfileParams
    universe: Tuple[str, ...]
    rep_map: Tuple[str, ...]
    witness_alphabet: Tuple[str, ...]
    classes: Tuple[Tuple[str, ...], ...]
    graph_hash: Digest

    @property
    def name(self) -> str:
        return self.params.name

    @property
    def graph_hash_hex(self) -> str:
        return self.graph_hash.hex()

    def rep(self, ch: str) -> Optional[str]:
        """Representative of ch, or None if ch is outside the universe."""
        i = _INDEX.get(ch)
        if i is None:
            return None
        return self.rep_map[i]

    def class_of(self, ch: str) -> Optional[Tuple[str, ...]]:
        rep = self.rep(ch)
        if rep is None:
            return None
        for cls in self.classes:
            if rep in cls:
                return cls
        return None

    def representative_map(self) -> Dict[str, str]:
        return dict(zip(self.universe, self.rep_map))

    def class_count(self) -> int:
        return len(self.classes)


def _try_union(uf: UnionFind, c1: str, c2: str, syntax_strict: bool) -> None:
    i1 = _INDEX.get(c1)
    i2 = _INDEX.get(c2)
    if i1 is None or i2 is None:
        return
    if syntax_strict and not union_permitted(c1, c2):
        logger.debug("Union %r~%r blocked by syntax gate", c1, c2)
        return
    uf.union(i1, i2)


def _graph_hash(class_list: Iterable[Tuple[str, List[str]]], witness: Sequence[str]) -> Digest:
    hasher = hashlib.sha256()
    for ch in UNIVERSE:
        hasher.update(ch.encode('ascii'))
    for _rep, members in class_list:
        hasher.update(CLASS_SEPARATOR)
        for ch in sorted(members):
            hasher.update(ch.encode('ascii'))
    hasher.update(WITNESS_SEPARATOR)
    for ch in witness:
        hasher.update(ch.encode('ascii'))
    return Digest(hasher.digest())


def compile_profile(params: ProfileParams) -> EquivalenceProfile:
    """
    Compile an equivalence profile. Pure function of params; never fails
    on symbols outside the universe.
    """
    uf = UnionFind(UNIVERSE_SIZE)

    for group in params.glyph_classes:
        for i in range(len(group)):
            for j in range(i + 1, len(group)):
                _try_union(uf, group[i], group[j], params.syntax_strict)

    for lo, hi in params.case_pairs:
        _try_union(uf, lo, hi, params.syntax_strict)

    class_map: Dict[int, List[str]] = {}
    for i, ch in enumerate(UNIVERSE):
        class_map.setdefault(uf.find(i), []).append(ch)

    rep_map = [''] * UNIVERSE_SIZE
    reps: List[Tuple[str, List[str]]] = []
    for members in class_map.values():
        rep = pick_representative(members)
        reps.append((rep, members))
        for ch in members:
            rep_map[_INDEX[ch]] = rep

    reps.sort(key=lambda pair: pair[0])
    witness = tuple(sorted(rep for rep, _ in reps))

    graph_hash = _graph_hash(reps, witness)

    profile = EquivalenceProfile(
        params=params,
        universe=UNIVERSE,
        rep_map=tuple(rep_map),
        witness_alphabet=witness,
        classes=tuple(tuple(sorted(members)) for _, members in reps),
        graph_hash=graph_hash,
    )
    logger.debug(
        "Compiled profile %s: %d classes, graph_hash=%s",
        params.name, len(witness), graph_hash.hex()[:16],
    )
    return profile


# ============================================================================
# CANNED PROFILES
# ============================================================================

CODE_SAFE_GLYPH_CLASSES: Tuple[Tuple[str, ...], ...] = (
    ('0', 'O', 'o'),
    ('1', 'l', 'I', '|'),
    ("'", '`'),
)

ASCII_CASE_PAIRS: Tuple[Tuple[str, str], ...] = tuple(
    (chr(lo), chr(lo - 32)) for lo in range(ord('a'), ord('z') + 1)
)


def code_safe_params() -> ProfileParams:
    return ProfileParams(
        name="code_safe",
        syntax_strict=True,
        glyph_classes=CODE_SAFE_GLYPH_CLASSES,
        case_pairs=(),
    )


def auth_safe_params() -> ProfileParams:
    return ProfileParams(
        name="auth_safe",
        syntax_strict=True,
        glyph_classes=CODE_SAFE_GLYPH_CLASSES,
        case_pairs=ASCII_CASE_PAIRS,
    )


def code_safe() -> EquivalenceProfile:
    """Confusable digits/letters merged; case preserved."""
    return compile_profile(code_safe_params())


def auth_safe() -> EquivalenceProfile:
    """code_safe plus full a-z/A-Z case folding."""
    return compile_profile(auth_safe_params())


CANNED_PROFILES = {
    "code_safe": code_safe,
    "auth_safe": auth_safe,
}


__all__ = [
    'UNIVERSE',
    'UNIVERSE_SIZE',
    'ascii_universe',
    'universe_index',
    'ProfileParams',
    'EquivalenceProfile',
    'pick_representative',
    'compile_profile',
    'CODE_SAFE_GLYPH_CLASSES',
    'ASCII_CASE_PAIRS',
    'code_safe_params',
    'auth_safe_params',
    'code_safe',
    'auth_safe',
    'CANNED_PROFILES',
]
