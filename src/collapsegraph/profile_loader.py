"""
profile_loader.py - YAML profile packs

Loads, validates and compiles equivalence-profile packs:

    name: code_safe_strict
    syntax_strict: true
    glyph_classes:
      - ["0", "O", "o"]
      - ["1", "l", "I", "|"]
    case_pairs:
      - ["a", "A"]

Validation is hard and fail-fast: every problem is collected and raised
together. Symbols must be single characters; symbols outside the
printable-ASCII universe are accepted here and skipped by the compiler.

Usage:
    profile = load_profile_yaml("packs/code_safe.yaml")
    print(profile.graph_hash_hex)
"""

import logging
import re
from pathlib import Path
from typing import Any, List, Union

import yaml

from collapse_kernel.foundation.digest import canonical_hash_hex
from collapse_kernel.glyph.profile import (
    CANNED_PROFILES,
    EquivalenceProfile,
    ProfileParams,
    compile_profile,
)

logger = logging.getLogger(__name__)


# ============================================================================
# EXCEPTIONS
# ============================================================================

class ProfileLoaderError(Exception):
    """Base exception for profile pack errors."""
    pass


class ProfileValidationError(ProfileLoaderError):
    """Raised when profile pack validation fails."""
    def __init__(self, message: str, errors: List[str] = None):
        self.errors = errors or []
        super().__init__(message)

    def __str__(self):
        if self.errors:
            return f"{self.args[0]}\n" + "\n".join(f"  - {e}" for e in self.errors)
        return self.args[0]


# Profile name: lowercase identifier
NAME_PATTERN = re.compile(r'^[a-z][a-z0-9_]*$')

REQUIRED_FIELDS = ("name", "syntax_strict")
KNOWN_FIELDS = {"name", "syntax_strict", "glyph_classes", "case_pairs", "description"}


# ============================================================================
# VALIDATION
# ============================================================================

def _validate_symbol(value: Any, path: str) -> List[str]:
    if not isinstance(value, str):
        return [f"{path}: symbol must be a string, got {type(value).__name__}"]
    if len(value) != 1:
        return [f"{path}: symbol must be exactly one character, got {value!r}"]
    return []


def validate_profile_pack(pack: dict) -> None:
    """
    Raises:
        ProfileValidationError: With every problem found
    """
    errors: List[str] = []

    for field_name in REQUIRED_FIELDS:
        if field_name not in pack:
            errors.append(f"missing required field '{field_name}'")

    for key in pack:
        if key not in KNOWN_FIELDS:
            errors.append(f"unknown field '{key}'")

    name = pack.get("name")
    if name is not None and (not isinstance(name, str) or not NAME_PATTERN.match(name)):
        errors.append(f"name: must match {NAME_PATTERN.pattern}, got {name!r}")

    strict = pack.get("syntax_strict")
    if strict is not None and not isinstance(strict, bool):
        errors.append(f"syntax_strict: must be boolean, got {type(strict).__name__}")

    glyph_classes = pack.get("glyph_classes", [])
    if not isinstance(glyph_classes, list):
        errors.append("glyph_classes: must be a list of symbol lists")
    else:
        for i, group in enumerate(glyph_classes):
            if not isinstance(group, list):
                errors.append(f"glyph_classes[{i}]: must be a list")
                continue
            for j, sym in enumerate(group):
                errors.extend(_validate_symbol(sym, f"glyph_classes[{i}][{j}]"))

    case_pairs = pack.get("case_pairs", [])
    if not isinstance(case_pairs, list):
        errors.append("case_pairs: must be a list of [lower, upper] pairs")
    else:
        for i, pair in enumerate(case_pairs):
            if not isinstance(pair, list) or len(pair) != 2:
                errors.append(f"case_pairs[{i}]: must be a [lower, upper] pair")
                continue
            for j, sym in enumerate(pair):
                errors.extend(_validate_symbol(sym, f"case_pairs[{i}][{j}]"))

    if errors:
        raise ProfileValidationError(
            f"Profile validation failed with {len(errors)} error(s):",
            errors
        )


def compute_profile_pack_hash(pack: dict) -> str:
    """
    Deterministic pack hash over the compiler-relevant fields
    (description excluded).
    """
    hashable = {
        "name": pack.get("name"),
        "syntax_strict": pack.get("syntax_strict"),
        "glyph_classes": pack.get("glyph_classes", []),
        "case_pairs": pack.get("case_pairs", []),
    }
    return canonical_hash_hex(hashable)


def pack_to_params(pack: dict) -> ProfileParams:
    return ProfileParams(
        name=pack["name"],
        syntax_strict=pack["syntax_strict"],
        glyph_classes=tuple(tuple(g) for g in pack.get("glyph_classes", [])),
        case_pairs=tuple((p[0], p[1]) for p in pack.get("case_pairs", [])),
    )


# ============================================================================
# LOADERS
# ============================================================================

def load_profile_dict(pack: dict) -> EquivalenceProfile:
    """Validate and compile an already-parsed pack."""
    if not isinstance(pack, dict):
        raise ProfileLoaderError("Profile pack must be a dictionary")
    validate_profile_pack(pack)
    profile = compile_profile(pack_to_params(pack))
    logger.info(
        "Loaded profile %s (%d classes, pack_hash=%s)",
        profile.name, profile.class_count(), compute_profile_pack_hash(pack)[:16],
    )
    return profile


def load_profile_yaml(path: Union[str, Path]) -> EquivalenceProfile:
    """
    Load, validate and compile a YAML profile pack.

    Raises:
        ProfileLoaderError: If the file cannot be read or parsed
        ProfileValidationError: If validation fails
    """
    path = Path(path)

    if not path.exists():
        raise ProfileLoaderError(f"Profile pack not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            pack = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ProfileLoaderError(f"Invalid YAML in profile pack: {e}")
    except IOError as e:
        raise ProfileLoaderError(f"Cannot read profile pack: {e}")

    if not isinstance(pack, dict):
        raise ProfileLoaderError("Profile pack must contain a YAML dictionary")

    return load_profile_dict(pack)


def resolve_profile(name_or_path: str) -> EquivalenceProfile:
    """Canned profile by name (code_safe, auth_safe) or YAML pack by path."""
    factory = CANNED_PROFILES.get(name_or_path)
    if factory is not None:
        return factory()
    if name_or_path.endswith((".yaml", ".yml")) or Path(name_or_path).exists():
        return load_profile_yaml(name_or_path)
    raise ProfileLoaderError(
        f"Unknown profile {name_or_path!r}: expected one of {sorted(CANNED_PROFILES)} or a YAML path"
    )


__all__ = [
    'ProfileLoaderError',
    'ProfileValidationError',
    'validate_profile_pack',
    'compute_profile_pack_hash',
    'pack_to_params',
    'load_profile_dict',
    'load_profile_yaml',
    'resolve_profile',
]
