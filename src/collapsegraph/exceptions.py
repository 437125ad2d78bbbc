"""
CollapseGraph Exception Hierarchy

Every failure surfaced by the CLI (or any other outer layer) carries a
deterministic, actionable error code. Internal exceptions stay beside
the code that raises them and are wrapped at the boundary.

Error Codes:
- CG_INPUT_INVALID: Caller input rejected (non-universe char in strict
  normalization, zero denominator, non-canonical payload, bad profile pack)
- CG_CONFIG_INVALID: Configuration file or environment rejected
- CG_INTEGRITY_FAIL: Integrity check failed (snapshot mismatch, chain
  hash mismatch)
- CG_INTERNAL_ERROR: Unexpected internal error (catch-all)
"""

import json
from typing import Any, Dict, Optional

__all__ = [
    'CollapseGraphError',
    'InputInvalidError',
    'ConfigInvalidError',
    'IntegrityFailError',
    'InternalError',
    'EXCEPTION_MAP',
    'wrap_internal_exception',
]


class CollapseGraphError(Exception):
    """
    Base exception for all coded CollapseGraph errors.

    Attributes:
        code: Deterministic error code (CG_*)
        message: Human-readable description
        details: Additional context
    """

    code: str = "CG_INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details if details is not None else {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r})"
        )


class InputInvalidError(CollapseGraphError):
    """
    Caller input rejected.

    - Strict normalization hit a character outside the universe
    - Rational with zero denominator or out-of-range component
    - Payload outside the canonical value model
    - Invalid profile pack
    """

    code: str = "CG_INPUT_INVALID"


class ConfigInvalidError(CollapseGraphError):
    """Configuration file or environment variables rejected."""

    code: str = "CG_CONFIG_INVALID"


class IntegrityFailError(CollapseGraphError):
    """
    Integrity check failed.

    - Frozen snapshot key disagrees with the recomputed digest
    - Snapshot file or key missing
    - Certificate chain hash does not match its items
    """

    code: str = "CG_INTEGRITY_FAIL"


class InternalError(CollapseGraphError):
    """Unexpected internal error."""

    code: str = "CG_INTERNAL_ERROR"


# =============================================================================
# EXCEPTION MAPPING
# =============================================================================

# Imported after the class definitions; these modules never import this one.
from collapse_kernel.foundation.canon import CanonicalEncodingError
from collapse_kernel.foundation.cert import ChainVerificationError
from collapse_kernel.glyph.normalize import NormalizationError
from collapse_kernel.partition.entropy import EmptyPartitionError
from .numbers.q_e import ConstructionError
from .snapshot import RegressionMismatchError
from .profile_loader import ProfileLoaderError
from .config import ConfigError
from .trace import TraceError

EXCEPTION_MAP: Dict[type, type] = {
    # Input errors -> CG_INPUT_INVALID
    NormalizationError: InputInvalidError,
    ConstructionError: InputInvalidError,
    CanonicalEncodingError: InputInvalidError,
    EmptyPartitionError: InputInvalidError,
    ProfileLoaderError: InputInvalidError,

    # Config -> CG_CONFIG_INVALID
    ConfigError: ConfigInvalidError,

    # Integrity -> CG_INTEGRITY_FAIL
    RegressionMismatchError: IntegrityFailError,
    ChainVerificationError: IntegrityFailError,

    # Output sinks
    TraceError: InternalError,
}


def _lookup(exc_type: type) -> type:
    # Walk the MRO so subclasses (FloatNotAllowedError, ProfileValidationError)
    # map like their parents.
    for klass in exc_type.__mro__:
        if klass in EXCEPTION_MAP:
            return EXCEPTION_MAP[klass]
    return InternalError


def wrap_internal_exception(
    exc: Exception,
    default_message: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> CollapseGraphError:
    """
    Wrap an internal exception as a coded CollapseGraphError.

    Use with exception chaining to keep the traceback:

        try:
            verify_snapshot(path, digests)
        except RegressionMismatchError as e:
            raise wrap_internal_exception(e) from e

    Known context attributes (char, key, errors) are copied into details.
    """
    if isinstance(exc, CollapseGraphError):
        return exc

    error_class = _lookup(type(exc))

    error_details = details.copy() if details else {}
    error_details["internal_error"] = type(exc).__name__

    if isinstance(exc, NormalizationError):
        error_details["char"] = exc.char
        error_details["position"] = exc.position
    if isinstance(exc, RegressionMismatchError):
        error_details["key"] = exc.key
    if getattr(exc, 'errors', None):
        error_details["errors"] = list(exc.errors)

    return error_class(
        message=default_message or str(exc),
        details=error_details,
    )
