"""
CollapseGraph Exception Tests

Tests for the coded exception hierarchy and the mapping from internal
exceptions.

Test Coverage:
- Base class with .code, .message, .details
- Every EXCEPTION_MAP entry
- JSON serialization (to_dict, to_json)
- Context attributes copied into details
"""

import json

import pytest

from collapse_kernel.foundation.canon import CanonicalEncodingError, FloatNotAllowedError
from collapse_kernel.foundation.cert import ChainVerificationError
from collapse_kernel.glyph.normalize import NormalizationError
from collapse_kernel.partition.entropy import EmptyPartitionError
from collapsegraph.config import ConfigError
from collapsegraph.exceptions import (
    EXCEPTION_MAP,
    CollapseGraphError,
    ConfigInvalidError,
    InputInvalidError,
    IntegrityFailError,
    InternalError,
    wrap_internal_exception,
)
from collapsegraph.numbers.q_e import ConstructionError
from collapsegraph.profile_loader import ProfileLoaderError, ProfileValidationError
from collapsegraph.snapshot import RegressionMismatchError
from collapsegraph.trace import TraceError


# =============================================================================
# TestCollapseGraphError - Base class attributes
# =============================================================================

class TestCollapseGraphError:
    """Base class with .code, .message, .details"""

    def test_default_code(self):
        error = CollapseGraphError("boom")
        assert error.code == "CG_INTERNAL_ERROR"
        assert error.message == "boom"
        assert error.details == {}

    def test_str_includes_code(self):
        assert str(InputInvalidError("bad")) == "[CG_INPUT_INVALID] bad"

    def test_to_dict(self):
        error = IntegrityFailError("mismatch", details={"key": "chain_hash"})
        assert error.to_dict() == {
            "code": "CG_INTEGRITY_FAIL",
            "message": "mismatch",
            "details": {"key": "chain_hash"},
        }

    def test_to_json(self):
        error = ConfigInvalidError("bad config")
        assert json.loads(error.to_json())["code"] == "CG_CONFIG_INVALID"

    def test_subclass_codes(self):
        assert InputInvalidError.code == "CG_INPUT_INVALID"
        assert ConfigInvalidError.code == "CG_CONFIG_INVALID"
        assert IntegrityFailError.code == "CG_INTEGRITY_FAIL"
        assert InternalError.code == "CG_INTERNAL_ERROR"

    def test_catchable_as_base(self):
        with pytest.raises(CollapseGraphError):
            raise IntegrityFailError("x")


# =============================================================================
# TestExceptionMapping
# =============================================================================

class TestExceptionMapping:

    @pytest.mark.parametrize("internal,coded", [
        (NormalizationError("é", 0), InputInvalidError),
        (ConstructionError("zero denominator"), InputInvalidError),
        (CanonicalEncodingError("bad"), InputInvalidError),
        (FloatNotAllowedError("float"), InputInvalidError),
        (EmptyPartitionError("empty"), InputInvalidError),
        (ProfileLoaderError("missing"), InputInvalidError),
        (ProfileValidationError("invalid", ["e1"]), InputInvalidError),
        (ConfigError("bad"), ConfigInvalidError),
        (RegressionMismatchError("mismatch", key="tests_hash"), IntegrityFailError),
        (ChainVerificationError("chain"), IntegrityFailError),
        (TraceError("disk"), InternalError),
        (RuntimeError("unexpected"), InternalError),
    ])
    def test_mapping(self, internal, coded):
        wrapped = wrap_internal_exception(internal)
        assert type(wrapped) is coded
        assert wrapped.details["internal_error"] == type(internal).__name__

    def test_map_targets_are_coded(self):
        for target in EXCEPTION_MAP.values():
            assert issubclass(target, CollapseGraphError)

    def test_coded_error_passes_through(self):
        error = IntegrityFailError("x")
        assert wrap_internal_exception(error) is error

    def test_default_message(self):
        wrapped = wrap_internal_exception(ValueError("raw"), default_message="nicer")
        assert wrapped.message == "nicer"

    def test_details_merged(self):
        wrapped = wrap_internal_exception(ConfigError("bad"), details={"path": "run.yaml"})
        assert wrapped.details["path"] == "run.yaml"


class TestContextDetails:

    def test_normalization_char(self):
        wrapped = wrap_internal_exception(NormalizationError("é", 3, "code_safe"))
        assert wrapped.details["char"] == "é"
        assert wrapped.details["position"] == 3

    def test_mismatch_key(self):
        wrapped = wrap_internal_exception(RegressionMismatchError("m", key="asc7_hash"))
        assert wrapped.details["key"] == "asc7_hash"

    def test_errors_list(self):
        wrapped = wrap_internal_exception(ConfigError("bad", ["a", "b"]))
        assert wrapped.details["errors"] == ["a", "b"]

    def test_chaining(self):
        original = ConstructionError("QE(1, 0): zero denominator")
        try:
            try:
                raise original
            except ConstructionError as e:
                raise wrap_internal_exception(e) from e
        except InputInvalidError as wrapped:
            assert wrapped.__cause__ is original
