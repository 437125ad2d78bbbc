"""
Regression snapshot gate.

A snapshot is a sorted JSON object mapping digest names to lowercase hex
strings. It is written once ("freeze") and every later run is compared
against it. Any difference is a hard failure naming the key.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Mapping, Sequence, Union

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_PATH = Path("gates") / "expected.json"

# Fixed comparison order
SNAPSHOT_KEYS: Sequence[str] = (
    "confusables_hash",
    "asc7_hash",
    "domain_digest",
    "tests_hash",
    "sembit_hash",
    "chain_hash",
)


class RegressionMismatchError(Exception):
    """
    Frozen snapshot disagrees with a fresh computation, or is missing.

    Attributes:
        key: Offending snapshot key ("" when the file itself is missing)
        expected: Stored value (None if absent)
        actual: Freshly computed value (None if not applicable)
    """

    def __init__(self, message: str, key: str = "", expected=None, actual=None):
        super().__init__(message)
        self.key = key
        self.expected = expected
        self.actual = actual


def write_snapshot(path: Union[str, Path], digests: Mapping[str, str]) -> Path:
    """Freeze digests to path (sorted keys, 2-space indent, trailing newline)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(dict(digests), indent=2, sort_keys=True)
    path.write_text(text + "\n", encoding="utf-8")
    logger.info("Froze %d digests to %s", len(digests), path)
    return path


def load_snapshot(path: Union[str, Path]) -> Dict[str, str]:
    path = Path(path)
    if not path.exists():
        raise RegressionMismatchError(
            f"Missing {path}. Generate it with: collapsegraph spine --freeze"
        )
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise RegressionMismatchError(f"Snapshot {path} is unreadable: {e}") from e
    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        raise RegressionMismatchError(f"Snapshot {path} must map names to hex strings")
    return data


def compare_snapshot(
    expected: Mapping[str, str],
    actual: Mapping[str, str],
    keys: Sequence[str] = SNAPSHOT_KEYS,
) -> None:
    """
    Raises:
        RegressionMismatchError: On the first missing or differing key
    """
    for key in keys:
        if key not in expected:
            raise RegressionMismatchError(
                f"Snapshot missing key: {key}", key=key, actual=actual.get(key)
            )
        if key not in actual:
            raise RegressionMismatchError(
                f"Computed digests missing key: {key}", key=key, expected=expected[key]
            )
        if expected[key] != actual[key]:
            raise RegressionMismatchError(
                f"Freeze gate mismatch for key={key}: "
                f"expected {expected[key]}, got {actual[key]}",
                key=key,
                expected=expected[key],
                actual=actual[key],
            )


def verify_snapshot(
    path: Union[str, Path],
    digests: Mapping[str, str],
    keys: Sequence[str] = SNAPSHOT_KEYS,
) -> None:
    """Load the frozen snapshot at path and compare it with digests."""
    compare_snapshot(load_snapshot(path), digests, keys)
    logger.info("Snapshot %s verified (%d keys)", path, len(keys))


__all__ = [
    'DEFAULT_SNAPSHOT_PATH',
    'SNAPSHOT_KEYS',
    'RegressionMismatchError',
    'write_snapshot',
    'load_snapshot',
    'compare_snapshot',
    'verify_snapshot',
]
