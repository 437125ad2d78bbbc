"""
Collapse Kernel Canonical Encoding

Deterministic, one-way byte serialization of canonical values.
Every hash in the system (kernel certificates, chains, domain digests,
quotient digests) is computed over these bytes, so this module is the
single cross-implementation compatibility surface.

Canonical value model (plain Python values):
- None                      -> null
- bool                      -> true / false
- int  (signed 64-bit or unsigned 64-bit range)
                            -> plain decimal, leading '-' for negatives
- str                       -> "..." with backslash, double quote,
                               newline, carriage return and tab escaped;
                               every other character is copied as UTF-8
- list / tuple              -> [e1,e2,...] in construction order
- Mapping[str, value]       -> {"k1":v1,...} keys sorted by UTF-8 bytes

Policy:
- NO FLOATS. Scale to an integer first (e.g. micro-units).
- The output is not meant to be parsed back. It is not RFC 8785 JSON:
  control characters other than \\n, \\r, \\t are copied verbatim.

Usage:
    from collapse_kernel.foundation.canon import canonical_bytes

    payload = {"profile_name": "code_safe", "witness_len": 89}
    data = canonical_bytes(payload)
"""

from types import MappingProxyType
from typing import Any, List, Mapping


class CanonicalEncodingError(Exception):
    """Raised when a value is outside the canonical value model."""
    pass


class FloatNotAllowedError(CanonicalEncodingError):
    """Raised when a float is detected in a canonical payload."""
    pass


INT64_MIN = -(1 << 63)
UINT64_MAX = (1 << 64) - 1

# Bytes that are backslash-escaped inside strings; nothing else is touched.
ESCAPE_MAP = {
    '\\': '\\\\',
    '"': '\\"',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
}


def _escape_string(s: str) -> str:
    return ''.join(ESCAPE_MAP.get(ch, ch) for ch in s)


def _check_utf8(s: str, path: str) -> None:
    try:
        s.encode('utf-8')
    except UnicodeEncodeError as e:
        raise CanonicalEncodingError(
            f"String is not encodable as UTF-8 ({e.reason}) at path '{path}'"
        ) from e


def _write_value(out: List[str], value: Any, path: str) -> None:
    if value is None:
        out.append('null')
        return

    if isinstance(value, bool):
        # bool before int: bool is a subclass of int
        out.append('true' if value else 'false')
        return

    if isinstance(value, int):
        if value < INT64_MIN or value > UINT64_MAX:
            raise CanonicalEncodingError(
                f"Integer {value} at path '{path}' is outside the 64-bit range"
            )
        out.append(str(value))
        return

    if isinstance(value, float):
        raise FloatNotAllowedError(
            f"Float value {value} at path '{path}' not allowed in canonical payloads. "
            f"Scale it to an integer first."
        )

    if isinstance(value, str):
        _check_utf8(value, path)
        out.append('"')
        out.append(_escape_string(value))
        out.append('"')
        return

    if isinstance(value, (list, tuple)):
        out.append('[')
        for i, item in enumerate(value):
            if i:
                out.append(',')
            _write_value(out, item, f"{path}[{i}]")
        out.append(']')
        return

    if isinstance(value, Mapping):
        for key in value.keys():
            if not isinstance(key, str):
                raise CanonicalEncodingError(
                    f"Mapping key must be string, got {type(key).__name__} at path '{path}'"
                )
            _check_utf8(key, path)
        out.append('{')
        for i, key in enumerate(sorted(value.keys(), key=lambda k: k.encode('utf-8'))):
            if i:
                out.append(',')
            key_path = f"{path}.{key}" if path else key
            out.append('"')
            out.append(_escape_string(key))
            out.append('":')
            _write_value(out, value[key], key_path)
        out.append('}')
        return

    raise CanonicalEncodingError(
        f"Cannot canonically encode {type(value).__name__} at path '{path}'"
    )


def canonical_bytes(value: Any) -> bytes:
    """
    Encode a canonical value to its deterministic byte form.

    Args:
        value: None, bool, int, str, list/tuple or str-keyed mapping
               (recursively)

    Returns:
        UTF-8 bytes of the canonical rendering

    Raises:
        FloatNotAllowedError: If a float is found anywhere in the value
        CanonicalEncodingError: For non-string keys, out-of-range
            integers or unsupported types

    Example:
        >>> canonical_bytes({"b": 1, "a": [True, None]})
        b'{"a":[true,null],"b":1}'
    """
    out: List[str] = []
    _write_value(out, value, "")
    return ''.join(out).encode('utf-8')


def canonical_string(value: Any) -> str:
    """Text form of canonical_bytes(), for debugging and trace output."""
    return canonical_bytes(value).decode('utf-8')


def freeze_value(value: Any) -> Any:
    """
    Return a deeply immutable copy of a canonical value.

    Lists become tuples and mappings become read-only MappingProxyType
    views over a private dict. The canonical bytes are unchanged.
    """
    if isinstance(value, (list, tuple)):
        return tuple(freeze_value(v) for v in value)
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze_value(v) for k, v in value.items()})
    return value


def thaw_value(value: Any) -> Any:
    """Inverse of freeze_value(): plain lists and dicts."""
    if isinstance(value, tuple):
        return [thaw_value(v) for v in value]
    if isinstance(value, Mapping):
        return {k: thaw_value(v) for k, v in value.items()}
    return value


__all__ = [
    'CanonicalEncodingError',
    'FloatNotAllowedError',
    'INT64_MIN',
    'UINT64_MAX',
    'canonical_bytes',
    'canonical_string',
    'freeze_value',
    'thaw_value',
]
