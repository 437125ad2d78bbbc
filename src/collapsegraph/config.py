"""
Run configuration.

Sources, later wins:
1. RunConfig defaults (reproduce the reference spine)
2. Optional YAML file (same field names)
3. CG_* environment variables

    CG_PROFILE        canned profile name or path to a profile pack
    CG_QE_NMAX        QE numerator bound
    CG_QE_DMAX        QE denominator bound
    CG_IMPL_TAG       implementation tag folded into tests_hash
    CG_OUT_DIR        trace log directory
    CG_SNAPSHOT_PATH  regression snapshot file
    CG_LOG_LEVEL      logging level name
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from .snapshot import DEFAULT_SNAPSHOT_PATH

DEFAULT_PROFILE = "code_safe"
DEFAULT_QE_NMAX = 20
DEFAULT_QE_DMAX = 20
DEFAULT_IMPL_TAG = "impl:static_v1"
DEFAULT_OUT_DIR = "out"
DEFAULT_LOG_LEVEL = "INFO"

ENV_PREFIX = "CG_"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigError(Exception):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, errors: List[str] = None):
        self.errors = errors or []
        super().__init__(message)

    def __str__(self):
        if self.errors:
            return f"{self.args[0]}\n" + "\n".join(f"  - {e}" for e in self.errors)
        return self.args[0]


@dataclass(frozen=True)
class RunConfig:
    profile: str = DEFAULT_PROFILE
    qe_nmax: int = DEFAULT_QE_NMAX
    qe_dmax: int = DEFAULT_QE_DMAX
    impl_tag: str = DEFAULT_IMPL_TAG
    out_dir: str = DEFAULT_OUT_DIR
    snapshot_path: str = str(DEFAULT_SNAPSHOT_PATH)
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base: Optional['RunConfig'] = None) -> 'RunConfig':
        """Validate and apply a mapping of field overrides."""
        base = base or cls()
        known = {f.name: f for f in fields(cls)}
        errors: List[str] = []
        updates: Dict[str, Any] = {}

        for key, value in data.items():
            if key not in known:
                errors.append(f"unknown config key '{key}'")
                continue
            expected = known[key].type
            if expected in (int, 'int'):
                if isinstance(value, str):
                    try:
                        value = int(value.strip())
                    except ValueError:
                        errors.append(f"{key}: expected integer, got {value!r}")
                        continue
                if isinstance(value, bool) or not isinstance(value, int):
                    errors.append(f"{key}: expected integer, got {type(value).__name__}")
                    continue
                if value < 1:
                    errors.append(f"{key}: must be >= 1, got {value}")
                    continue
            else:
                if not isinstance(value, str) or not value:
                    errors.append(f"{key}: expected non-empty string")
                    continue
            updates[key] = value

        level = updates.get("log_level")
        if level is not None:
            if level.upper() not in VALID_LOG_LEVELS:
                errors.append(f"log_level: unknown level {level!r}")
            else:
                updates["log_level"] = level.upper()

        if errors:
            raise ConfigError(f"Config validation failed with {len(errors)} error(s):", errors)
        return replace(base, **updates)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 base: Optional['RunConfig'] = None) -> 'RunConfig':
        environ = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            env_key = ENV_PREFIX + f.name.upper()
            if env_key in environ:
                overrides[f.name] = environ[env_key]
        return cls.from_mapping(overrides, base=base)

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level.upper())

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_config_yaml(
    path: Union[str, Path],
    environ: Optional[Mapping[str, str]] = None,
) -> RunConfig:
    """
    Load a YAML config file, then apply CG_* environment overrides.

    Raises:
        ConfigError: Missing file, invalid YAML, or invalid values
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}")
    except IOError as e:
        raise ConfigError(f"Cannot read config file: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a YAML dictionary")

    return RunConfig.from_env(environ, base=RunConfig.from_mapping(data))


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> RunConfig:
    if path is not None:
        return load_config_yaml(path, environ)
    return RunConfig.from_env(environ)


__all__ = [
    'ConfigError',
    'RunConfig',
    'load_config',
    'load_config_yaml',
    'DEFAULT_PROFILE',
    'DEFAULT_QE_NMAX',
    'DEFAULT_QE_DMAX',
    'DEFAULT_IMPL_TAG',
]
