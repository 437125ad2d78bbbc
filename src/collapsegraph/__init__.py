"""
CollapseGraph - certification spine over the collapse kernel.

Builds structural number domains, runs named test families over them,
collapses the results into quotients, and certifies the whole run as a
hash chain that a frozen snapshot can verify byte for byte.
"""

__version__ = "1.0.0"

# Structural numbers
from .numbers import (
    QE,
    NE,
    ZE,
    ConstructionError,
    domain_qe_bounded,
    domain_digest_hex,
    domain_ne,
    domain_ze,
)

# SemBits
from .sembit import (
    Test,
    TestFamily,
    tests_hash_hex,
    sembit_quotient,
    sembit_kernel_cert,
)

# Configuration
from .config import RunConfig, ConfigError, load_config

# Spine and experiment
from .spine import SpineDigests, SpineRun, compute_spine, run_spine
from .experiment import run_collapse_trace

# Regression snapshot
from .snapshot import (
    RegressionMismatchError,
    write_snapshot,
    load_snapshot,
    verify_snapshot,
)

# Errors
from .exceptions import (
    CollapseGraphError,
    InputInvalidError,
    ConfigInvalidError,
    IntegrityFailError,
    InternalError,
    wrap_internal_exception,
)

__all__ = [
    '__version__',
    'QE',
    'NE',
    'ZE',
    'ConstructionError',
    'domain_qe_bounded',
    'domain_digest_hex',
    'domain_ne',
    'domain_ze',
    'Test',
    'TestFamily',
    'tests_hash_hex',
    'sembit_quotient',
    'sembit_kernel_cert',
    'RunConfig',
    'ConfigError',
    'load_config',
    'SpineDigests',
    'SpineRun',
    'compute_spine',
    'run_spine',
    'run_collapse_trace',
    'RegressionMismatchError',
    'write_snapshot',
    'load_snapshot',
    'verify_snapshot',
    'CollapseGraphError',
    'InputInvalidError',
    'ConfigInvalidError',
    'IntegrityFailError',
    'InternalError',
    'wrap_internal_exception',
]
