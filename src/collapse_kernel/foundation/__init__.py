"""
Collapse Kernel Foundation - canonical bytes, digests and certificates.

Re-exports all public symbols so that consumers can do
``from collapse_kernel.foundation import KernelCertificate, ...``
"""

from collapse_kernel.foundation.canon import *    # noqa: F401,F403
from collapse_kernel.foundation.digest import *   # noqa: F401,F403
from collapse_kernel.foundation.cert import *     # noqa: F401,F403
