"""
Collapse Kernel Partition - signatures, quotients and semantic entropy.
"""

from collapse_kernel.partition.signature import *  # noqa: F401,F403
from collapse_kernel.partition.quotient import *   # noqa: F401,F403
from collapse_kernel.partition.entropy import *    # noqa: F401,F403
