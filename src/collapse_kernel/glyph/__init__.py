"""
Collapse Kernel Glyph - ASCII equivalence profiles and normalization.
"""

from collapse_kernel.glyph.role import *         # noqa: F401,F403
from collapse_kernel.glyph.union_find import *   # noqa: F401,F403
from collapse_kernel.glyph.profile import *      # noqa: F401,F403
from collapse_kernel.glyph.normalize import *    # noqa: F401,F403
from collapse_kernel.glyph.confusables import *  # noqa: F401,F403
from collapse_kernel.glyph.certs import *        # noqa: F401,F403
