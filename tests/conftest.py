"""Shared pytest configuration: path setup and common fixtures."""

import logging
import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parent.parent

# Allow ``from collapse_kernel import ...`` without installing (src layout)
sys.path.insert(0, str(_ROOT / "src"))

from collapse_kernel.glyph.profile import auth_safe, code_safe  # noqa: E402


PACKS_DIR = _ROOT / "packs"


@pytest.fixture
def code_safe_profile():
    return code_safe()


@pytest.fixture
def auth_safe_profile():
    return auth_safe()


@pytest.fixture
def packs_dir():
    return PACKS_DIR


@pytest.fixture(autouse=True)
def _reset_cli_logging():
    """Undo configure_logging() so later tests see default logger state."""
    yield
    for name in ("collapsegraph", "collapse_kernel"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            if getattr(handler, "_collapsegraph", False):
                logger.removeHandler(handler)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
