"""
Pytest Configuration
====================

Automatically loaded by pytest. Adds src/ to sys.path so lattice_codes is
importable without installation, and resets logging between tests.

Usage:
    cd src
    pytest tests/ -v
"""

import logging
import sys
from pathlib import Path

import pytest


def pytest_configure(config):
    """Add src/ to path before any imports happen."""
    src_root = Path(__file__).parent
    if str(src_root) not in sys.path:
        sys.path.insert(0, str(src_root))


# Also do it at module level for non-pytest usage
src_root = Path(__file__).parent
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))


@pytest.fixture(autouse=True)
def _quiet_root_logger():
    """CLI runs install a stderr handler on the root logger; drop it afterwards."""
    yield
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.WARNING)
