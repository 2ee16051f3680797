"""
Pytest configuration file for seqops tests.

This file ensures that the project root is in the Python path
so that test files can import the seqops package without installing it.
"""

import sys
from pathlib import Path

# Add the project root to the Python path
root_dir = Path(__file__).parent.parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

import pytest

from seqops.utils import clear_performance_metrics


@pytest.fixture(autouse=True)
def reset_performance_metrics():
    """Start every test with empty performance metrics"""
    clear_performance_metrics()
    yield
    clear_performance_metrics()
