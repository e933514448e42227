"""
Shared pytest configuration: makes the top-level modules importable.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: spawns a helper process")
