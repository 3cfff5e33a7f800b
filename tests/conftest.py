"""Pytest configuration and fixtures for temporalkit tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add the parent directory to sys.path so temporalkit can be imported
# without needing to install the package
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture
def new_york():
    """The America/New_York zone (DST gap 2021-03-14, fold 2021-11-07)."""
    from temporalkit.units.timezone import get_time_zone

    return get_time_zone("America/New_York")
