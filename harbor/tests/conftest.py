"""Shared fixtures for harbor tests"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from harbor.registry import Registries


DATA_ROOT = Path(__file__).parent.parent.parent / "data"


@pytest.fixture
def registries():
    """Fresh ship/cargo registries, so tests never share identifiers"""
    return Registries()


@pytest.fixture
def data_root():
    return DATA_ROOT
