"""Shared pytest configuration and path setup for test modules."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Ensure src/ is on sys.path for all tests
_SRC = Path(__file__).resolve().parents[1] / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))


@pytest.fixture
def rng() -> np.random.Generator:
    """Deterministic generator for tests that need their own random stream."""
    return np.random.default_rng(12345)
