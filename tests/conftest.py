"""Shared fixtures for the gpgaze test suite."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gpgaze.config import Config

EYE_SHAPE = (16, 16)


@pytest.fixture
def settings():
    """Default configuration, independent of the process environment."""
    return Config()


@pytest.fixture
def make_image():
    """Factory for constant-valued synthetic eye images."""
    def _make_image(value, shape=EYE_SHAPE):
        return np.full(shape, float(value), dtype=np.float64)
    return _make_image


@pytest.fixture
def random_images():
    """Reproducible random eye images."""
    rng = np.random.default_rng(42)
    return [rng.uniform(0, 255, size=EYE_SHAPE) for _ in range(5)]
