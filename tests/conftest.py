"""Pytest configuration and fixtures for mountainplot tests."""
import sys
from pathlib import Path

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest
import numpy as np
from PIL import Image


@pytest.fixture
def sample_dem():
    """Create a small synthetic normalized DEM, indexed [ix, iy], with one peak."""
    x = np.linspace(-10, 10, 60)
    y = np.linspace(-10, 10, 40)
    X, Y = np.meshgrid(x, y, indexing="ij")
    Z = np.exp(-((X - 2.0) ** 2 + (Y + 1.0) ** 2) / 20)
    return Z.astype(np.float32)


@pytest.fixture
def single_peak_dem():
    """4x4 grid with a single 1.0 sample at (1, 1)."""
    dem = np.zeros((4, 4), dtype=np.float32)
    dem[1, 1] = 1.0
    return dem


@pytest.fixture
def write_png(tmp_path):
    """Write a (rows, cols) uint8/uint16 pixel array as a grayscale PNG."""

    def _write(pixels, name="dem.png"):
        path = tmp_path / name
        Image.fromarray(np.asarray(pixels)).save(path)
        return path

    return _write
