"""
Peak location for elevation rasters.

The peak is the reference point of a mountain plot: every other sample is
placed by its horizontal distance from it.
"""

import logging
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Peak:
    """Grid coordinates and normalized value of the highest sample."""

    ix: int
    """Horizontal index (image column)."""

    iy: int
    """Vertical index, counted from the bottom image row."""

    value: float
    """Normalized elevation at (ix, iy)."""


def find_peak(dem: np.ndarray) -> Peak:
    """
    Locate the highest sample of an elevation grid.

    The grid is indexed ``[ix, iy]``, so a C-order scan visits columns in the
    outer loop and rows in the inner loop. Only values strictly greater than
    the running maximum (which starts at 0) replace it, so the first maximal
    sample in scan order wins ties and a grid without any positive value
    yields ``Peak(0, 0, 0.0)``. NaN samples are ignored.

    Args:
        dem: 2D elevation grid of shape (nx, ny)

    Returns:
        Peak: location and value of the maximum

    Raises:
        ValueError: If the grid is not 2D or is empty
    """
    if dem.ndim != 2:
        raise ValueError(f"Elevation grid must be 2D, got shape {dem.shape}")
    if dem.size == 0:
        raise ValueError("Elevation grid is empty")

    # np.argmax returns the first occurrence in C order, matching the scan order
    search = np.where(np.isnan(dem), -np.inf, dem)
    flat_index = int(np.argmax(search))
    ix, iy = np.unravel_index(flat_index, dem.shape)
    value = float(search[ix, iy])

    if not value > 0.0:
        logger.debug("No positive samples found, peak defaults to origin")
        return Peak(0, 0, 0.0)

    return Peak(int(ix), int(iy), value)
