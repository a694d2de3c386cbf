"""
Radial elevation-histogram rendering.

Every source sample is placed at (distance from the peak, elevation) in the
output grid and adds a distance-weighted contribution there. Weights fall off
as ``(distsq + 1) ** -falloff`` so samples near the peak dominate.

The per-sample loop is numba-compiled; the splat helpers are jitted too and
can be called directly on a numpy array.
"""

import logging

import numpy as np
from numba import jit

from src import config
from src.mountainplot.geometry import OutputGeometry, elevation_meters
from src.mountainplot.peaks import Peak

logger = logging.getLogger(__name__)

SPLAT_BILINEAR = 0
SPLAT_NEAREST = 1

_SPLAT_CODES = {"bilinear": SPLAT_BILINEAR, "nearest": SPLAT_NEAREST}


@jit(nopython=True, cache=True)
def splat_bilinear(hist: np.ndarray, pfx: float, pfy: float, weight: float) -> None:
    """
    Add ``weight`` at fractional cell (pfx, pfy) using bilinear fractions.

    The base cell is clamped into the grid. Corners past the last column or
    row are skipped, so weight near the far edges is lost rather than
    redistributed.
    """
    ox, oy = hist.shape
    px = min(ox - 1, max(0, int(pfx)))
    py = min(oy - 1, max(0, int(pfy)))
    fracx = pfx - px
    fracy = pfy - py

    hist[px, py] += weight * (1.0 - fracx) * (1.0 - fracy)
    if px + 1 < ox:
        hist[px + 1, py] += weight * fracx * (1.0 - fracy)
    if py + 1 < oy:
        hist[px, py + 1] += weight * (1.0 - fracx) * fracy
    if px + 1 < ox and py + 1 < oy:
        hist[px + 1, py + 1] += weight * fracx * fracy


@jit(nopython=True, cache=True)
def splat_nearest(hist: np.ndarray, pfx: float, pfy: float, weight: float) -> None:
    """Add the whole ``weight`` to the clamped cell containing (pfx, pfy)."""
    ox, oy = hist.shape
    px = min(ox - 1, max(0, int(pfx)))
    py = min(oy - 1, max(0, int(pfy)))
    hist[px, py] += weight


@jit(nopython=True, cache=True)
def contribution_weight(distsq: float, falloff: float) -> float:
    """Weight one sample adds to the histogram at squared distance ``distsq``."""
    return (distsq + 1.0) ** (-falloff)


@jit(nopython=True, cache=True)
def _accumulate_jit(
    dem: np.ndarray,
    peak_ix: int,
    peak_iy: int,
    elev_black: float,
    elev_white: float,
    meters_per_pixel: float,
    max_horizontal: float,
    falloff: float,
    splat_mode: int,
    hist: np.ndarray,
) -> int:
    """
    JIT-compiled scatter of every source sample into ``hist`` (in place).

    Returns the number of samples skipped because they were NaN.
    """
    nx, ny = dem.shape
    ox = hist.shape[0]
    skipped = 0

    for ix in range(nx):
        for iy in range(ny):
            value = dem[ix, iy]
            if np.isnan(value):
                skipped += 1
                continue

            # normalized value -> meters -> fractional output row
            elevm = elevation_meters(value, elev_black, elev_white)
            pfy = 0.5 + elevm / meters_per_pixel

            # distance from the peak -> fractional output column
            dx = float(ix - peak_ix)
            dy = float(iy - peak_iy)
            distsq = dx * dx + dy * dy
            pfx = ox * np.sqrt(distsq) / max_horizontal

            toadd = contribution_weight(distsq, falloff)

            if splat_mode == SPLAT_NEAREST:
                splat_nearest(hist, pfx, pfy, toadd)
            else:
                splat_bilinear(hist, pfx, pfy, toadd)

    return skipped


def render_histogram(
    dem: np.ndarray,
    peak: Peak,
    geometry: OutputGeometry,
    splat: str = config.DEFAULT_SPLAT,
    falloff: float = config.FALLOFF_EXPONENT,
) -> np.ndarray:
    """
    Accumulate the radial elevation histogram of a DEM.

    Args:
        dem: Elevation grid (nx, ny), normalized values
        peak: Reference peak
        geometry: Resolved output geometry
        splat: "bilinear" (default) or "nearest"
        falloff: Distance falloff exponent (default 0.3)

    Returns:
        np.ndarray: float64 histogram of shape (ox, oy)

    Raises:
        ValueError: If the splat mode is unknown or maxhoriz is zero
    """
    if splat not in _SPLAT_CODES:
        raise ValueError(f"Unknown splat mode '{splat}', expected one of {config.SPLAT_MODES}")
    if geometry.max_horizontal <= 0.0:
        raise ValueError("Maximum horizontal distance must be positive")

    # float32 and float64 grids go to the kernel as they are
    if dem.dtype not in (np.float32, np.float64):
        dem = dem.astype(np.float32)

    calibration = geometry.calibration
    hist = np.zeros(geometry.shape, dtype=np.float64)

    logger.info(f"Rendering {dem.shape[0]} x {dem.shape[1]} samples ({splat} splat)")
    skipped = _accumulate_jit(
        np.ascontiguousarray(dem),
        peak.ix,
        peak.iy,
        float(calibration.elev_black),
        float(calibration.elev_white),
        float(calibration.meters_per_pixel),
        float(geometry.max_horizontal),
        float(falloff),
        _SPLAT_CODES[splat],
        hist,
    )
    if skipped:
        logger.warning(f"Skipped {skipped} NaN samples")

    logger.debug(f"Histogram total weight: {hist.sum():.4f}, max cell: {hist.max():.4f}")
    return hist
