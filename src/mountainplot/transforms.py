"""
Post-processing of accumulated mountain-plot histograms.

This module contains the tone mapping that turns a density histogram into a
displayable image, and the optional mean-profile overlay.
"""

import logging

import numpy as np

from src import config

logger = logging.getLogger(__name__)


def tone_map(hist: np.ndarray, meters_per_pixel: float) -> np.ndarray:
    """
    Invert and compress a density histogram in place.

    Each cell becomes ``(1 - min(1, h * 0.6 / mpp**2)) ** 6``: empty cells are
    white (1.0), dense cells go to black (0.0). Dividing by ``mpp**2`` keeps
    contrast comparable between coarse and fine calibrations.

    Args:
        hist: Accumulated histogram (modified in place)
        meters_per_pixel: Vertical resolution used when rendering

    Returns:
        np.ndarray: the same array, now holding the image
    """
    gain = config.TONE_GAIN / (meters_per_pixel * meters_per_pixel)
    logger.info(f"Tone mapping {hist.shape[0]} x {hist.shape[1]} histogram (gain {gain:.4g})")

    np.multiply(hist, gain, out=hist)
    np.minimum(hist, 1.0, out=hist)
    np.subtract(1.0, hist, out=hist)
    np.power(hist, config.TONE_EXPONENT, out=hist)

    logger.debug(f"Image value range: {hist.min():.4f} to {hist.max():.4f}")
    return hist


def mean_profile(
    hist: np.ndarray, iterations: int = config.PROFILE_SMOOTHING_ITERATIONS
) -> np.ndarray:
    """
    Density-weighted mean row of every histogram column, smoothed.

    Each smoothing pass replaces interior columns by the average of their two
    neighbours from the previous pass; the end columns are kept.

    Args:
        hist: Accumulated (not yet tone-mapped) histogram, shape (ox, oy)
        iterations: Number of smoothing passes

    Returns:
        np.ndarray: float array of length ox with fractional row indices
    """
    rows = np.arange(hist.shape[1], dtype=np.float64)
    zeroth = hist.sum(axis=1)
    first = hist @ rows
    profile = first / (zeroth + config.PROFILE_EPSILON)

    for _ in range(iterations):
        previous = profile.copy()
        profile[1:-1] = 0.5 * (previous[:-2] + previous[2:])

    return profile


def draw_profile(image: np.ndarray, profile: np.ndarray, value: float = 0.0) -> np.ndarray:
    """
    Draw a profile line into a tone-mapped image in place.

    Args:
        image: Image of shape (ox, oy)
        profile: Fractional row per column, as from mean_profile
        value: Pixel value for the line (default black)

    Returns:
        np.ndarray: the same image
    """
    rows = np.clip(profile.astype(np.int64), 0, image.shape[1] - 1)
    image[np.arange(image.shape[0]), rows] = value
    return image
