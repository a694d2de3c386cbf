"""
Annotated preview figures for mountain plots.

The raw output raster has no axes; this renders the same image with
distance and elevation axes in meters for quick inspection.
"""

import logging
from pathlib import Path

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
import numpy as np

from src.mountainplot.geometry import OutputGeometry
from src.mountainplot.raster_io import grid_to_image

logger = logging.getLogger(__name__)


def save_preview(
    image: np.ndarray,
    geometry: OutputGeometry,
    output_path: Path,
    title: str = "Mountain profile",
    figsize: tuple = (10, 6),
    dpi: int = 150,
) -> Path:
    """
    Save a tone-mapped mountain plot with labelled axes.

    Parameters
    ----------
    image : np.ndarray
        Tone-mapped image, shape (ox, oy), indexed [ix, iy]
    geometry : OutputGeometry
        Geometry the image was rendered with
    output_path : Path
        Figure file (format from suffix)
    title : str, optional
        Figure title
    figsize : tuple, optional
        Figure size in inches
    dpi : int, optional
        Output resolution

    Returns
    -------
    Path
        Path to the saved figure
    """
    output_path = Path(output_path)
    mpp = geometry.calibration.meters_per_pixel

    # Horizontal axis is in input pixels; the vertical axis in meters
    extent = (0.0, geometry.max_horizontal, 0.0, geometry.height * mpp)

    fig, ax = plt.subplots(figsize=figsize)
    ax.imshow(
        grid_to_image(image),
        cmap="gray",
        vmin=0.0,
        vmax=1.0,
        extent=extent,
        aspect="auto",
        interpolation="nearest",
    )
    ax.set_xlabel("Distance from peak (input pixels)")
    ax.set_ylabel("Elevation (m)")
    ax.set_title(title)
    fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)

    logger.info(f"✓ Preview figure: {output_path}")
    return output_path
