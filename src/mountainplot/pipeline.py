"""
Single-pass mountain plot pipeline.

Stages run strictly in order:
1. load the elevation raster
2. locate the peak
3. resolve the output geometry
4. accumulate the radial elevation histogram
5. tone map (and optionally overlay the mean profile)
6. write the image

Example:
    from src.mountainplot.pipeline import RenderConfig, run_pipeline

    config = RenderConfig(input_path="dem.png", output_path="profile.png")
    run_pipeline(config)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

from src import config as defaults
from src.mountainplot.geometry import OutputGeometry, resolve_output_geometry
from src.mountainplot.histogram import render_histogram
from src.mountainplot.peaks import Peak, find_peak
from src.mountainplot.raster_io import load_raster, probe_raster, write_raster
from src.mountainplot.transforms import draw_profile, mean_profile, tone_map

logger = logging.getLogger(__name__)


@dataclass
class RenderConfig:
    """Settings for one mountain plot run.

    Size and calibration fields use the command-line sentinels: 0 means
    "derive" for width and height, a non-positive white elevation means
    "no elevation span given", and a non-positive meters-per-pixel means 1.0.
    """

    input_path: Optional[Path] = None
    output_path: Path = Path(defaults.DEFAULT_OUTPUT)
    width: int = 0
    height: int = 0
    elevations: Tuple[float, float] = (0.0, -1.0)
    meters_per_pixel: float = -1.0
    splat: str = defaults.DEFAULT_SPLAT
    falloff: float = defaults.FALLOFF_EXPONENT
    mean_line: bool = False
    preview_path: Optional[Path] = None

    def validate(self) -> None:
        """Raise ValueError for settings that cannot produce an image."""
        if self.input_path is None or str(self.input_path) == "":
            raise ValueError("An input raster path is required")
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Output size must not be negative, got {self.width} x {self.height}"
            )
        if len(self.elevations) != 2:
            raise ValueError(f"Expected two elevations (black, white), got {self.elevations}")
        if self.splat not in defaults.SPLAT_MODES:
            raise ValueError(
                f"Unknown splat mode '{self.splat}', expected one of {defaults.SPLAT_MODES}"
            )


@dataclass
class MountainPlot:
    """Result of rendering a DEM."""

    image: np.ndarray
    """Tone-mapped image, shape (ox, oy), values in [0, 1] for non-negative density."""

    peak: Peak
    geometry: OutputGeometry
    profile: Optional[np.ndarray] = None
    """Smoothed mean row per column when the mean line was requested."""


def accumulate_histogram(
    dem: np.ndarray, config: RenderConfig
) -> Tuple[np.ndarray, Peak, OutputGeometry]:
    """
    Locate the peak, resolve the geometry and accumulate the raw histogram.

    This is the only stage that needs the elevation grid.

    Args:
        dem: Elevation grid (nx, ny), indexed [ix, iy]
        config: Render settings (paths are ignored)

    Returns:
        tuple: (histogram, peak, geometry)
    """
    peak = find_peak(dem)
    logger.info(f"  highest point is at {peak.ix} x {peak.iy} pixels (value {peak.value:.4g})")

    geometry = resolve_output_geometry(
        peak,
        dem.shape,
        width=config.width,
        height=config.height,
        elevations=config.elevations,
        meters_per_pixel=config.meters_per_pixel,
    )

    hist = render_histogram(dem, peak, geometry, splat=config.splat, falloff=config.falloff)
    return hist, peak, geometry


def finish_mountain_plot(
    hist: np.ndarray, peak: Peak, geometry: OutputGeometry, config: RenderConfig
) -> MountainPlot:
    """Tone map a histogram in place and overlay the mean profile if requested."""
    profile = None
    if config.mean_line:
        profile = mean_profile(hist)

    image = tone_map(hist, geometry.calibration.meters_per_pixel)

    if profile is not None:
        draw_profile(image, profile)

    return MountainPlot(image=image, peak=peak, geometry=geometry, profile=profile)


def render_mountain_plot(dem: np.ndarray, config: RenderConfig) -> MountainPlot:
    """
    Render a normalized elevation grid into a mountain plot image.

    Args:
        dem: Elevation grid (nx, ny), indexed [ix, iy]
        config: Render settings (paths are ignored)

    Returns:
        MountainPlot: image plus the peak and geometry it was rendered with
    """
    hist, peak, geometry = accumulate_histogram(dem, config)
    return finish_mountain_plot(hist, peak, geometry, config)


def run_pipeline(config: RenderConfig) -> Path:
    """
    Load a DEM, render it, and write the mountain plot.

    Args:
        config: Render settings

    Returns:
        Path: the written output image

    Raises:
        ValueError: For invalid configuration or unreadable input paths
        OSError: If reading or writing a raster fails
    """
    config.validate()

    width, height = probe_raster(config.input_path)
    dem = load_raster(config.input_path, width, height)

    hist, peak, geometry = accumulate_histogram(dem, config)
    # The grid is not needed past the histogram
    del dem

    result = finish_mountain_plot(hist, peak, geometry, config)

    output_path = write_raster(config.output_path, result.image)

    if config.preview_path is not None:
        from src.mountainplot.preview import save_preview

        save_preview(result.image, result.geometry, config.preview_path)

    return output_path
