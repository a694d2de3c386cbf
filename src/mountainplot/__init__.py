"""
Mountain plot rendering package.

Turns a DEM/DSM raster into a radial elevation-density image: every sample
is plotted by its horizontal distance from the highest point against its
elevation.

Core functionality:
- find_peak: locate the reference peak
- resolve_output_geometry: output size and elevation calibration
- render_histogram / tone_map: the density image itself
- find_intersection: ray/box boundary intersection
"""

__version__ = "0.1.0"

from .peaks import Peak, find_peak
from .geometry import (
    ElevationCalibration,
    OutputGeometry,
    VerticalMode,
    max_horizontal_distance,
    resolve_output_geometry,
    resolve_vertical,
)
from .histogram import render_histogram
from .transforms import tone_map, mean_profile, draw_profile
from .intersection import find_intersection

__all__ = [
    "Peak",
    "find_peak",
    "ElevationCalibration",
    "OutputGeometry",
    "VerticalMode",
    "max_horizontal_distance",
    "resolve_output_geometry",
    "resolve_vertical",
    "render_histogram",
    "tone_map",
    "mean_profile",
    "draw_profile",
    "find_intersection",
]
