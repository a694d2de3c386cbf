"""
Output geometry resolution for mountain plots.

Determines the output raster size and the elevation calibration from the
peak location, the input size, and whatever the user fixed on the command
line. Height, meters-per-pixel and elevation span are coupled: any two of
them determine the third, and ``VerticalMode`` says which one is derived.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from numba import jit

from src import config
from src.mountainplot.peaks import Peak

logger = logging.getLogger(__name__)


class VerticalMode(Enum):
    """Which of (height, meters-per-pixel, elevation span) gets derived."""

    DERIVE_HEIGHT = "derive_height"
    """Span and meters-per-pixel are fixed; the row count follows."""

    DERIVE_RESOLUTION = "derive_resolution"
    """Height and span are fixed; meters-per-pixel follows."""

    DERIVE_SPAN = "derive_span"
    """Height and meters-per-pixel are fixed; the white elevation follows."""


@jit(nopython=True, cache=True)
def elevation_meters(value: float, elev_black: float, elev_white: float) -> float:
    """Meters for a normalized sample value (0 is black, 1 is white)."""
    return elev_black + value * (elev_white - elev_black)


@dataclass(frozen=True)
class ElevationCalibration:
    """Maps normalized pixel values to meters and meters to output rows."""

    elev_black: float
    elev_white: float
    meters_per_pixel: float

    def elevation_of(self, value: float) -> float:
        """Linear interpolation between the black and white elevations."""
        return float(elevation_meters(value, self.elev_black, self.elev_white))


@dataclass(frozen=True)
class OutputGeometry:
    """Resolved output raster size and calibration."""

    width: int
    height: int
    max_horizontal: float
    calibration: ElevationCalibration

    @property
    def shape(self) -> Tuple[int, int]:
        """Histogram shape, indexed [ix, iy]."""
        return (self.width, self.height)


def round_half_up(value: float) -> int:
    """Round a non-negative value to the nearest integer, halves rounding up."""
    return int(math.floor(value + 0.5))


def max_horizontal_distance(peak: Peak, shape: Tuple[int, int]) -> float:
    """
    Largest horizontal pixel distance any sample can have from the peak.

    For each axis the farther of the two extents (peak offset, axis length
    minus peak offset) is used, then the two are combined as a Euclidean
    distance.

    Args:
        peak: Peak location
        shape: Input grid shape (nx, ny)

    Returns:
        float: maxhoriz, the upper bound of the output's distance axis
    """
    nx, ny = shape
    extent_x = max(peak.ix, nx - peak.ix)
    extent_y = max(peak.iy, ny - peak.iy)
    return math.sqrt(float(extent_x) ** 2 + float(extent_y) ** 2)


def vertical_mode_for(height: int, elevations: Sequence[float]) -> VerticalMode:
    """
    Translate command-line sentinels into a VerticalMode.

    A height of 0 means "derive the height"; a white elevation that is not
    positive means "no elevation span given".
    """
    if height == 0:
        return VerticalMode.DERIVE_HEIGHT
    if elevations[1] > 0.0:
        return VerticalMode.DERIVE_RESOLUTION
    return VerticalMode.DERIVE_SPAN


def resolve_vertical(
    mode: VerticalMode,
    *,
    height: Optional[int] = None,
    elevations: Sequence[float] = (0.0, -1.0),
    meters_per_pixel: float = config.DEFAULT_METERS_PER_PIXEL,
) -> Tuple[int, ElevationCalibration]:
    """
    Resolve output height and elevation calibration.

    The elevation span is measured from 0 m up to the white elevation,
    because output rows are anchored at 0 m.

    Args:
        mode: Which quantity to derive
        height: Output rows (required for DERIVE_RESOLUTION and DERIVE_SPAN)
        elevations: (black, white) elevations in meters; white is only used
            when positive, except by DERIVE_RESOLUTION which requires it
        meters_per_pixel: Vertical resolution (ignored by DERIVE_RESOLUTION)

    Returns:
        tuple: (height, calibration)

    Raises:
        ValueError: If the inputs required by the mode are missing or the
            resolved height is not positive
    """
    elev_black, elev_white = float(elevations[0]), float(elevations[1])

    if mode is not VerticalMode.DERIVE_RESOLUTION and meters_per_pixel <= 0.0:
        raise ValueError(f"Meters per pixel must be positive, got {meters_per_pixel}")

    if mode is VerticalMode.DERIVE_HEIGHT:
        if elev_white <= 0.0:
            elev_white = config.DEFAULT_ELEVATION_SPAN
        height = round_half_up(elev_white / meters_per_pixel)
    elif mode is VerticalMode.DERIVE_RESOLUTION:
        if not height or height <= 0:
            raise ValueError("DERIVE_RESOLUTION requires a positive output height")
        if elev_white <= 0.0:
            raise ValueError("DERIVE_RESOLUTION requires a positive white elevation")
        meters_per_pixel = elev_white / height
    elif mode is VerticalMode.DERIVE_SPAN:
        if not height or height <= 0:
            raise ValueError("DERIVE_SPAN requires a positive output height")
        elev_black = 0.0
        elev_white = meters_per_pixel * height
    else:
        raise ValueError(f"Unknown vertical mode: {mode}")

    if height <= 0:
        raise ValueError(
            f"Output height resolves to {height} rows "
            f"(white elevation {elev_white}, {meters_per_pixel} m/px)"
        )

    return height, ElevationCalibration(elev_black, elev_white, meters_per_pixel)


def resolve_output_geometry(
    peak: Peak,
    shape: Tuple[int, int],
    width: int = 0,
    height: int = 0,
    elevations: Sequence[float] = (0.0, -1.0),
    meters_per_pixel: float = -1.0,
) -> OutputGeometry:
    """
    Resolve the output raster geometry for a mountain plot.

    Args:
        peak: Peak location in the input grid
        shape: Input grid shape (nx, ny)
        width: Forced output width, 0 to derive it from maxhoriz
        height: Forced output height, 0 to derive it from the elevations
        elevations: (black, white) elevations in meters, white <= 0 to derive
        meters_per_pixel: Vertical resolution, <= 0 for the 1.0 default

    Returns:
        OutputGeometry: resolved size and calibration
    """
    if width < 0 or height < 0:
        raise ValueError(f"Output size must not be negative, got {width} x {height}")

    maxhoriz = max_horizontal_distance(peak, shape)
    logger.info(f"  max horizontal distance is {maxhoriz:.4g} pixels")

    if width == 0:
        width = round_half_up(maxhoriz)

    if meters_per_pixel <= 0.0:
        meters_per_pixel = config.DEFAULT_METERS_PER_PIXEL

    mode = vertical_mode_for(height, elevations)
    logger.debug(f"Vertical resolution mode: {mode.value}")
    height, calibration = resolve_vertical(
        mode,
        height=height or None,
        elevations=elevations,
        meters_per_pixel=meters_per_pixel,
    )

    logger.info(f"  output image will be {width} x {height} pixels")
    logger.info(
        f"  elevs are {calibration.elev_black:g} to {calibration.elev_white:g} meters "
        f"({calibration.meters_per_pixel:g} m/px)"
    )

    return OutputGeometry(width, height, maxhoriz, calibration)
