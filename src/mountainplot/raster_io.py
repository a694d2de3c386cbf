"""
Raster input and output for mountain plots.

Input rasters are read with rasterio (any single- or multi-band format GDAL
understands, PNG and GeoTIFF included); only the first band is used and
nodata samples come back as NaN. Output is a 16-bit grayscale PNG written
with Pillow, or a float32 GeoTIFF.

Grids returned and accepted here are indexed ``[ix, iy]`` with ``iy = 0`` at
the bottom image row. Images on disk are stored top row first, so both
directions flip rows and transpose.
"""

import logging
import warnings
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
import rasterio
from rasterio.errors import NotGeoreferencedWarning
from PIL import Image

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

GEOTIFF_SUFFIXES = (".tif", ".tiff")


def image_to_grid(pixels: np.ndarray) -> np.ndarray:
    """Convert a (rows, cols) image, top row first, to an [ix, iy] grid."""
    return np.ascontiguousarray(np.flipud(pixels).T)


def grid_to_image(grid: np.ndarray) -> np.ndarray:
    """Convert an [ix, iy] grid to a (rows, cols) image, top row first."""
    return np.ascontiguousarray(np.flipud(grid.T))


def normalize_band(band: np.ndarray) -> np.ndarray:
    """
    Scale raw band values to normalized elevations.

    Integer data is divided by the maximum of its dtype (255 for 8-bit,
    65535 for 16-bit); floating point data is taken as already normalized.
    """
    if np.issubdtype(band.dtype, np.integer):
        scale = float(np.iinfo(band.dtype).max)
        return (band.astype(np.float64) / scale).astype(np.float32)
    return band.astype(np.float32)


def _check_exists(path: Path) -> None:
    if not path.exists():
        raise ValueError(f"Raster file does not exist: {path}")
    if not path.is_file():
        raise ValueError(f"Path is not a file: {path}")


def probe_raster(path: PathLike) -> Tuple[int, int]:
    """
    Read the pixel dimensions of a raster without loading it.

    Returns:
        tuple: (width, height)

    Raises:
        ValueError: If the file does not exist
        rasterio.errors.RasterioIOError: If the file cannot be opened
    """
    path = Path(path)
    _check_exists(path)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", NotGeoreferencedWarning)
        with rasterio.open(path) as src:
            return src.width, src.height


def load_raster(
    path: PathLike, width: Optional[int] = None, height: Optional[int] = None
) -> np.ndarray:
    """
    Load the first band of a raster as a normalized elevation grid.

    Samples the dataset marks as nodata (its nodata value or mask) become NaN.

    Args:
        path: Raster file
        width: Expected width from probe_raster (optional)
        height: Expected height from probe_raster (optional)

    Returns:
        np.ndarray: float32 grid of shape (width, height), indexed [ix, iy]

    Raises:
        ValueError: If the file does not exist or its size differs from the
            expected one
        rasterio.errors.RasterioIOError: If the file cannot be read
    """
    path = Path(path)
    _check_exists(path)
    logger.info(f"Reading elevations from file ({path})")

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", NotGeoreferencedWarning)
            with rasterio.open(path) as src:
                if src.count == 0:
                    raise ValueError(f"No raster bands found in {path}")
                if src.count > 1:
                    logger.debug(f"{path} has {src.count} bands, using the first")
                band = src.read(1, masked=True)
    except rasterio.errors.RasterioIOError as e:
        logger.error(f"Failed to read {path}: {str(e)}")
        raise

    rows, cols = band.shape
    if (width is not None and width != cols) or (height is not None and height != rows):
        raise ValueError(
            f"Raster {path} is {cols} x {rows} pixels, expected {width} x {height}"
        )

    values = normalize_band(band.data)
    nodata = np.ma.getmaskarray(band)
    if nodata.any():
        logger.info(f"  {int(nodata.sum())} nodata samples set to NaN")
        values[nodata] = np.nan

    grid = image_to_grid(values)
    logger.info(f"  input dem is {cols} x {rows} pixels")
    logger.debug(f"  value range: {np.nanmin(grid):.4f} to {np.nanmax(grid):.4f}")
    return grid


def write_raster(path: PathLike, grid: np.ndarray) -> Path:
    """
    Write a normalized [ix, iy] grid as an image.

    Values are clipped to [0, 1]. ``.tif``/``.tiff`` paths get a float32
    GeoTIFF; every other path gets a 16-bit grayscale PNG.

    Args:
        path: Output file
        grid: Image grid of shape (width, height)

    Returns:
        Path: the written file

    Raises:
        OSError: If the file cannot be written
        rasterio.errors.RasterioIOError: If the GeoTIFF cannot be created
    """
    path = Path(path)
    pixels = grid_to_image(np.clip(grid, 0.0, 1.0))
    rows, cols = pixels.shape
    logger.info(f"Writing profile to {path}")

    try:
        if path.suffix.lower() in GEOTIFF_SUFFIXES:
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", NotGeoreferencedWarning)
                with rasterio.open(
                    path,
                    "w",
                    driver="GTiff",
                    height=rows,
                    width=cols,
                    count=1,
                    dtype="float32",
                ) as dst:
                    dst.write(pixels.astype(np.float32), 1)
        else:
            scaled = np.round(pixels * 65535.0).astype(np.uint16)
            Image.fromarray(scaled).save(path)
    except (OSError, rasterio.errors.RasterioIOError) as e:
        logger.error(f"Failed to write {path}: {str(e)}")
        raise

    logger.debug(f"  wrote {cols} x {rows} pixels")
    return path
