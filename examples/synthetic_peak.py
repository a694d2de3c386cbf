#!/usr/bin/env python3
"""
Synthetic Mountain Plot Example.

Builds a mock DEM with one dominant summit and a lower shoulder, writes it as
a 16-bit PNG, and renders its mountain plot plus an annotated preview.

Usage:
    python examples/synthetic_peak.py
    python examples/synthetic_peak.py --output-dir ./outputs --size 400 --mean-line
"""

import sys
import argparse
import logging
from pathlib import Path

import numpy as np

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.mountainplot.pipeline import RenderConfig, run_pipeline
from src.mountainplot.raster_io import write_raster

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def make_mock_dem(size: int, seed: int = 42) -> np.ndarray:
    """Summit plus shoulder plus a little noise, normalized to [0, 1], indexed [ix, iy]."""
    rng = np.random.default_rng(seed)
    x = np.linspace(-1.0, 1.0, size)
    X, Y = np.meshgrid(x, x, indexing="ij")
    summit = np.exp(-((X - 0.2) ** 2 + (Y - 0.1) ** 2) / 0.08)
    shoulder = 0.6 * np.exp(-((X + 0.4) ** 2 + (Y + 0.3) ** 2) / 0.15)
    dem = summit + shoulder + 0.02 * rng.random((size, size))
    return dem / dem.max()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Render a mountain plot of a synthetic DEM")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("outputs/synthetic_peak"),
        help="Output directory (default: outputs/synthetic_peak/)",
    )
    parser.add_argument("--size", type=int, default=256, help="DEM size in pixels (default: 256)")
    parser.add_argument("--mean-line", action="store_true", help="Draw the mean profile")
    args = parser.parse_args()
    args.output_dir.mkdir(parents=True, exist_ok=True)

    dem_path = write_raster(args.output_dir / "mock_dem.png", make_mock_dem(args.size))
    logger.info(f"✓ Mock DEM: {dem_path}")

    config = RenderConfig(
        input_path=dem_path,
        output_path=args.output_dir / "mountain_plot.png",
        elevations=(0.0, 3000.0),
        meters_per_pixel=5.0,
        mean_line=args.mean_line,
        preview_path=args.output_dir / "mountain_plot_preview.png",
    )
    output_path = run_pipeline(config)
    logger.info(f"✓ Mountain plot: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
