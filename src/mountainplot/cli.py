"""
Command-line interface for mountain plots.

Usage:
    mountainplot -i dem.png -o profile.png
    mountainplot -i dem.png -o profile.png -e 0 4000 -m 5
    mountainplot -i dem.tif -o profile.png -y 800 --mean-line --preview preview.png
"""

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import Optional, Sequence

from src import config
from src.mountainplot import __version__
from src.mountainplot.pipeline import RenderConfig, run_pipeline

logger = logging.getLogger("mountainplot")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mountainplot",
        description="Generate mountain slope image from input dem/dsm",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Derive everything from the input
  mountainplot -i dem.png -o profile.png

  # Black/white pixels are 0 m and 4000 m, 5 m per output row
  mountainplot -i dem.png -o profile.png -e 0 4000 -m 5

  # Fixed 800 rows, draw the mean profile, save an annotated preview
  mountainplot -i dem.png -y 800 --mean-line --preview preview.png
        """,
    )

    parser.add_argument(
        "-i",
        "--input",
        type=Path,
        required=True,
        help="png DEM for elevations",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path(config.DEFAULT_OUTPUT),
        help=f"png profile output (default: {config.DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "-x",
        "--ox",
        type=int,
        default=0,
        help="force number of pixels in horizontal direction, if not given derive from the input dem",
    )
    parser.add_argument(
        "-y",
        "--oy",
        type=int,
        default=0,
        help="force number of pixels in vertical direction, if not given derive from elevs and mpp",
    )
    parser.add_argument(
        "-e",
        "--elevs",
        type=float,
        nargs=2,
        metavar=("BLACK", "WHITE"),
        default=[0.0, -1.0],
        help="elevation of black and white pixels, meters (default: 0 and derived)",
    )
    parser.add_argument(
        "-m",
        "--mpp",
        type=float,
        default=-1.0,
        help="meters per pixel in the output, default is to assume 1.0",
    )
    parser.add_argument(
        "--splat",
        choices=config.SPLAT_MODES,
        default=config.DEFAULT_SPLAT,
        help=f"how samples are spread into the histogram (default: {config.DEFAULT_SPLAT})",
    )
    parser.add_argument(
        "--falloff",
        type=float,
        default=config.FALLOFF_EXPONENT,
        help=f"distance falloff exponent (default: {config.FALLOFF_EXPONENT})",
    )
    parser.add_argument(
        "--mean-line",
        action="store_true",
        help="draw the smoothed mean elevation profile in black",
    )
    parser.add_argument(
        "--preview",
        type=Path,
        help="also save an annotated matplotlib preview to this path",
    )
    parser.add_argument(
        "--log-level",
        default=config.DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"console log level (default: {config.DEFAULT_LOG_LEVEL})",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="also write a DEBUG log to this file",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def configure_logging(level: str = config.DEFAULT_LOG_LEVEL, log_file: Optional[Path] = None):
    """Send log records to the console, and to a file when requested."""
    handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    handlers.append(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s: %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG if log_file is not None else level,
        handlers=handlers,
        force=True,
    )
    # numba logs every compilation pass at DEBUG
    logging.getLogger("numba").setLevel(logging.WARNING)


def config_from_args(args: argparse.Namespace) -> RenderConfig:
    """Build a RenderConfig from parsed arguments."""
    return RenderConfig(
        input_path=args.input,
        output_path=args.output,
        width=args.ox,
        height=args.oy,
        elevations=(args.elevs[0], args.elevs[1]),
        meters_per_pixel=args.mpp,
        splat=args.splat,
        falloff=args.falloff,
        mean_line=args.mean_line,
        preview_path=args.preview,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    logger.info(f"mountainplot v{__version__}")

    try:
        output_path = run_pipeline(config_from_args(args))
    except KeyboardInterrupt:
        logger.info("[✗] Interrupted by user")
        return 1
    except Exception as e:
        logger.error(f"[✗] Error: {e}")
        logger.debug(traceback.format_exc())
        return 1

    logger.info(f"✓ Profile written to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
