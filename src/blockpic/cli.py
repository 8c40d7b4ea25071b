import argparse
import math
import sys
import time
from pathlib import Path

from blockpic.image import DecodeError, load_image
from blockpic.palette import LoadError, Palette, xterm_palette
from blockpic.render import render
from blockpic.resample import Resampler, UnsupportedResizeError, fit_grid
from blockpic.terminal import get_terminal_size

DEFAULT_PALETTE_FILE = Path("colors.txt")


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _non_negative_seconds(value: str) -> float:
    seconds = float(value)
    if not math.isfinite(seconds) or seconds < 0:
        raise argparse.ArgumentTypeError(f"must be a finite number of seconds >= 0, got {value}")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render an image as 256-colour blocks in the terminal")
    parser.add_argument("image", nargs="?", help="Path to input image")
    parser.add_argument(
        "-p",
        "--palette",
        default=None,
        help=f"Palette file of 256 '<label>:<RRGGBB>' lines (default: ./{DEFAULT_PALETTE_FILE} if present, else xterm)",
    )
    parser.add_argument("-r", "--rows", type=_positive_int, default=None, help="Output rows (default: terminal height)")
    parser.add_argument("-c", "--cols", type=_positive_int, default=None, help="Output columns (default: terminal width)")
    parser.add_argument(
        "-f", "--fit", action="store_true", default=False, help="Shrink the grid to the image instead of failing"
    )
    parser.add_argument(
        "--pause",
        type=_non_negative_seconds,
        default=1.0,
        help="Seconds to hold the frame before returning (default: 1.0)",
    )
    parser.add_argument(
        "--dump-palette", action="store_true", default=False, help="Print the palette in file format and exit"
    )
    return parser


def load_palette(path: str | Path | None) -> Palette:
    """Explicit palette file, else ./colors.txt when it exists, else the xterm palette."""
    if path is not None:
        return Palette.load(path)
    if DEFAULT_PALETTE_FILE.is_file():
        return Palette.load(DEFAULT_PALETTE_FILE)
    return xterm_palette()


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.image is None and not args.dump_palette:
        parser.error("the following arguments are required: image")

    columns, lines = get_terminal_size()
    rows = args.rows if args.rows is not None else lines
    cols = args.cols if args.cols is not None else columns

    try:
        palette = load_palette(args.palette)
        if args.dump_palette:
            sys.stdout.write(palette.dump())
            return
        image = load_image(Path(args.image))
        if args.fit:
            rows, cols = fit_grid(image.shape, rows, cols)
        grid = Resampler(palette).resample(image, rows, cols)
    except (LoadError, DecodeError, UnsupportedResizeError) as e:
        print(f"blockpic: {e}", file=sys.stderr)
        sys.exit(1)

    render(grid)
    time.sleep(args.pause)
    print()
