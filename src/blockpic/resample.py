import numpy as np

from blockpic.palette import Palette


class UnsupportedResizeError(ValueError):
    """Target grid is larger than the source image in some dimension."""


def box_bounds(source: int, target: int) -> np.ndarray:
    """Boundaries floor(source * i / target) for i in 0..target.

    Pairs of consecutive entries are the half-open source ranges for each
    target cell. They are contiguous, never overlap and cover [0, source).
    """
    return np.arange(target + 1, dtype=np.int64) * source // target


def fit_grid(shape: tuple[int, ...], rows: int, cols: int) -> tuple[int, int]:
    """Clamp a requested grid so it never exceeds the image's height and width."""
    height, width = shape[:2]
    return min(rows, height), min(cols, width)


def _check_target(height: int, width: int, rows: int, cols: int) -> None:
    if rows < 1 or cols < 1:
        raise UnsupportedResizeError(f"Grid must be at least 1x1, got {rows}x{cols}")
    if rows > height or cols > width:
        raise UnsupportedResizeError(
            f"Cannot enlarge {height}x{width} image to a {rows}x{cols} grid (rows x cols); only shrinking is supported"
        )


class Resampler:
    """Box-resamples RGB images onto a grid of palette indices."""

    def __init__(self, palette: Palette):
        self.palette = palette
        self._colours = palette.array
        self._norms = (self._colours * self._colours).sum(axis=1)

    def resample(self, image: np.ndarray, rows: int, cols: int) -> np.ndarray:
        """Return a (rows, cols) uint8 grid of palette indices.

        Each cell takes the palette entry with the lowest summed squared
        distance to every source pixel in its box; the lowest index wins ties.
        """
        height, width = image.shape[:2]
        _check_target(height, width, rows, cols)

        image = np.asarray(image)
        row_bounds = box_bounds(height, rows)
        col_bounds = box_bounds(width, cols)
        starts = col_bounds[:-1]
        widths = np.diff(col_bounds)

        grid = np.empty((rows, cols), dtype=np.uint8)
        # Widened copies never exceed one band of source rows.
        # sum_p |p - c|^2 == sum_p |p|^2 - 2 c . sum_p p + n |c|^2, exact in int64
        for i in range(rows):
            band = image[row_bounds[i] : row_bounds[i + 1]]
            channel_sums = np.add.reduceat(band, starts, axis=1, dtype=np.int64).sum(axis=0)  # (cols, 3)
            squares = (band.astype(np.int32) ** 2).sum(axis=2)
            square_sums = np.add.reduceat(squares, starts, axis=1, dtype=np.int64).sum(axis=0)  # (cols,)
            counts = band.shape[0] * widths

            cost = square_sums[:, None] - 2 * (channel_sums @ self._colours.T) + counts[:, None] * self._norms
            grid[i] = cost.argmin(axis=1)
        return grid

    def quantize(self, image: np.ndarray) -> np.ndarray:
        """Per-pixel nearest palette index, same as resampling to the image's own size."""
        return self.palette.nearest_many(image)
